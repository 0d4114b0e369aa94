"""Modified Internal Rate of Return."""

from __future__ import annotations

import logging
from typing import Optional

from capbudget.analytics.contracts import CashFlowSeries
from capbudget.finance.present_value import discount_factor
from capbudget.finance.utils import finite_or_none, fraction_to_pct

logger = logging.getLogger(__name__)


def mirr(series: CashFlowSeries) -> Optional[float]:
    """Calculate Modified Internal Rate of Return as a percentage.

    Positive flows are compounded forward to period n at the reinvestment
    rate; negative flows (and the initial outlay) are discounted to time 0
    at the cost of capital:

        FV   = sum_{cf>0} cf * (1+reinvest)^(n-i-1)
        PV   = I + sum_{cf<0} |cf| / (1+discount)^(i+1)
        MIRR = (FV / PV)^(1/n) - 1

    Returns
    -------
    float or None
        MIRR in percent, or None when there are no periods, PV is not
        positive, FV is negative (a fractional power of a negative base) or
        the compounded FV exceeds float range.
    """
    n = series.periods
    if n == 0:
        return None

    reinvest = series.reinvestment_fraction
    finance = series.discount_fraction

    fv_positive = 0.0
    pv_negative = series.initial_investment
    for i, cf in enumerate(series.cash_flows):
        if cf > 0:
            try:
                fv_positive += cf * ((1 + reinvest) ** (n - i - 1))
            except OverflowError:
                logger.debug(
                    "MIRR undefined: FV overflows at %.2f%% over %d periods",
                    series.reinvestment_rate,
                    n - i - 1,
                )
                return None
        elif cf < 0:
            pv_negative += abs(cf) * discount_factor(finance, i + 1)

    if pv_negative <= 0 or fv_positive < 0:
        logger.debug("MIRR undefined: FV=%.2f PV=%.2f", fv_positive, pv_negative)
        return None

    return finite_or_none(fraction_to_pct((fv_positive / pv_negative) ** (1.0 / n) - 1.0))


__all__ = ["mirr"]
