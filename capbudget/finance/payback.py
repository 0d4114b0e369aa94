"""Payback period calculations.

Both the undiscounted and the discounted payback walk the period flows,
accumulating a running total until it first reaches the initial
investment, then interpolate linearly within the recovery period.
"""

from __future__ import annotations

import logging
from typing import Sequence

from capbudget.analytics.contracts import NOT_RECOVERED, CashFlowSeries, PaybackPeriod
from capbudget.constants import PERCENT
from capbudget.finance.present_value import discounted_cash_flows

logger = logging.getLogger(__name__)


def _recovery_period(flows: Sequence[float], initial_investment: float) -> PaybackPeriod:
    """Fractional number of periods until cumulative flows cover the investment.

    A period whose own flow is zero or negative cannot be the recovery
    period, even if the running total already covers the investment; the
    walk continues to the next positive flow.
    """
    cumulative = 0.0
    for completed_periods, flow in enumerate(flows):
        prev_cumulative = cumulative
        cumulative += flow

        if cumulative >= initial_investment and flow > 0.0:
            shortfall = initial_investment - prev_cumulative
            fraction = shortfall / flow
            return PaybackPeriod(years=completed_periods + fraction)

    logger.debug(
        "Investment %.2f not recovered over %d periods (cumulative %.2f)",
        initial_investment,
        len(flows),
        cumulative,
    )
    return NOT_RECOVERED


def payback(series: CashFlowSeries) -> PaybackPeriod:
    """Undiscounted payback period in years.

    Returns NOT_RECOVERED if cumulative cash flows never reach the initial
    investment.

    Examples
    --------
    >>> from capbudget.analytics.contracts import make_series
    >>> payback(make_series(100.0, [40.0, 40.0, 40.0], 10.0)).years
    2.5
    """
    return _recovery_period(series.cash_flows, series.initial_investment)


def discounted_payback(series: CashFlowSeries) -> PaybackPeriod:
    """Payback period on flows discounted at the series discount rate."""
    flows = discounted_cash_flows(series.cash_flows, series.discount_fraction)
    return _recovery_period(flows, series.initial_investment)


def payback_reciprocal(series: CashFlowSeries) -> float:
    """100 / payback, a rough IRR proxy for long-lived, even-flow projects.

    Returns 0.0 when the investment is never recovered (or recovered at
    time zero, where the reciprocal is unbounded).
    """
    result = payback(series)
    if result.years is None or result.years <= 0.0:
        return 0.0
    return PERCENT / result.years


__all__ = ["payback", "discounted_payback", "payback_reciprocal"]
