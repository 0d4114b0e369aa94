"""Net Present Value and Profitability Index."""

from __future__ import annotations

from typing import Optional

from capbudget.analytics.contracts import CashFlowSeries
from capbudget.finance.present_value import present_value
from capbudget.finance.utils import safe_ratio


def npv(series: CashFlowSeries) -> float:
    """Classic periodic Net Present Value.

    NPV = sum_{t=1..N} CF[t] / (1+r)^t - initial_investment

    Positive means the project creates value at the stated discount rate,
    zero is indifference, negative destroys value.
    """
    return present_value(series.cash_flows, series.discount_fraction) - series.initial_investment


def profitability_index(series: CashFlowSeries) -> Optional[float]:
    """Present value of inflows per unit of initial investment.

    PI > 1 is equivalent to NPV > 0; the ratio form ranks projects of
    different size under capital rationing. Returns None when the initial
    investment is zero.
    """
    pv = present_value(series.cash_flows, series.discount_fraction)
    return safe_ratio(pv, series.initial_investment)


__all__ = ["npv", "profitability_index"]
