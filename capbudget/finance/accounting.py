"""Accounting-return ratios (no time value of money)."""

from __future__ import annotations

from typing import Optional

from capbudget.analytics.contracts import CashFlowSeries
from capbudget.constants import PERCENT
from capbudget.finance.utils import safe_ratio


def arr(series: CashFlowSeries) -> Optional[float]:
    """Accounting Rate of Return: average profit over average investment (I/2), in percent."""
    ratio = safe_ratio(series.average_annual_profit, series.initial_investment / 2.0)
    return None if ratio is None else ratio * PERCENT


def average_ror(series: CashFlowSeries) -> Optional[float]:
    """Average Rate of Return: average profit over initial investment, in percent."""
    ratio = safe_ratio(series.average_annual_profit, series.initial_investment)
    return None if ratio is None else ratio * PERCENT


__all__ = ["arr", "average_ror"]
