"""Discounting primitive shared by NPV, PI, discounted payback and IRR.

All flows follow the end-of-period convention: the flow at index ``i``
(0-based) is received at the end of period ``i + 1`` and is discounted by
``(1 + r) ** (i + 1)``.
"""

from __future__ import annotations

import math
from typing import List, Sequence


class RateDomainError(ValueError):
    """Raised when a per-period rate is at or below -100%."""


def _check_rate(rate_per_period: float) -> float:
    r = float(rate_per_period)
    if r <= -1.0:
        raise RateDomainError(
            f"Rate per period must exceed -100%, got {r:.6f} ({r * 100:.4f}%)"
        )
    return r


def _growth(r: float, period: int) -> float:
    """(1 + r) ** period, saturating to inf when it exceeds float range."""
    try:
        return (1.0 + r) ** period
    except OverflowError:
        return math.inf


def _discount(cash_flow: float, growth: float) -> float:
    if growth == 0.0:
        # (1 + r) ** t underflowed for r just above -100%
        return math.copysign(math.inf, cash_flow) if cash_flow else 0.0
    return cash_flow / growth


def discount_factor(rate_per_period: float, period: int) -> float:
    """1 / (1 + r) ** period; 0.0 once the growth term overflows."""
    r = _check_rate(rate_per_period)
    return _discount(1.0, _growth(r, period))


def discounted_cash_flows(cash_flows: Sequence[float], rate_per_period: float) -> List[float]:
    """Present value of each flow, in period order."""
    r = _check_rate(rate_per_period)
    return [_discount(float(cf), _growth(r, i + 1)) for i, cf in enumerate(cash_flows)]


def present_value(cash_flows: Sequence[float], rate_per_period: float) -> float:
    """Sum of discounted cash flows.

    Parameters
    ----------
    cash_flows : Sequence[float]
        Flows for periods 1..n (index 0 is one period out).
    rate_per_period : float
        Discount rate as a decimal (0.10 for 10%).

    Returns
    -------
    float
        Present value at time 0. An empty series is worth 0.0.

    Examples
    --------
    >>> present_value([125.0, 156.25], 0.25)
    200.0
    """
    return sum(discounted_cash_flows(cash_flows, rate_per_period))


__all__ = [
    "RateDomainError",
    "discount_factor",
    "discounted_cash_flows",
    "present_value",
]
