"""Consolidated utility functions for the finance module."""
import math
from typing import Any, List, Optional, Sequence

from capbudget.constants import PERCENT


def as_float(v: Any, default: Optional[float] = None) -> Optional[float]:
    """Safely convert value to float with fallback."""
    if v is None:
        return default
    try:
        return float(v)
    except (ValueError, TypeError):
        return default


def as_float_list(values: Sequence[Any]) -> List[float]:
    """Convert every element to float; raises ValueError/TypeError on bad input."""
    return [float(v) for v in values]


def pct_to_fraction(rate_pct: float) -> float:
    """10 -> 0.10"""
    return float(rate_pct) / PERCENT


def fraction_to_pct(rate: float) -> float:
    """0.10 -> 10.0"""
    return float(rate) * PERCENT


def finite_or_none(value: Optional[float]) -> Optional[float]:
    """Map NaN / +-inf to None so undefined results never reach callers."""
    if value is None:
        return None
    f = float(value)
    if not math.isfinite(f):
        return None
    return f


def safe_ratio(numerator: float, denominator: float) -> Optional[float]:
    """numerator / denominator, or None when the denominator is zero."""
    if denominator == 0:
        return None
    return finite_or_none(numerator / denominator)
