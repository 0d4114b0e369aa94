"""Capital budgeting contracts and data structures.

Central repository for the input value object and every result dataclass
passed between the finance calculators, the decision layer and reporting.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from capbudget.finance.utils import pct_to_fraction


# =============================================================================
# Inputs
# =============================================================================


@dataclass(frozen=True)
class CashFlowSeries:
    """Cash-flow description of a single capital project.

    Rates are percentages (10 means 10%). ``cash_flows[0]`` is the flow at
    the end of period 1; the initial investment is a positive magnitude
    paid at time 0.
    """

    initial_investment: float
    cash_flows: Tuple[float, ...]
    discount_rate: float
    reinvestment_rate: float = 0.0
    average_annual_profit: float = 0.0
    name: str = "project"

    def __post_init__(self) -> None:
        # Accept any sequence from callers but store it read-only.
        object.__setattr__(self, "cash_flows", tuple(float(cf) for cf in self.cash_flows))

    @property
    def discount_fraction(self) -> float:
        """Discount rate per period as a decimal."""
        return pct_to_fraction(self.discount_rate)

    @property
    def reinvestment_fraction(self) -> float:
        """Reinvestment rate per period as a decimal."""
        return pct_to_fraction(self.reinvestment_rate)

    @property
    def periods(self) -> int:
        return len(self.cash_flows)

    def with_discount_rate(self, discount_rate: float) -> "CashFlowSeries":
        """Copy of this series at another discount rate (percent)."""
        return replace(self, discount_rate=float(discount_rate))


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class PaybackPeriod:
    """Result of a payback calculation.

    ``years`` is None when the investment is never recovered within the
    series; use ``NOT_RECOVERED`` rather than constructing that case.
    """

    years: Optional[float]

    @property
    def recovered(self) -> bool:
        return self.years is not None

    def __str__(self) -> str:
        if self.years is None:
            return "not recovered"
        return f"{self.years:.3f} years"


NOT_RECOVERED = PaybackPeriod(years=None)


@dataclass(frozen=True)
class IrrSolution:
    """Newton-Raphson IRR estimate.

    ``rate`` is a percentage. When ``converged`` is False the rate is a
    best-effort estimate whose convergence was not verified.
    """

    rate: float
    converged: bool
    iterations: int


class Decision(str, Enum):
    """Accept/Reject verdict of a decision rule."""

    ACCEPT = "Accept"
    REJECT = "Reject"

    @classmethod
    def from_bool(cls, accept: bool) -> "Decision":
        return cls.ACCEPT if accept else cls.REJECT


@dataclass(frozen=True)
class Technique:
    """Catalogue entry for one appraisal technique."""

    technique_id: str
    name: str
    category: str
    has_decision_rule: bool = False


@dataclass
class TechniqueResult:
    """One technique's value and (where a rule exists) its verdict."""

    technique_id: str
    name: str
    category: str
    value: Optional[float]
    decision: Optional[Decision] = None


@dataclass
class AppraisalResult:
    """Every appraisal metric for one cash-flow series."""

    series: CashFlowSeries
    npv: float
    pi: Optional[float]
    payback: PaybackPeriod
    payback_reciprocal: float
    discounted_payback: PaybackPeriod
    irr: IrrSolution
    mirr: Optional[float]
    arr: Optional[float]
    average_ror: Optional[float]
    decisions: Dict[str, Decision] = field(default_factory=dict)
    techniques: List[TechniqueResult] = field(default_factory=list)

    def technique(self, technique_id: str) -> TechniqueResult:
        for row in self.techniques:
            if row.technique_id == technique_id:
                return row
        raise KeyError(technique_id)


def make_series(
    initial_investment: float,
    cash_flows: Sequence[float],
    discount_rate: float,
    reinvestment_rate: Optional[float] = None,
    average_annual_profit: float = 0.0,
    name: str = "project",
) -> CashFlowSeries:
    """Build a series; the reinvestment rate defaults to the discount rate."""
    return CashFlowSeries(
        initial_investment=float(initial_investment),
        cash_flows=tuple(cash_flows),
        discount_rate=float(discount_rate),
        reinvestment_rate=float(discount_rate if reinvestment_rate is None else reinvestment_rate),
        average_annual_profit=float(average_annual_profit),
        name=name,
    )


__all__ = [
    "CashFlowSeries",
    "PaybackPeriod",
    "NOT_RECOVERED",
    "IrrSolution",
    "Decision",
    "Technique",
    "TechniqueResult",
    "AppraisalResult",
    "make_series",
]
