"""Accept/Reject decision rules and the appraisal technique catalogue."""

from __future__ import annotations

from typing import Dict, Optional

from capbudget.analytics.contracts import Decision, Technique

TRADITIONAL = "Traditional"
DCF = "DCF"

TECHNIQUES: Dict[str, Technique] = {
    t.technique_id: t
    for t in (
        Technique("payback", "Payback Period", TRADITIONAL),
        Technique("payback-reciprocal", "Payback Reciprocal", TRADITIONAL),
        Technique("discounted-payback", "Discounted Payback", TRADITIONAL),
        Technique("arr", "Accounting Rate of Return", TRADITIONAL),
        Technique("avg-ror", "Average Rate of Return", TRADITIONAL),
        Technique("npv", "Net Present Value (NPV)", DCF, has_decision_rule=True),
        Technique("pi", "Profitability Index (PI)", DCF, has_decision_rule=True),
        Technique("irr", "Internal Rate of Return", DCF, has_decision_rule=True),
        Technique("mirr", "Modified IRR", DCF, has_decision_rule=True),
    )
}


def get_technique(technique_id: str) -> Technique:
    """Catalogue entry for a technique id; KeyError if unknown."""
    try:
        return TECHNIQUES[technique_id]
    except KeyError:
        raise KeyError(
            f"Unknown appraisal technique {technique_id!r}; "
            f"expected one of {sorted(TECHNIQUES)}"
        ) from None


def decide(technique_id: str, value: Optional[float], discount_rate: float) -> Decision:
    """Map a computed metric to Accept/Reject.

    - npv: accept iff > 0
    - pi: accept iff > 1
    - irr / mirr: accept iff > discount_rate (both in percent)
    - anything else: accept iff > 0

    An undefined metric (None) is always rejected.
    """
    if value is None:
        return Decision.REJECT

    if technique_id == "pi":
        return Decision.from_bool(value > 1.0)
    if technique_id in ("irr", "mirr"):
        return Decision.from_bool(value > discount_rate)
    return Decision.from_bool(value > 0.0)


def npv_decision(npv_value: Optional[float]) -> Decision:
    return decide("npv", npv_value, 0.0)


def pi_decision(pi_value: Optional[float]) -> Decision:
    return decide("pi", pi_value, 0.0)


def irr_decision(irr_value: Optional[float], discount_rate: float) -> Decision:
    return decide("irr", irr_value, discount_rate)


def mirr_decision(mirr_value: Optional[float], discount_rate: float) -> Decision:
    return decide("mirr", mirr_value, discount_rate)


__all__ = [
    "TECHNIQUES",
    "TRADITIONAL",
    "DCF",
    "get_technique",
    "decide",
    "npv_decision",
    "pi_decision",
    "irr_decision",
    "mirr_decision",
]
