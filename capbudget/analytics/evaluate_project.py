"""Central project evaluator: every appraisal technique over one series."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from capbudget.analytics.contracts import AppraisalResult, CashFlowSeries, TechniqueResult
from capbudget.analytics.decision import TECHNIQUES, decide
from capbudget.analytics.project_loader import load_series
from capbudget.finance.accounting import arr, average_ror
from capbudget.finance.irr import solve_irr
from capbudget.finance.mirr import mirr
from capbudget.finance.npv import npv, profitability_index
from capbudget.finance.payback import discounted_payback, payback, payback_reciprocal

logger = logging.getLogger(__name__)


def evaluate_project(series: CashFlowSeries, **irr_kwargs: Any) -> AppraisalResult:
    """Run every appraisal technique on a series.

    Parameters
    ----------
    series : CashFlowSeries
        Project inputs.
    **irr_kwargs
        Forwarded to ``solve_irr`` (initial_guess, tolerance, max_iterations).

    Returns
    -------
    AppraisalResult
        All metrics, the decision per DCF technique and one TechniqueResult
        row per catalogue entry.
    """
    npv_value = npv(series)
    pi_value = profitability_index(series)
    payback_value = payback(series)
    reciprocal = payback_reciprocal(series)
    discounted = discounted_payback(series)
    irr_solution = solve_irr(series, **irr_kwargs)
    mirr_value = mirr(series)
    arr_value = arr(series)
    avg_ror_value = average_ror(series)

    values: Dict[str, Optional[float]] = {
        "payback": payback_value.years,
        "payback-reciprocal": reciprocal,
        "discounted-payback": discounted.years,
        "arr": arr_value,
        "avg-ror": avg_ror_value,
        "npv": npv_value,
        "pi": pi_value,
        "irr": irr_solution.rate,
        "mirr": mirr_value,
    }

    techniques: List[TechniqueResult] = []
    decisions = {}
    for technique_id, technique in TECHNIQUES.items():
        value = values[technique_id]
        decision = None
        if technique.has_decision_rule:
            decision = decide(technique_id, value, series.discount_rate)
            decisions[technique_id] = decision
        techniques.append(
            TechniqueResult(
                technique_id=technique_id,
                name=technique.name,
                category=technique.category,
                value=value,
                decision=decision,
            )
        )

    result = AppraisalResult(
        series=series,
        npv=npv_value,
        pi=pi_value,
        payback=payback_value,
        payback_reciprocal=reciprocal,
        discounted_payback=discounted,
        irr=irr_solution,
        mirr=mirr_value,
        arr=arr_value,
        average_ror=avg_ror_value,
        decisions=decisions,
        techniques=techniques,
    )

    logger.info(
        "Project '%s': NPV=%s, IRR=%.2f%%%s, payback=%s (rate %.2f%%)",
        series.name,
        f"{npv_value:,.0f}",
        irr_solution.rate,
        "" if irr_solution.converged else " (unverified)",
        payback_value,
        series.discount_rate,
    )
    return result


def evaluate_config(config_path: str | Path, **irr_kwargs: Any) -> AppraisalResult:
    """Load a YAML/JSON project file and evaluate it."""
    path_obj = Path(config_path)
    logger.info("Evaluating project config: %s", path_obj)
    return evaluate_project(load_series(path_obj), **irr_kwargs)


def evaluate_project_as_dict(
    series_or_result: CashFlowSeries | AppraisalResult,
) -> Dict[str, Any]:
    """Flat, JSON-ready view of an appraisal.

    Payback sentinels become None with an explicit ``*_recovered`` flag;
    decisions are rendered as their string values.
    """
    if isinstance(series_or_result, AppraisalResult):
        result = series_or_result
    else:
        result = evaluate_project(series_or_result)
    series = result.series

    return {
        "name": series.name,
        "initial_investment": series.initial_investment,
        "cash_flows": list(series.cash_flows),
        "discount_rate": series.discount_rate,
        "reinvestment_rate": series.reinvestment_rate,
        "average_annual_profit": series.average_annual_profit,
        "npv": result.npv,
        "pi": result.pi,
        "payback_years": result.payback.years,
        "payback_recovered": result.payback.recovered,
        "payback_reciprocal": result.payback_reciprocal,
        "discounted_payback_years": result.discounted_payback.years,
        "discounted_payback_recovered": result.discounted_payback.recovered,
        "irr": result.irr.rate,
        "irr_converged": result.irr.converged,
        "irr_iterations": result.irr.iterations,
        "mirr": result.mirr,
        "arr": result.arr,
        "average_ror": result.average_ror,
        "decisions": {k: v.value for k, v in result.decisions.items()},
    }


__all__ = [
    "evaluate_project",
    "evaluate_config",
    "evaluate_project_as_dict",
]
