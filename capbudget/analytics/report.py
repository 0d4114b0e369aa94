"""Tabular views and file exports of an appraisal.

- summary_frame: one row per technique (value + decision).
- cash_flow_schedule: per-period discounting table.
- npv_profile: NPV across a grid of discount rates.
- export_appraisal: CSV / JSON / Excel by file suffix.
- plot_npv_profile: PNG chart of the NPV profile.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Sequence, Union

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402

from capbudget.analytics.contracts import AppraisalResult, CashFlowSeries  # noqa: E402
from capbudget.analytics.evaluate_project import evaluate_project_as_dict  # noqa: E402
from capbudget.constants import NPV_PROFILE_POINTS  # noqa: E402
from capbudget.finance.npv import npv  # noqa: E402
from capbudget.finance.present_value import discount_factor  # noqa: E402

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

SUMMARY_COLUMNS = ["technique_id", "name", "category", "value", "decision"]
SCHEDULE_COLUMNS = [
    "period",
    "cash_flow",
    "discount_factor",
    "discounted_cash_flow",
    "cumulative_cash_flow",
    "cumulative_discounted_cash_flow",
]


def summary_frame(result: AppraisalResult) -> pd.DataFrame:
    """One row per appraisal technique, in catalogue order."""
    rows = [
        {
            "technique_id": row.technique_id,
            "name": row.name,
            "category": row.category,
            "value": row.value,
            "decision": row.decision.value if row.decision is not None else None,
        }
        for row in result.techniques
    ]
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def cash_flow_schedule(series: CashFlowSeries) -> pd.DataFrame:
    """
    Per-period discounting table.

    Period 0 carries the initial outlay (negative); periods 1..n carry the
    series flows. Cumulative columns start from the outlay, so the period in
    which a cumulative column turns non-negative is the payback period.
    """
    rate = series.discount_fraction
    flows = [-series.initial_investment] + list(series.cash_flows)
    df = pd.DataFrame({"period": np.arange(len(flows)), "cash_flow": flows})
    df["discount_factor"] = [discount_factor(rate, int(p)) for p in df["period"]]
    df["discounted_cash_flow"] = df["cash_flow"] * df["discount_factor"]
    df["cumulative_cash_flow"] = df["cash_flow"].cumsum()
    df["cumulative_discounted_cash_flow"] = df["discounted_cash_flow"].cumsum()
    return df[SCHEDULE_COLUMNS]


def _default_rate_grid(series: CashFlowSeries, irr_rate: Optional[float]) -> np.ndarray:
    upper = max(2.0 * series.discount_rate, 10.0)
    if irr_rate is not None and irr_rate > 0:
        upper = max(upper, 2.0 * irr_rate)
    return np.linspace(0.0, upper, NPV_PROFILE_POINTS)


def npv_profile(
    series: CashFlowSeries,
    rates: Optional[Sequence[float]] = None,
    irr_rate: Optional[float] = None,
) -> pd.DataFrame:
    """
    NPV at each discount rate (percent).

    Without explicit rates, the grid spans 0% to twice the larger of the
    discount rate and ``irr_rate`` (at least 10%).
    """
    grid = np.asarray(rates, dtype=float) if rates is not None else _default_rate_grid(series, irr_rate)
    values = [npv(series.with_discount_rate(float(r))) for r in grid]
    return pd.DataFrame({"discount_rate": grid, "npv": values})


# =====================================================================
# Exports
# =====================================================================


def export_appraisal(result: AppraisalResult, path: PathLike) -> Path:
    """
    Write an appraisal to disk; the format follows the suffix.

    - .csv: technique summary
    - .json: flat result mapping
    - .xlsx: Summary, Cash Flows and NPV Profile sheets (openpyxl)
    """
    out = Path(path)
    suffix = out.suffix.lower()
    if suffix not in (".csv", ".json", ".xlsx"):
        raise ValueError(f"Unsupported export format '{suffix}' for {out}")

    out.parent.mkdir(parents=True, exist_ok=True)

    if suffix == ".csv":
        summary_frame(result).to_csv(out, index=False)
    elif suffix == ".json":
        with out.open("w", encoding="utf-8") as f:
            json.dump(evaluate_project_as_dict(result), f, indent=2)
    else:
        with pd.ExcelWriter(out, engine="openpyxl") as writer:
            summary_frame(result).to_excel(writer, sheet_name="Summary", index=False)
            cash_flow_schedule(result.series).to_excel(writer, sheet_name="Cash Flows", index=False)
            npv_profile(result.series, irr_rate=result.irr.rate).to_excel(
                writer, sheet_name="NPV Profile", index=False
            )

    logger.info("Wrote appraisal for '%s' to %s", result.series.name, out)
    return out


def plot_npv_profile(
    series: CashFlowSeries,
    path: PathLike,
    irr_rate: Optional[float] = None,
) -> Path:
    """Save an NPV-vs-discount-rate line chart as PNG."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    profile = npv_profile(series, irr_rate=irr_rate)

    fig, ax = plt.subplots()
    ax.plot(profile["discount_rate"], profile["npv"], marker="o")
    ax.axhline(0.0, linestyle="--", linewidth=1)
    ax.axvline(series.discount_rate, linestyle=":", linewidth=1, label="Discount rate")
    if irr_rate is not None:
        ax.axvline(irr_rate, linestyle="-.", linewidth=1, label="IRR")
    ax.set_xlabel("Discount rate (%)")
    ax.set_ylabel("NPV")
    ax.set_title(f"NPV profile: {series.name}")
    ax.legend()
    fig.tight_layout()
    fig.savefig(out)
    plt.close(fig)

    logger.info("Wrote NPV profile chart to %s", out)
    return out


__all__ = [
    "summary_frame",
    "cash_flow_schedule",
    "npv_profile",
    "export_appraisal",
    "plot_npv_profile",
]
