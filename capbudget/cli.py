"""Command-line runner for the capital budgeting engine.

Evaluate a project from a YAML/JSON config:

    capbudget --config scenarios/sample_project.yaml

or from inline inputs:

    capbudget --investment 1000000 --cash-flows 300000,350000,400000 \
        --discount-rate 10 --reinvestment-rate 8 --average-profit 200000

Options:
    --format table|json   Console output (default: table)
    --export PATH         Write .csv / .json / .xlsx
    --chart PATH          Write the NPV profile as PNG
    --show-schema         List the accepted config fields and exit
    --log-level LEVEL     Logging level (default: WARNING)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from capbudget.analytics.contracts import AppraisalResult, CashFlowSeries, make_series
from capbudget.analytics.config_schema import build_schema_dataframe
from capbudget.analytics.evaluate_project import evaluate_project, evaluate_project_as_dict
from capbudget.analytics.project_loader import ProjectConfigError, load_series
from capbudget.analytics.report import export_appraisal, plot_npv_profile
from capbudget.analytics.schema_guard import ConfigValidationError
from capbudget.constants import (
    DEFAULT_AVERAGE_ANNUAL_PROFIT,
    DEFAULT_CASH_FLOWS,
    DEFAULT_DISCOUNT_RATE,
    DEFAULT_INITIAL_INVESTMENT,
    DEFAULT_REINVESTMENT_RATE,
)
from capbudget.finance.present_value import RateDomainError

logger = logging.getLogger(__name__)


def _parse_cash_flows(text: str) -> List[float]:
    try:
        return [float(part) for part in text.split(",") if part.strip()]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid cash flow list: {text!r}") from exc


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="capbudget",
        description="Capital budgeting appraisal (NPV, PI, IRR, MIRR, payback, ARR).",
    )
    p.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        help="Path to a YAML/JSON project config. Overrides the inline inputs.",
    )
    p.add_argument("--name", type=str, default="project", help="Project label for inline inputs.")
    p.add_argument(
        "--investment",
        type=float,
        default=DEFAULT_INITIAL_INVESTMENT,
        help="Initial investment (positive amount).",
    )
    p.add_argument(
        "--cash-flows",
        type=_parse_cash_flows,
        default=list(DEFAULT_CASH_FLOWS),
        help="Comma-separated period-end cash flows, period 1 first.",
    )
    p.add_argument(
        "--discount-rate",
        type=float,
        default=DEFAULT_DISCOUNT_RATE,
        help="Cost of capital in percent (default: 10).",
    )
    p.add_argument(
        "--reinvestment-rate",
        type=float,
        default=DEFAULT_REINVESTMENT_RATE,
        help="MIRR reinvestment rate in percent (default: 8).",
    )
    p.add_argument(
        "--average-profit",
        type=float,
        default=DEFAULT_AVERAGE_ANNUAL_PROFIT,
        help="Average annual accounting profit for ARR.",
    )
    p.add_argument(
        "--format",
        dest="format",
        choices=["table", "json"],
        default="table",
        help="Console output format.",
    )
    p.add_argument("--export", type=str, default=None, help="Export path (.csv, .json, .xlsx).")
    p.add_argument("--chart", type=str, default=None, help="NPV profile PNG path.")
    p.add_argument(
        "--show-schema",
        action="store_true",
        help="Print the accepted project config fields and exit.",
    )
    p.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    return p


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return _build_parser().parse_args(argv)


def _series_from_args(args: argparse.Namespace) -> CashFlowSeries:
    if args.config:
        return load_series(args.config)
    return make_series(
        initial_investment=args.investment,
        cash_flows=args.cash_flows,
        discount_rate=args.discount_rate,
        reinvestment_rate=args.reinvestment_rate,
        average_annual_profit=args.average_profit,
        name=args.name,
    )


def _fmt(value: Optional[float], suffix: str = "", digits: int = 2) -> str:
    if value is None:
        return "n/a"
    return f"{value:,.{digits}f}{suffix}"


def render_table(result: AppraisalResult, console: Optional[Console] = None) -> None:
    """Print the technique summary as a rich table."""
    console = console or Console()
    table = Table(title=f"Capital budgeting: {result.series.name}")
    table.add_column("Technique")
    table.add_column("Category")
    table.add_column("Value", justify="right")
    table.add_column("Decision")

    pct_ids = {"payback-reciprocal", "arr", "avg-ror", "irr", "mirr"}
    year_ids = {"payback", "discounted-payback"}
    for row in result.techniques:
        if row.technique_id in year_ids:
            text = _fmt(row.value, " yrs", 3) if row.value is not None else "not recovered"
        elif row.technique_id in pct_ids:
            text = _fmt(row.value, "%")
            if row.technique_id == "irr" and not result.irr.converged:
                text += " (unverified)"
        elif row.technique_id == "pi":
            text = _fmt(row.value, digits=3)
        else:
            text = _fmt(row.value, digits=0)
        decision = row.decision.value if row.decision is not None else ""
        table.add_row(row.name, row.category, text, decision)

    console.print(table)


def render_schema(console: Optional[Console] = None) -> None:
    """Print the project config fields the loader accepts."""
    console = console or Console()
    table = Table(title="Project config fields")
    table.add_column("Field")
    table.add_column("Required")
    table.add_column("Key paths")
    table.add_column("Description")
    for row in build_schema_dataframe("project").itertuples(index=False):
        table.add_row(
            row.name,
            "yes" if row.required else "no",
            "\n".join(row.path_candidates),
            row.description,
        )
    console.print(table)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.show_schema:
        render_schema()
        return 0

    try:
        series = _series_from_args(args)
        result = evaluate_project(series)
    except FileNotFoundError as exc:
        logger.error("%s", exc)
        return 1
    except (ProjectConfigError, ConfigValidationError, RateDomainError) as exc:
        logger.error("Invalid project inputs: %s", exc)
        return 1

    if args.format == "json":
        print(json.dumps(evaluate_project_as_dict(result), indent=2))
    else:
        render_table(result)

    if args.export:
        try:
            export_appraisal(result, args.export)
        except ValueError as exc:
            logger.error("%s", exc)
            return 1
    if args.chart:
        plot_npv_profile(series, args.chart, irr_rate=result.irr.rate)

    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
