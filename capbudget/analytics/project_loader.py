"""
Project configuration loader.

Responsibilities:
- Load YAML / JSON project files.
- Register the 'project' field specs used by the schema guard.
- Build a CashFlowSeries from grouped (project / rates sections) or flat keys.

Numbers are only checked for presence and numeric type here; the finance
calculators assume well-formed finite inputs.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict

import yaml

from capbudget.analytics.config_schema import RequiredFieldSpec, register_required_fields
from capbudget.analytics.contracts import CashFlowSeries
from capbudget.analytics.schema_guard import resolve_field, validate_project_config
from capbudget.finance.utils import as_float, as_float_list

logger = logging.getLogger(__name__)


class ProjectConfigError(ValueError):
    """Configuration-level error for project loading."""


# ---------------------------------------------------------------------------
# Field registry
# ---------------------------------------------------------------------------


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    f = as_float(value)
    return f is not None and math.isfinite(f)


def _is_rate_pct(value: Any) -> bool:
    return _is_number(value) and float(value) > -100.0


def _is_flow_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and len(value) > 0 and all(_is_number(v) for v in value)


_PROJECT_SPECS = [
    RequiredFieldSpec(
        module="project",
        name="initial_investment",
        paths=(("project", "initial_investment"), ("initial_investment",)),
        description="Time-0 outlay as a positive amount.",
        validator=_is_number,
    ),
    RequiredFieldSpec(
        module="project",
        name="cash_flows",
        paths=(("project", "cash_flows"), ("cash_flows",)),
        description="Period-end cash flows, first entry is end of period 1.",
        validator=_is_flow_list,
    ),
    RequiredFieldSpec(
        module="project",
        name="discount_rate",
        paths=(("rates", "discount_rate_pct"), ("project", "discount_rate"), ("discount_rate",)),
        description="Cost of capital in percent (10 = 10%).",
        validator=_is_rate_pct,
    ),
    RequiredFieldSpec(
        module="project",
        name="reinvestment_rate",
        paths=(
            ("rates", "reinvestment_rate_pct"),
            ("project", "reinvestment_rate"),
            ("reinvestment_rate",),
        ),
        required=False,
        description="MIRR reinvestment rate in percent; defaults to the discount rate.",
        validator=_is_rate_pct,
    ),
    RequiredFieldSpec(
        module="project",
        name="average_annual_profit",
        paths=(("project", "average_annual_profit"), ("average_annual_profit",)),
        required=False,
        description="Average accounting profit for ARR / Average ROR; defaults to 0.",
        validator=_is_number,
    ),
]

register_required_fields("project", _PROJECT_SPECS)
_SPECS_BY_NAME = {spec.name: spec for spec in _PROJECT_SPECS}


# ---------------------------------------------------------------------------
# Core helpers
# ---------------------------------------------------------------------------


def _load_raw_config(path: Path) -> Dict[str, Any]:
    """Load a raw project configuration from YAML or JSON; the top level must be a mapping."""
    if not path.exists():
        raise FileNotFoundError(f"Project config not found: {path}")

    suffix = path.suffix.lower()
    with path.open("r", encoding="utf-8") as f:
        if suffix in (".yml", ".yaml"):
            data = yaml.safe_load(f)
        elif suffix == ".json":
            data = json.load(f)
        else:
            raise ProjectConfigError(
                f"Unsupported project config extension '{suffix}' for {path}"
            )

    if data is None:
        raise ProjectConfigError(f"Empty configuration in file: {path}")

    if not isinstance(data, dict):
        raise ProjectConfigError(
            f"Expected a mapping at top level of {path}, "
            f"got {type(data).__name__}"
        )

    return data


def _ensure_meta_source(cfg: Dict[str, Any], path: Path) -> None:
    """Attach a 'meta.source_path' breadcrumb, if not already present."""
    meta = cfg.setdefault("meta", {})
    if isinstance(meta, dict):
        meta.setdefault("source_path", str(path))


def _field(config: Dict[str, Any], name: str) -> Any:
    return resolve_field(config, _SPECS_BY_NAME[name].paths)


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------


def load_project_config(path: str | Path) -> Dict[str, Any]:
    """Load a project config and attach meta.source_path."""
    p = Path(path)
    cfg = _load_raw_config(p)
    _ensure_meta_source(cfg, p)
    logger.info("Loaded project config: %s", p)
    return cfg


def series_from_config(config: Dict[str, Any], config_path: str = "<inline>") -> CashFlowSeries:
    """
    Validate a config mapping and build the CashFlowSeries it describes.

    Raises ConfigValidationError when a required field is missing or not
    numeric.
    """
    validate_project_config(config, config_path=config_path)

    discount_rate = float(_field(config, "discount_rate"))
    reinvestment = _field(config, "reinvestment_rate")
    profit = _field(config, "average_annual_profit")

    name = config.get("name")
    if name is None and isinstance(config.get("project"), dict):
        name = config["project"].get("name")
    if name is None:
        name = Path(config_path).stem if config_path != "<inline>" else "project"

    series = CashFlowSeries(
        initial_investment=float(_field(config, "initial_investment")),
        cash_flows=tuple(as_float_list(_field(config, "cash_flows"))),
        discount_rate=discount_rate,
        reinvestment_rate=discount_rate if reinvestment is None else float(reinvestment),
        average_annual_profit=0.0 if profit is None else float(profit),
        name=str(name),
    )
    logger.debug(
        "Project '%s': I=%.2f, %d periods, discount=%.2f%%, reinvest=%.2f%%",
        series.name,
        series.initial_investment,
        series.periods,
        series.discount_rate,
        series.reinvestment_rate,
    )
    return series


def load_series(path: str | Path) -> CashFlowSeries:
    """Load a project file straight into a CashFlowSeries."""
    cfg = load_project_config(path)
    return series_from_config(cfg, config_path=str(path))


__all__ = [
    "ProjectConfigError",
    "load_project_config",
    "series_from_config",
    "load_series",
]
