"""
Unit tests for capbudget.analytics.config_schema + schema_guard.

These tests prove that

- capbudget.analytics.project_loader has registered the project fields
  into the global registry; and
- validate_project_config() catches missing / invalid fields with a clear
  error, while optional fields only warn or pass.
"""

from __future__ import annotations

import pytest

# Import the loader to trigger its module-level schema registration
from capbudget.analytics import project_loader as loader_mod  # noqa: F401
from capbudget.analytics.config_schema import (
    RequiredFieldSpec,
    build_schema_dataframe,
    get_required_fields,
    register_required_fields,
)
from capbudget.analytics.schema_guard import (
    ConfigValidationError,
    resolve_field,
    validate_project_config,
)


def _good_cfg():
    return {
        "project": {
            "initial_investment": 1_000_000,
            "cash_flows": [300_000, 350_000, 400_000],
        },
        "rates": {
            "discount_rate_pct": 10,
        },
    }


def test_project_fields_are_registered():
    specs = get_required_fields("project")
    assert specs, "Expected at least one registered spec for project"

    names = {s.name for s in specs}
    assert {"initial_investment", "cash_flows", "discount_rate"} <= names
    assert {"reinvestment_rate", "average_annual_profit"} <= names

    required = {s.name for s in specs if s.required}
    assert required == {"initial_investment", "cash_flows", "discount_rate"}

    df = build_schema_dataframe()
    assert not df.empty
    assert {"module", "name", "path_candidates"}.issubset(df.columns)
    assert (df["module"] == "project").any()


def test_reregistering_replaces_rather_than_duplicates():
    spec = RequiredFieldSpec(module="scratch", name="x", paths=(("x",),))
    register_required_fields("scratch", [spec])
    register_required_fields("scratch", [spec])
    assert len(get_required_fields("scratch")) == 1


def test_good_config_passes():
    validate_project_config(raw_config=_good_cfg(), config_path="good_unit_test.yaml")


def test_missing_discount_rate_is_reported():
    bad_cfg = _good_cfg()
    bad_cfg.pop("rates")

    with pytest.raises(ConfigValidationError) as excinfo:
        validate_project_config(raw_config=bad_cfg, config_path="bad_unit_test.yaml")

    msg = str(excinfo.value)
    assert "discount_rate" in msg
    assert "bad_unit_test.yaml" in msg


def test_non_numeric_cash_flow_is_reported():
    bad_cfg = _good_cfg()
    bad_cfg["project"]["cash_flows"] = [100, "lots"]

    with pytest.raises(ConfigValidationError, match="cash_flows"):
        validate_project_config(raw_config=bad_cfg, config_path="bad.yaml")


def test_rate_at_minus_100_pct_is_reported():
    bad_cfg = _good_cfg()
    bad_cfg["rates"]["discount_rate_pct"] = -100

    with pytest.raises(ConfigValidationError, match="discount_rate"):
        validate_project_config(raw_config=bad_cfg, config_path="bad.yaml")


def test_invalid_optional_field_is_still_an_error():
    bad_cfg = _good_cfg()
    bad_cfg["rates"]["reinvestment_rate_pct"] = "eight"

    with pytest.raises(ConfigValidationError, match="reinvestment_rate"):
        validate_project_config(raw_config=bad_cfg, config_path="bad.yaml")


def test_resolve_field_prefers_first_candidate_path():
    cfg = {"rates": {"discount_rate_pct": 9}, "discount_rate": 12}
    paths = (("rates", "discount_rate_pct"), ("discount_rate",))
    assert resolve_field(cfg, paths) == 9
    assert resolve_field({"discount_rate": 12}, paths) == 12
    assert resolve_field({}, paths) is None


def test_schema_dataframe_filters_by_module_and_sorts():
    df = build_schema_dataframe("project")

    assert set(df["module"]) == {"project"}
    assert list(df["name"]) == sorted(df["name"])
    row = df.set_index("name").loc["discount_rate"]
    assert row["path_candidates"][0] == "rates.discount_rate_pct"
    assert bool(row["required"]) is True
