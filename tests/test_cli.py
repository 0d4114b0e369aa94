import io
import json
import subprocess
import sys
from pathlib import Path

import pytest
from rich.console import Console

from capbudget import cli

ROOT = Path(__file__).resolve().parents[1]
SAMPLE = ROOT / "scenarios" / "sample_project.yaml"


def test_cli_runs_text():
    cmd = [sys.executable, "-m", "capbudget.cli", "--config", str(SAMPLE)]
    out = subprocess.check_output(cmd, text=True, cwd=str(ROOT))
    assert "Net Present Value" in out
    assert "Accept" in out


def test_cli_json_defaults_match_reference_project(capsys):
    assert cli.main(["--format", "json"]) == 0
    obj = json.loads(capsys.readouterr().out)

    assert obj["npv"] == pytest.approx(480_326.11, abs=0.5)
    assert obj["payback_years"] == pytest.approx(2.875)
    assert obj["irr_converged"] is True
    assert obj["decisions"] == {"npv": "Accept", "pi": "Accept", "irr": "Accept", "mirr": "Accept"}


def test_cli_inline_inputs(capsys):
    rc = cli.main(
        [
            "--investment",
            "100",
            "--cash-flows",
            "20,20",
            "--discount-rate",
            "10",
            "--name",
            "loser",
            "--format",
            "json",
        ]
    )
    assert rc == 0
    obj = json.loads(capsys.readouterr().out)
    assert obj["name"] == "loser"
    assert obj["payback_recovered"] is False
    assert obj["payback_reciprocal"] == 0.0
    assert obj["decisions"]["npv"] == "Reject"


def test_cli_config_file_and_exports(tmp_path):
    xlsx = tmp_path / "appraisal.xlsx"
    png = tmp_path / "npv.png"
    rc = cli.main(["--config", str(SAMPLE), "--export", str(xlsx), "--chart", str(png)])
    assert rc == 0
    assert xlsx.exists()
    assert png.exists()


def test_cli_unsupported_export_returns_1(tmp_path):
    assert cli.main(["--export", str(tmp_path / "out.txt")]) == 1


def test_cli_missing_config_returns_1(tmp_path):
    assert cli.main(["--config", str(tmp_path / "missing.yaml")]) == 1


def test_cli_invalid_config_returns_1(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("project:\n  cash_flows: [1, 2]\n", encoding="utf-8")
    assert cli.main(["--config", str(bad)]) == 1


def test_cli_rate_below_minus_100_returns_1():
    assert cli.main(["--discount-rate", "-150"]) == 1


def test_cli_invalid_format_exits_2():
    with pytest.raises(SystemExit) as ei:
        cli.parse_args(["--format", "nope"])
    assert ei.value.code == 2


def test_cli_bad_cash_flow_list_exits_2():
    with pytest.raises(SystemExit) as ei:
        cli.parse_args(["--cash-flows", "1,two"])
    assert ei.value.code == 2


def test_cli_show_schema_lists_project_fields():
    buf = io.StringIO()
    cli.render_schema(console=Console(file=buf, width=200))
    out = buf.getvalue()

    assert "initial_investment" in out
    assert "rates.discount_rate_pct" in out
    assert "reinvestment_rate" in out
    assert cli.main(["--show-schema"]) == 0
