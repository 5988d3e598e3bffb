"""Integration tests for the ``iac-plan-report summary`` command."""

from __future__ import annotations

import io
import json
from contextlib import redirect_stdout
from pathlib import Path

import pytest

from plan_report.cli import app
from plan_report.config import CONFIG_ENV_VAR, DEFAULT_CONFIG_FILENAME

FIXTURES = Path(__file__).resolve().parents[1] / "fixtures"
MIXED_PLAN = FIXTURES / "plan-mixed.json"


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


def _run(argv: list[str]) -> tuple[int, str]:
    buffer = io.StringIO()
    with redirect_stdout(buffer):
        exit_code = app.main(argv)
    return exit_code, buffer.getvalue()


def test_summary_prints_table_report() -> None:
    exit_code, output = _run(["summary", str(MIXED_PLAN)])

    assert exit_code == 0
    assert output.startswith("Summary Statistics\n")
    assert "PROPERTY CHANGES" in output
    assert "module.app.aws_instance.web[0]" in output
    assert "secret123" not in output


def test_summary_json_report() -> None:
    exit_code, output = _run(["summary", str(MIXED_PLAN), "--format", "JSON"])

    payload = json.loads(output)
    assert exit_code == 0
    assert payload["Summary Statistics"]["Total Changes"] == 6


def test_fail_on_high_risk() -> None:
    exit_code, _ = _run(["summary", str(MIXED_PLAN), "--fail-on-high-risk"])

    assert exit_code == 1


def test_fail_on_high_risk_passes_for_safe_plans() -> None:
    exit_code, output = _run(["summary", str(FIXTURES / "plan-noop.json"), "--fail-on-high-risk"])

    assert exit_code == 0
    assert "All resources unchanged" in output


def test_output_file_in_second_format(tmp_path: Path) -> None:
    target = tmp_path / "reports" / "plan.html"

    exit_code, output = _run(
        [
            "summary",
            str(MIXED_PLAN),
            "--format",
            "markdown",
            "--output-file",
            str(target),
            "--output-file-format",
            "html",
        ]
    )

    assert exit_code == 0
    assert output.startswith("### Summary Statistics")
    content = target.read_text(encoding="utf-8")
    assert content.startswith("<!DOCTYPE html>")


def test_output_file_defaults_to_display_format(tmp_path: Path) -> None:
    target = tmp_path / "plan.csv"

    exit_code, output = _run(
        ["summary", str(MIXED_PLAN), "--format", "csv", "--output-file", str(target)]
    )

    assert exit_code == 0
    assert target.read_text(encoding="utf-8") == output


def test_working_directory_configuration_is_applied(tmp_path: Path) -> None:
    (tmp_path / DEFAULT_CONFIG_FILENAME).write_text(
        "sensitive_resources:\n  - resource_type: aws_iam_user\n"
        "plan:\n  show-no-ops: true\n",
        encoding="utf-8",
    )

    exit_code, output = _run(["summary", str(MIXED_PLAN), "--format", "json"])

    payload = json.loads(output)
    assert exit_code == 0
    actions = [row["Action"] for row in payload["Resource Changes"]]
    assert actions[-1] == "No-op"


def test_missing_plan_is_an_error(tmp_path: Path) -> None:
    exit_code, output = _run(["summary", str(tmp_path / "missing.json")])

    assert exit_code == 2
    assert output.startswith("Error: Terraform plan file not found")
