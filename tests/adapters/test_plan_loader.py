import json
import subprocess
from pathlib import Path
from types import SimpleNamespace

import pytest

from plan_report.adapters import PlanLoader, PlanLoaderError

FIXTURES = Path(__file__).resolve().parent.parent / "fixtures"


def test_load_plan_from_json_artifact():
    loader = PlanLoader(FIXTURES / "plan-mixed.json")

    data = loader.load_plan()

    assert data["format_version"] == "1.2"
    assert len(data["resource_changes"]) == 6


def test_load_plan_from_plan_file(monkeypatch, tmp_path):
    plan_file = tmp_path / "saved-plan.tfplan"
    plan_file.write_text("", encoding="utf-8")

    recorded = {}

    def fake_run(self, args, cwd=None):
        recorded["args"] = args
        recorded["cwd"] = cwd
        return SimpleNamespace(stdout=json.dumps({"format_version": "1.2"}))

    monkeypatch.setattr(PlanLoader, "_run_command", fake_run, raising=False)

    loader = PlanLoader(plan_file, terraform_bin="tofu")
    data = loader.load_plan()

    assert data == {"format_version": "1.2"}
    assert recorded["args"] == ["tofu", "show", "-json", str(plan_file.resolve())]
    assert recorded["cwd"] == plan_file.resolve().parent


def test_missing_plan_raises(tmp_path):
    with pytest.raises(PlanLoaderError, match="not found"):
        PlanLoader(tmp_path / "missing.json").load_plan()


def test_invalid_json_raises(tmp_path):
    plan_path = tmp_path / "broken.json"
    plan_path.write_text("{not json", encoding="utf-8")

    with pytest.raises(PlanLoaderError, match="Invalid JSON"):
        PlanLoader(plan_path).load_plan()


def test_non_object_plan_raises(tmp_path):
    plan_path = tmp_path / "list.json"
    plan_path.write_text("[]", encoding="utf-8")

    with pytest.raises(PlanLoaderError, match="JSON object"):
        PlanLoader(plan_path).load_plan()


def test_missing_executable_is_reported(monkeypatch, tmp_path):
    plan_file = tmp_path / "saved.tfplan"
    plan_file.write_text("", encoding="utf-8")

    def fake_subprocess_run(*args, **kwargs):
        raise FileNotFoundError("terraform")

    monkeypatch.setattr(subprocess, "run", fake_subprocess_run)

    with pytest.raises(PlanLoaderError, match="Executable not found: terraform"):
        PlanLoader(plan_file).load_plan()


def test_failing_command_is_reported(monkeypatch, tmp_path):
    plan_file = tmp_path / "saved.tfplan"
    plan_file.write_text("", encoding="utf-8")

    def fake_subprocess_run(args, **kwargs):
        raise subprocess.CalledProcessError(returncode=1, cmd=args)

    monkeypatch.setattr(subprocess, "run", fake_subprocess_run)

    with pytest.raises(PlanLoaderError, match="failed with exit code 1"):
        PlanLoader(plan_file).load_plan()


def test_command_output_must_be_json(monkeypatch, tmp_path):
    plan_file = tmp_path / "saved.tfplan"
    plan_file.write_text("", encoding="utf-8")

    monkeypatch.setattr(
        PlanLoader,
        "_run_command",
        lambda self, args, cwd=None: SimpleNamespace(stdout="Error: no plan"),
        raising=False,
    )

    with pytest.raises(PlanLoaderError, match="not valid JSON"):
        PlanLoader(plan_file).load_plan()
