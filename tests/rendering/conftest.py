from __future__ import annotations

import json
from pathlib import Path

import pytest

from plan_report.models import PlanSummary
from plan_report.normalization import PlanNormalizer

FIXTURES = Path(__file__).resolve().parent.parent / "fixtures"


def load_summary(name: str) -> PlanSummary:
    plan = json.loads((FIXTURES / name).read_text(encoding="utf-8"))
    return PlanNormalizer().summarize(plan, plan_file=name)


@pytest.fixture
def mixed_summary() -> PlanSummary:
    return load_summary("plan-mixed.json")


@pytest.fixture
def empty_summary() -> PlanSummary:
    return load_summary("plan-empty.json")


@pytest.fixture
def noop_summary() -> PlanSummary:
    return load_summary("plan-noop.json")
