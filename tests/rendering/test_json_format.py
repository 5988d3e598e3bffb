from __future__ import annotations

import json

from plan_report.normalization import PlanNormalizer
from plan_report.rendering import RenderOptions, render


def test_json_report_structure(mixed_summary) -> None:
    payload = json.loads(render(mixed_summary, "json"))

    assert list(payload) == ["Summary Statistics", "Resource Changes", "Output Changes"]
    assert payload["Summary Statistics"] == {
        "Total Changes": 6,
        "Added": 1,
        "Removed": 1,
        "Modified": 2,
        "Replacements": 1,
        "High Risk": 1,
        "Unmodified": 1,
    }
    assert [row["Resource"] for row in payload["Resource Changes"]] == [
        "aws_db_instance.main",
        "module.app.aws_instance.web[0]",
        "aws_iam_user.ci",
        "aws_ssm_parameter.token",
        "aws_security_group.web",
    ]


def test_json_resource_row_values(mixed_summary) -> None:
    rows = json.loads(render(mixed_summary, "json"))["Resource Changes"]
    deleted, replaced = rows[0], rows[1]

    assert deleted["Action"] == "Remove"
    assert deleted["ID"] == "db-123"
    assert deleted["Replacement"] == "N/A"
    assert deleted["Module"] == "-"
    assert deleted["Danger"] == "high: irreversible deletion of stateful resource"
    assert deleted["Property Changes"] == {
        "Summary": "3 properties changed (includes sensitive)",
        "Details": [
            '- engine = "postgres"',
            '- id = "db-123"',
            "- password = (sensitive value)",
        ],
    }

    assert replaced["Action"] == "Replace"
    assert replaced["Replacement"] == "Always"
    assert replaced["Module"] == "app"
    assert replaced["Danger"] == "medium: replacement forced by ami"
    assert replaced["Property Changes"]["Details"] == [
        '~ ami = "ami-old" -> "ami-new"  # forces replacement',
        '~ id = "i-abc" -> (known after apply)',
    ]


def test_json_created_resource_has_no_id(mixed_summary) -> None:
    rows = json.loads(render(mixed_summary, "json"))["Resource Changes"]
    created = rows[-1]

    assert created["Action"] == "Add"
    assert created["ID"] == "-"
    assert created["Replacement"] == "Never"
    assert created["Danger"] == "-"


def test_json_outputs_keep_booleans(mixed_summary) -> None:
    outputs = json.loads(render(mixed_summary, "json"))["Output Changes"]

    assert outputs == [
        {
            "Name": "db_password",
            "Action": "Modify",
            "Current": "(sensitive value)",
            "Planned": "(sensitive value)",
            "Sensitive": True,
        },
        {
            "Name": "endpoint",
            "Action": "Add",
            "Current": "-",
            "Planned": "(known after apply)",
            "Sensitive": False,
        },
    ]


def test_json_shows_no_ops_on_request(mixed_summary) -> None:
    payload = json.loads(render(mixed_summary, "json", RenderOptions(show_no_ops=True)))

    assert payload["Resource Changes"][-1]["Action"] == "No-op"
    assert payload["Output Changes"][-1]["Name"] == "region"


def test_json_ignores_collapse_threshold(mixed_summary) -> None:
    options = RenderOptions(collapse_threshold=1, auto_expand_dangerous=False)

    payload = json.loads(render(mixed_summary, "json", options))

    assert len(payload["Resource Changes"]) == 5


def test_json_partly_unknown_output_is_not_rendered_as_planned_value() -> None:
    plan = {
        "output_changes": {
            "connection": {
                "actions": ["create"],
                "after": {"host": None, "port": 5432},
                "after_unknown": {"host": True},
            }
        }
    }
    summary = PlanNormalizer().summarize(plan)

    row = json.loads(render(summary, "json"))["Output Changes"][0]

    assert row["Planned"] == "(known after apply)"
    assert "null" not in row["Planned"]
