from __future__ import annotations

import csv
import io

from plan_report.rendering import RenderOptions, render


def _tables(output: str) -> list[list[list[str]]]:
    tables: list[list[list[str]]] = [[]]
    for row in csv.reader(io.StringIO(output)):
        if not row:
            tables.append([])
        else:
            tables[-1].append(row)
    return tables


def test_csv_sections_are_separated_by_blank_rows(mixed_summary) -> None:
    statistics, resources, outputs = _tables(render(mixed_summary, "csv"))

    assert statistics == [
        ["Total Changes", "Added", "Removed", "Modified", "Replacements", "High Risk", "Unmodified"],
        ["6", "1", "1", "2", "1", "1", "1"],
    ]
    assert resources[0][-1] == "Property Changes"
    assert len(resources) == 6
    assert outputs[0] == ["Name", "Action", "Current", "Planned", "Sensitive"]


def test_csv_writes_every_detail(mixed_summary) -> None:
    options = RenderOptions(collapse_threshold=0, auto_expand_dangerous=False)

    _, resources, _ = _tables(render(mixed_summary, "csv", options))

    iam_row = next(row for row in resources if row[1] == "aws_iam_user.ci")
    assert iam_row[-1] == '1 property changed\n~ tags.team = "a" -> "b"'


def test_csv_writes_placeholders_literally(mixed_summary) -> None:
    _, _, outputs = _tables(render(mixed_summary, "csv"))

    assert outputs[1] == [
        "db_password",
        "Modify",
        "(sensitive value)",
        "(sensitive value)",
        "true",
    ]
    assert outputs[2] == ["endpoint", "Add", "-", "(known after apply)", "false"]
