from __future__ import annotations

import pytest

from plan_report.analysis.values import (
    MAX_VALUE_LENGTH,
    SENSITIVE_PLACEHOLDER,
    TRUNCATED_INDICATOR,
    UNKNOWN_PLACEHOLDER,
    format_value,
)


@pytest.mark.parametrize(
    "value",
    [None, "", "secret", 42, True, [], {}, {"a": {"b": ["c", {"d": None}]}}],
)
def test_sensitive_values_are_always_masked(value) -> None:
    assert format_value(value, True, False) == SENSITIVE_PLACEHOLDER
    assert format_value(value, True, True) == SENSITIVE_PLACEHOLDER


def test_unknown_values_render_placeholder() -> None:
    assert format_value(None, False, True) == UNKNOWN_PLACEHOLDER
    assert format_value("known", False, True) == UNKNOWN_PLACEHOLDER


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, "-"),
        ("abc", '"abc"'),
        (True, "true"),
        (False, "false"),
        (3, "3"),
        (1.5, "1.5"),
        ([], "[]"),
        ({}, "{}"),
        (["a", 1], '[ "a", 1 ]'),
        ({"b": 2, "a": "x"}, '{ a = "x", b = 2 }'),
        ({"tags": {"env": None}}, "{ tags = { env = null } }"),
    ],
)
def test_plain_values_are_serialized(value, expected) -> None:
    assert format_value(value, False, False) == expected


def test_long_values_are_truncated_with_indicator() -> None:
    rendered = format_value("x" * 500, False, False)

    assert rendered.endswith(TRUNCATED_INDICATOR)
    assert len(rendered) == MAX_VALUE_LENGTH + len(TRUNCATED_INDICATOR)


def test_truncation_can_be_disabled_or_tuned() -> None:
    value = "y" * 300

    assert format_value(value, False, False, max_length=None) == f'"{value}"'
    assert format_value(value, False, False, max_length=10) == '"yyyyyyyyy' + TRUNCATED_INDICATOR


def test_unrenderable_values_degrade_to_placeholder() -> None:
    recursive: list = []
    recursive.append(recursive)

    assert format_value(recursive, False, False) == "<unrenderable list>"


def test_same_input_same_output() -> None:
    value = {"ingress": [{"port": 443}], "name": "web"}

    assert format_value(value, False, False) == format_value(value, False, False)
