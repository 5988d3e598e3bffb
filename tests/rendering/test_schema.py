from __future__ import annotations

import pytest

from plan_report.rendering import (
    OutputFormat,
    Section,
    UnsupportedFormatError,
    build_schema,
)


def test_resource_headers_per_format() -> None:
    assert build_schema(Section.RESOURCES, OutputFormat.JSON).headers == (
        "Action",
        "Resource",
        "Type",
        "ID",
        "Replacement",
        "Module",
        "Danger",
        "Property Changes",
    )
    assert build_schema(Section.RESOURCES, OutputFormat.TABLE).headers == (
        "ACTION",
        "RESOURCE",
        "TYPE",
        "ID",
        "REPLACEMENT",
        "MODULE",
        "DANGER",
        "PROPERTY CHANGES",
    )


def test_statistics_and_output_headers() -> None:
    assert build_schema(Section.STATISTICS, OutputFormat.MARKDOWN).headers == (
        "Total Changes",
        "Added",
        "Removed",
        "Modified",
        "Replacements",
        "High Risk",
        "Unmodified",
    )
    assert build_schema(Section.OUTPUTS, OutputFormat.CSV).headers == (
        "Name",
        "Action",
        "Current",
        "Planned",
        "Sensitive",
    )


@pytest.mark.parametrize("section", list(Section))
def test_field_keys_are_identical_across_formats(section: Section) -> None:
    keys = {build_schema(section, output_format).keys for output_format in OutputFormat}

    assert len(keys) == 1


def test_collapsible_policy_per_format() -> None:
    collapsible = {
        output_format: build_schema(Section.RESOURCES, output_format).collapsible
        for output_format in OutputFormat
    }

    assert collapsible == {
        OutputFormat.TABLE: True,
        OutputFormat.JSON: False,
        OutputFormat.HTML: True,
        OutputFormat.MARKDOWN: True,
        OutputFormat.CSV: False,
    }


def test_schemas_are_cached() -> None:
    assert build_schema(Section.OUTPUTS, OutputFormat.HTML) is build_schema(
        Section.OUTPUTS, OutputFormat.HTML
    )


def test_parse_is_case_insensitive() -> None:
    assert OutputFormat.parse("Markdown") is OutputFormat.MARKDOWN
    assert OutputFormat.parse(" JSON ") is OutputFormat.JSON


def test_parse_rejects_unknown_formats() -> None:
    with pytest.raises(UnsupportedFormatError) as excinfo:
        OutputFormat.parse("xml")

    assert excinfo.value.valid_formats == ("table", "json", "html", "markdown", "csv")
    assert "xml" in str(excinfo.value)
    assert isinstance(excinfo.value, ValueError)
