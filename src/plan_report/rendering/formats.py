"""Encoders turning a :class:`ReportDocument` into text, one per output format."""

from __future__ import annotations

import csv
import html
import io
import json
from typing import Any, Callable, Dict, Mapping, Sequence

from .document import (
    Cell,
    CollapsibleValue,
    MessageBlock,
    ReportDocument,
    TableBlock,
    collapsed_rows_message,
)
from .schema import OutputFormat, Section

EXPAND_HINT = "[expand for details]"
DETAIL_INDENT = "    "
HTML_TITLE = "Plan Summary"


def cell_text(value: Cell) -> str:
    """Plain text for scalar cells; booleans use Terraform's spelling."""

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, CollapsibleValue):
        return "\n".join((value.summary,) + value.details)
    return str(value)


# Table -------------------------------------------------------------------------
def render_table(document: ReportDocument) -> str:
    chunks = []
    for block in document.blocks:
        if isinstance(block, MessageBlock):
            chunks.append(f"{block.title}\n{block.message}")
        elif block.collapsed:
            chunks.append(f"{block.title}\n{collapsed_rows_message(len(block.rows))}")
        else:
            chunks.append(block.title + "\n" + _table_body(block))
    return "\n\n".join(chunks) + "\n"


def _table_body(block: TableBlock) -> str:
    headers = block.schema.headers
    keys = block.schema.keys
    rows = [tuple(_table_cell(row[key]) for key in keys) for row in block.rows]

    widths = [max(len(value) for value in column) for column in zip(headers, *rows)]

    def format_row(values: Sequence[str]) -> str:
        return "  ".join(value.ljust(width) for value, width in zip(values, widths, strict=True)).rstrip()

    lines = [format_row(headers)]
    lines.append("  ".join("=" * width for width in widths))
    for row, values in zip(block.rows, rows, strict=True):
        lines.append(format_row(values))
        for key in keys:
            cell = row[key]
            if isinstance(cell, CollapsibleValue) and cell.expanded:
                lines.extend(DETAIL_INDENT + detail for detail in cell.details)
    return "\n".join(lines)


def _table_cell(value: Cell) -> str:
    if isinstance(value, CollapsibleValue):
        if value.details and not value.expanded:
            return f"{value.summary} {EXPAND_HINT}"
        return value.summary
    return cell_text(value)


# JSON --------------------------------------------------------------------------
def render_json(document: ReportDocument) -> str:
    payload: Dict[str, Any] = {}
    for block in document.blocks:
        if isinstance(block, MessageBlock):
            payload[block.title] = block.message
            continue
        rows = [_json_row(block, row) for row in block.rows]
        if block.section is Section.STATISTICS:
            payload[block.title] = rows[0] if rows else {}
        else:
            payload[block.title] = rows
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def _json_row(block: TableBlock, row: Mapping[str, Cell]) -> Dict[str, Any]:
    return {column.header: _json_cell(row[column.key]) for column in block.schema.columns}


def _json_cell(value: Cell) -> Any:
    if isinstance(value, CollapsibleValue):
        return {"Summary": value.summary, "Details": list(value.details)}
    return value


# HTML --------------------------------------------------------------------------
def render_html(document: ReportDocument) -> str:
    parts = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '<meta charset="utf-8">',
        f"<title>{HTML_TITLE}</title>",
        "</head>",
        "<body>",
    ]
    for block in document.blocks:
        parts.append(f"<h3>{html.escape(block.title)}</h3>")
        if isinstance(block, MessageBlock):
            parts.append(f"<p>{html.escape(block.message)}</p>")
            continue
        table = _html_table(block)
        if block.collapsed:
            summary = html.escape(collapsed_rows_message(len(block.rows)))
            parts.append(f"<details><summary>{summary}</summary>\n{table}\n</details>")
        else:
            parts.append(table)
    parts.extend(["</body>", "</html>"])
    return "\n".join(parts) + "\n"


def _html_table(block: TableBlock) -> str:
    lines = ["<table>", "<thead>", "<tr>"]
    lines.extend(f"<th>{html.escape(header)}</th>" for header in block.schema.headers)
    lines.extend(["</tr>", "</thead>", "<tbody>"])
    for row in block.rows:
        cells = "".join(f"<td>{_html_cell(row[key])}</td>" for key in block.schema.keys)
        lines.append(f"<tr>{cells}</tr>")
    lines.extend(["</tbody>", "</table>"])
    return "\n".join(lines)


def _html_cell(value: Cell) -> str:
    if isinstance(value, CollapsibleValue):
        summary = html.escape(value.summary)
        if not value.details:
            return summary
        details = "<br>".join(html.escape(detail) for detail in value.details)
        opening = "<details open>" if value.expanded else "<details>"
        return f"{opening}<summary>{summary}</summary>{details}</details>"
    return html.escape(cell_text(value))


# Markdown ----------------------------------------------------------------------
def render_markdown(document: ReportDocument) -> str:
    chunks = []
    for block in document.blocks:
        if isinstance(block, MessageBlock):
            chunks.append(f"### {block.title}\n\n{_markdown_escape(block.message)}")
            continue
        table = _markdown_table(block)
        if block.collapsed:
            summary = collapsed_rows_message(len(block.rows))
            table = f"<details>\n<summary>{summary}</summary>\n\n{table}\n\n</details>"
        chunks.append(f"### {block.title}\n\n{table}")
    return "\n\n".join(chunks) + "\n"


def _markdown_table(block: TableBlock) -> str:
    lines = [_markdown_row(block.schema.headers)]
    lines.append(_markdown_row(["---"] * len(block.schema.columns)))
    for row in block.rows:
        lines.append(_markdown_row([_markdown_cell(row[key]) for key in block.schema.keys]))
    return "\n".join(lines)


def _markdown_row(values: Sequence[str]) -> str:
    return "| " + " | ".join(values) + " |"


def _markdown_cell(value: Cell) -> str:
    if isinstance(value, CollapsibleValue):
        summary = _markdown_escape(value.summary)
        if not value.details:
            return summary
        details = "<br>".join(_markdown_escape(detail) for detail in value.details)
        opening = "<details open>" if value.expanded else "<details>"
        return f"{opening}<summary>{summary}</summary>{details}</details>"
    return _markdown_escape(cell_text(value))


def _markdown_escape(text: str) -> str:
    escaped = html.escape(text, quote=False).replace("|", "\\|")
    return escaped.replace("\r\n", "<br>").replace("\n", "<br>")


# CSV ---------------------------------------------------------------------------
def render_csv(document: ReportDocument) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    for index, block in enumerate(document.blocks):
        if index:
            writer.writerow([])
        if isinstance(block, MessageBlock):
            writer.writerow([block.message])
            continue
        writer.writerow(block.schema.headers)
        for row in block.rows:
            writer.writerow([cell_text(row[key]) for key in block.schema.keys])
    return buffer.getvalue()


FormatRenderer = Callable[[ReportDocument], str]

FORMAT_RENDERERS: Dict[OutputFormat, FormatRenderer] = {
    OutputFormat.TABLE: render_table,
    OutputFormat.JSON: render_json,
    OutputFormat.HTML: render_html,
    OutputFormat.MARKDOWN: render_markdown,
    OutputFormat.CSV: render_csv,
}


__all__ = [
    "FORMAT_RENDERERS",
    "cell_text",
    "render_csv",
    "render_html",
    "render_json",
    "render_markdown",
    "render_table",
]
