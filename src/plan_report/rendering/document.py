"""Format independent report document built from a :class:`PlanSummary`.

The document is the single place where visibility, ordering and collapse
decisions are made. Format renderers only encode what they receive.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence, Tuple, Union

from ..analysis import (
    extract_property_changes,
    format_value,
    property_detail_lines,
    sort_changes,
    summarize_property_changes,
)
from ..analysis.values import ABSENT_PLACEHOLDER, MAX_VALUE_LENGTH
from ..models import (
    ChangeAction,
    DangerLevel,
    OutputChange,
    PlanSummary,
    ResourceChange,
    RiskAssessment,
)
from .schema import (
    OutputField,
    OutputFormat,
    RenderSchema,
    ResourceField,
    Section,
    StatisticsField,
    build_schema,
)

ACTION_DISPLAY = {
    ChangeAction.CREATE: "Add",
    ChangeAction.UPDATE: "Modify",
    ChangeAction.DELETE: "Remove",
    ChangeAction.REPLACE: "Replace",
    ChangeAction.NOOP: "No-op",
}

REPLACEMENT_ALWAYS = "Always"
REPLACEMENT_NEVER = "Never"
NOT_APPLICABLE = "N/A"

ALL_UNCHANGED_MESSAGES = {
    Section.RESOURCES: "All resources unchanged",
    Section.OUTPUTS: "All outputs unchanged",
}


@dataclass(frozen=True, slots=True)
class RenderOptions:
    """Display switches handed to the renderer for a single run."""

    show_details: bool = True
    always_show_sensitive: bool = True
    show_no_ops: bool = False
    expand_all: bool = False
    auto_expand_dangerous: bool = True
    collapse_threshold: int = 50
    max_value_length: int | None = MAX_VALUE_LENGTH

    def __post_init__(self) -> None:
        if self.collapse_threshold < 0:
            raise ValueError("collapse_threshold must not be negative")
        if self.max_value_length is not None and self.max_value_length <= 0:
            raise ValueError("max_value_length must be positive")


@dataclass(frozen=True, slots=True)
class CollapsibleValue:
    """A cell made of a one line summary and optional detail lines."""

    summary: str
    details: Tuple[str, ...] = ()
    expanded: bool = False


Cell = Union[str, int, bool, CollapsibleValue]


@dataclass(frozen=True, slots=True)
class TableBlock:
    section: Section
    schema: RenderSchema
    rows: Tuple[Mapping[str, Cell], ...]
    collapsed: bool = False

    @property
    def title(self) -> str:
        return self.section.heading


@dataclass(frozen=True, slots=True)
class MessageBlock:
    section: Section
    message: str

    @property
    def title(self) -> str:
        return self.section.heading


Block = Union[TableBlock, MessageBlock]


@dataclass(frozen=True, slots=True)
class ReportDocument:
    output_format: OutputFormat
    blocks: Tuple[Block, ...]

    def block_for(self, section: Section) -> Block | None:
        for block in self.blocks:
            if block.section is section:
                return block
        return None


def collapsed_rows_message(count: int) -> str:
    return f"{count} rows hidden, use expand-all to show them"


class DocumentBuilder:
    """Turn a summary into the ordered blocks of a report."""

    def __init__(self, options: RenderOptions | None = None) -> None:
        self.options = options or RenderOptions()

    # ------------------------------------------------------------------
    def build(self, summary: PlanSummary, output_format: OutputFormat) -> ReportDocument:
        blocks: list[Block] = [self._statistics_block(summary, output_format)]

        resources = self._resource_block(summary, output_format)
        if resources is not None:
            blocks.append(resources)

        outputs = self._output_block(summary, output_format)
        if outputs is not None:
            blocks.append(outputs)

        return ReportDocument(output_format=output_format, blocks=tuple(blocks))

    # ------------------------------------------------------------------
    def _statistics_block(self, summary: PlanSummary, output_format: OutputFormat) -> TableBlock:
        statistics = summary.statistics
        row = {
            StatisticsField.TOTAL_CHANGES.value: statistics.total,
            StatisticsField.ADDED.value: statistics.added,
            StatisticsField.REMOVED.value: statistics.removed,
            StatisticsField.MODIFIED.value: statistics.modified,
            StatisticsField.REPLACEMENTS.value: statistics.replacements,
            StatisticsField.HIGH_RISK.value: statistics.high_risk,
            StatisticsField.UNMODIFIED.value: statistics.unmodified,
        }
        return TableBlock(
            section=Section.STATISTICS,
            schema=build_schema(Section.STATISTICS, output_format),
            rows=(row,),
        )

    def _resource_block(self, summary: PlanSummary, output_format: OutputFormat) -> Block | None:
        changes: Sequence[ResourceChange] = summary.resource_changes
        if not changes:
            return None
        if _all_noop(changes) and not self.options.show_no_ops:
            return MessageBlock(Section.RESOURCES, ALL_UNCHANGED_MESSAGES[Section.RESOURCES])

        if not self.options.show_details:
            if not self.options.always_show_sensitive:
                return None
            changes = [
                change
                for change in changes
                if summary.risk_for(change).level.rank >= DangerLevel.MEDIUM.rank
            ]

        visible = sort_changes(self._without_noops(changes))
        if not visible:
            return None

        schema = build_schema(Section.RESOURCES, output_format)
        rows = tuple(
            self._resource_row(change, summary.risk_for(change), schema) for change in visible
        )
        has_high_risk = any(summary.risk_for(change).level is DangerLevel.HIGH for change in visible)
        return TableBlock(
            section=Section.RESOURCES,
            schema=schema,
            rows=rows,
            collapsed=self._section_collapsed(schema, len(rows), has_high_risk),
        )

    def _output_block(self, summary: PlanSummary, output_format: OutputFormat) -> Block | None:
        changes: Sequence[OutputChange] = summary.output_changes
        if not changes:
            return None
        if _all_noop(changes) and not self.options.show_no_ops:
            return MessageBlock(Section.OUTPUTS, ALL_UNCHANGED_MESSAGES[Section.OUTPUTS])

        visible = sort_changes(self._without_noops(changes))
        if not visible:
            return None

        schema = build_schema(Section.OUTPUTS, output_format)
        rows = tuple(self._output_row(change) for change in visible)
        return TableBlock(
            section=Section.OUTPUTS,
            schema=schema,
            rows=rows,
            collapsed=self._section_collapsed(schema, len(rows), False),
        )

    # ------------------------------------------------------------------
    def _resource_row(
        self,
        change: ResourceChange,
        risk: RiskAssessment,
        schema: RenderSchema,
    ) -> Mapping[str, Cell]:
        analysis = extract_property_changes(change)
        details = property_detail_lines(analysis, max_length=self.options.max_value_length)
        expanded = not schema.collapsible or self._cell_expanded(risk)

        return {
            ResourceField.ACTION.value: action_display(change),
            ResourceField.RESOURCE.value: change.address,
            ResourceField.TYPE.value: change.resource_type,
            ResourceField.ID.value: _display_id(change),
            ResourceField.REPLACEMENT.value: _replacement_display(change),
            ResourceField.MODULE.value: change.module_display,
            ResourceField.DANGER.value: danger_display(risk),
            ResourceField.PROPERTY_CHANGES.value: CollapsibleValue(
                summary=summarize_property_changes(analysis),
                details=tuple(details),
                expanded=expanded,
            ),
        }

    def _output_row(self, change: OutputChange) -> Mapping[str, Cell]:
        max_length = self.options.max_value_length
        return {
            OutputField.NAME.value: change.name,
            OutputField.ACTION.value: action_display(change),
            OutputField.CURRENT.value: format_value(
                change.before, change.sensitive, False, max_length=max_length
            ),
            OutputField.PLANNED.value: format_value(
                change.after, change.sensitive, change.is_planned_unknown, max_length=max_length
            ),
            OutputField.SENSITIVE.value: change.sensitive,
        }

    def _without_noops(self, changes: Sequence[Any]) -> list[Any]:
        if self.options.show_no_ops:
            return list(changes)
        return [change for change in changes if change.action is not ChangeAction.NOOP]

    def _cell_expanded(self, risk: RiskAssessment) -> bool:
        if self.options.expand_all:
            return True
        return self.options.auto_expand_dangerous and risk.level is DangerLevel.HIGH

    def _section_collapsed(self, schema: RenderSchema, row_count: int, has_high_risk: bool) -> bool:
        if not schema.collapsible or row_count <= self.options.collapse_threshold:
            return False
        if self.options.expand_all:
            return False
        return not (self.options.auto_expand_dangerous and has_high_risk)


def action_display(change: ResourceChange | OutputChange) -> str:
    if change.is_replacement:
        return ACTION_DISPLAY[ChangeAction.REPLACE]
    return ACTION_DISPLAY[change.action]


def danger_display(risk: RiskAssessment) -> str:
    if risk.level is DangerLevel.NONE:
        return ABSENT_PLACEHOLDER
    if risk.reason:
        return f"{risk.level.value}: {risk.reason}"
    return risk.level.value


def _display_id(change: ResourceChange) -> str:
    if change.action is ChangeAction.CREATE or not change.physical_id:
        return ABSENT_PLACEHOLDER
    return change.physical_id


def _replacement_display(change: ResourceChange) -> str:
    if change.action is ChangeAction.DELETE:
        return NOT_APPLICABLE
    return REPLACEMENT_ALWAYS if change.is_replacement else REPLACEMENT_NEVER


def _all_noop(changes: Sequence[Any]) -> bool:
    return all(change.action is ChangeAction.NOOP for change in changes)


__all__ = [
    "ACTION_DISPLAY",
    "ALL_UNCHANGED_MESSAGES",
    "Block",
    "CollapsibleValue",
    "DocumentBuilder",
    "MessageBlock",
    "RenderOptions",
    "ReportDocument",
    "TableBlock",
    "action_display",
    "collapsed_rows_message",
    "danger_display",
]
