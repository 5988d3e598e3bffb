"""Attribute level diff between the before and after states of a resource."""

from __future__ import annotations

from typing import Any, List, Mapping, Sequence

from ..models import (
    AttributePath,
    PropertyChange,
    PropertyChangeAnalysis,
    ResourceChange,
    path_within,
)
from .values import MAX_VALUE_LENGTH, format_value

MAX_PROPERTIES_PER_RESOURCE = 100
NO_PROPERTIES_CHANGED = "No properties changed"
FORCES_REPLACEMENT_MARKER = "  # forces replacement"

KIND_ADD = "add"
KIND_REMOVE = "remove"
KIND_UPDATE = "update"

_ABSENT = object()


class _LimitReached(Exception):
    pass


class _PropertyWalker:
    def __init__(self, change: ResourceChange, limit: int) -> None:
        self.change = change
        self.limit = limit
        self.collected: List[PropertyChange] = []
        self.truncated = False

    # ------------------------------------------------------------------
    def walk(self, before: Any, after: Any, path: AttributePath) -> None:
        if path and path in self.change.unknown_attributes:
            kind = KIND_ADD if _is_absent(before) else KIND_UPDATE
            self._record(path, kind, before, None, unknown=True)
            return

        if _is_mapping_pair(before, after):
            keys = set(_as_mapping(before)) | set(_as_mapping(after))
            keys.update(self._unknown_children(path, str))
            for key in sorted(keys, key=str):
                self.walk(
                    _as_mapping(before).get(key, _ABSENT),
                    _as_mapping(after).get(key, _ABSENT),
                    path + (key,),
                )
            return

        if _is_sequence_pair(before, after):
            before_items = _as_sequence(before)
            after_items = _as_sequence(after)
            length = max(
                [len(before_items), len(after_items)]
                + [index + 1 for index in self._unknown_children(path, int)]
            )
            for index in range(length):
                self.walk(
                    before_items[index] if index < len(before_items) else _ABSENT,
                    after_items[index] if index < len(after_items) else _ABSENT,
                    path + (index,),
                )
            return

        if _is_absent(before) and _is_absent(after):
            for child in sorted(set(self._unknown_children(path, (str, int))), key=str):
                self.walk(_ABSENT, _ABSENT, path + (child,))
            return
        if _is_absent(before):
            self._record(path, KIND_ADD, None, after)
        elif _is_absent(after):
            self._record(path, KIND_REMOVE, before, None)
        elif before != after:
            self._record(path, KIND_UPDATE, before, after)

    # ------------------------------------------------------------------
    def _unknown_children(self, path: AttributePath, component_type: Any) -> List[Any]:
        depth = len(path)
        return [
            unknown[depth]
            for unknown in self.change.unknown_attributes
            if len(unknown) > depth
            and unknown[:depth] == path
            and isinstance(unknown[depth], component_type)
            and not isinstance(unknown[depth], bool)
        ]

    def _record(
        self,
        path: AttributePath,
        kind: str,
        before: Any,
        after: Any,
        *,
        unknown: bool = False,
    ) -> None:
        if len(self.collected) >= self.limit:
            self.truncated = True
            raise _LimitReached
        self.collected.append(
            PropertyChange(
                path=path,
                kind=kind,
                before=None if _is_absent(before) else before,
                after=after,
                sensitive=path_within(path, self.change.sensitive_attributes),
                unknown=unknown,
                forces_replacement=path_within(path, self.change.replace_paths),
            )
        )


def extract_property_changes(
    change: ResourceChange,
    *,
    limit: int = MAX_PROPERTIES_PER_RESOURCE,
) -> PropertyChangeAnalysis:
    """Collect the leaf attributes that differ between ``before`` and ``after``.

    Maps are compared key by key and lists index by index. Attributes whose
    planned value is unknown are reported with ``unknown=True``. At most
    ``limit`` changes are kept; the analysis is marked truncated beyond that.
    """

    if change.is_after_unknown:
        return PropertyChangeAnalysis()

    walker = _PropertyWalker(change, limit)
    before = {} if change.before is None else change.before
    after = {} if change.after is None else change.after
    try:
        walker.walk(before, after, ())
    except _LimitReached:
        pass
    return PropertyChangeAnalysis(changes=tuple(walker.collected), truncated=walker.truncated)


def summarize_property_changes(analysis: PropertyChangeAnalysis) -> str:
    """One line headline such as ``3 properties changed (includes sensitive)``."""

    if not analysis.count:
        return NO_PROPERTIES_CHANGED
    noun = "property" if analysis.count == 1 else "properties"
    summary = f"{analysis.count} {noun} changed"
    if analysis.has_sensitive:
        summary += " (includes sensitive)"
    if analysis.truncated:
        summary += " [truncated]"
    return summary


def format_property_change(change: PropertyChange, *, max_length: int | None = MAX_VALUE_LENGTH) -> str:
    """Render a property change in Terraform's diff notation."""

    before = format_value(change.before, change.sensitive, False, max_length=max_length)
    after = format_value(change.after, change.sensitive, change.unknown, max_length=max_length)

    if change.kind == KIND_ADD:
        line = f"+ {change.name} = {after}"
    elif change.kind == KIND_REMOVE:
        line = f"- {change.name} = {before}"
    else:
        line = f"~ {change.name} = {before} -> {after}"

    if change.forces_replacement:
        line += FORCES_REPLACEMENT_MARKER
    return line


def property_detail_lines(
    analysis: PropertyChangeAnalysis,
    *,
    max_length: int | None = MAX_VALUE_LENGTH,
) -> Sequence[str]:
    return tuple(format_property_change(change, max_length=max_length) for change in analysis.changes)


def _is_absent(value: Any) -> bool:
    return value is _ABSENT or value is None


def _is_mapping_pair(before: Any, after: Any) -> bool:
    return isinstance(before, Mapping) and (isinstance(after, Mapping) or _is_absent(after)) or (
        isinstance(after, Mapping) and _is_absent(before)
    )


def _is_sequence_pair(before: Any, after: Any) -> bool:
    return isinstance(before, list) and (isinstance(after, list) or _is_absent(after)) or (
        isinstance(after, list) and _is_absent(before)
    )


def _as_mapping(value: Any) -> Mapping[Any, Any]:
    return value if isinstance(value, Mapping) else {}


def _as_sequence(value: Any) -> Sequence[Any]:
    return value if isinstance(value, list) else []


__all__ = [
    "MAX_PROPERTIES_PER_RESOURCE",
    "NO_PROPERTIES_CHANGED",
    "extract_property_changes",
    "format_property_change",
    "property_detail_lines",
    "summarize_property_changes",
]
