"""Canonical change models handed over by the plan ingestion layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, Tuple, Union

PathComponent = Union[str, int]
AttributePath = Tuple[PathComponent, ...]


class ChangeAction(str, Enum):
    """Enumeration of the planned action for a resource or output."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    REPLACE = "replace"
    NOOP = "no-op"


class DangerLevel(str, Enum):
    """Danger classification assigned to a resource change."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _DANGER_RANK[self]


_DANGER_RANK = {
    DangerLevel.NONE: 0,
    DangerLevel.LOW: 1,
    DangerLevel.MEDIUM: 2,
    DangerLevel.HIGH: 3,
}


WHOLE_VALUE_PATH = "(entire value)"


def format_path(path: AttributePath) -> str:
    """Render an attribute path as ``ingress[0].port``."""

    if not path:
        return WHOLE_VALUE_PATH
    rendered = ""
    for component in path:
        if isinstance(component, int):
            rendered += f"[{component}]"
        elif rendered:
            rendered += f".{component}"
        else:
            rendered = str(component)
    return rendered


def path_within(path: AttributePath, candidates: FrozenSet[AttributePath]) -> bool:
    """Return ``True`` when ``path`` or one of its prefixes is in ``candidates``."""

    return any(path[:length] in candidates for length in range(len(path) + 1))


@dataclass(frozen=True, slots=True)
class ResourceChange:
    """One planned mutation of an infrastructure resource."""

    address: str
    action: ChangeAction
    resource_type: str = ""
    name: str = ""
    provider: str = ""
    module: Tuple[str, ...] = ()
    before: Any = None
    after: Any = None
    replace_paths: FrozenSet[AttributePath] = field(default_factory=frozenset)
    sensitive_attributes: FrozenSet[AttributePath] = field(default_factory=frozenset)
    unknown_attributes: FrozenSet[AttributePath] = field(default_factory=frozenset)
    physical_id: str | None = None

    @property
    def identifier(self) -> str:
        return self.address

    @property
    def is_replacement(self) -> bool:
        """Replacements are counted and sorted apart from the other actions."""

        return self.action is ChangeAction.REPLACE or bool(self.replace_paths)

    @property
    def is_after_unknown(self) -> bool:
        return () in self.unknown_attributes

    @property
    def module_display(self) -> str:
        return "/".join(self.module) if self.module else "-"


@dataclass(frozen=True, slots=True)
class OutputChange:
    """One planned mutation of an exposed output value."""

    name: str
    action: ChangeAction
    sensitive: bool = False
    before: Any = None
    after: Any = None
    after_unknown: bool = False
    unknown_attributes: FrozenSet[AttributePath] = field(default_factory=frozenset)

    @property
    def identifier(self) -> str:
        return self.name

    @property
    def is_planned_unknown(self) -> bool:
        """Partly unknown values are shown as unknown as a whole."""

        return self.after_unknown or bool(self.unknown_attributes)

    @property
    def is_replacement(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class PropertyChange:
    """A single attribute that differs between the before and after states."""

    path: AttributePath
    kind: str
    before: Any = None
    after: Any = None
    sensitive: bool = False
    unknown: bool = False
    forces_replacement: bool = False

    @property
    def name(self) -> str:
        return format_path(self.path)


@dataclass(frozen=True, slots=True)
class PropertyChangeAnalysis:
    """Attribute level changes extracted for a resource."""

    changes: Tuple[PropertyChange, ...] = ()
    truncated: bool = False

    @property
    def count(self) -> int:
        return len(self.changes)

    @property
    def has_sensitive(self) -> bool:
        return any(change.sensitive for change in self.changes)
