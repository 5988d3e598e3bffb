"""Deterministic ordering of resource and output changes."""

from __future__ import annotations

from typing import Iterable, Protocol, Tuple, TypeVar

from ..models import ChangeAction

ACTION_PRIORITY = {
    ChangeAction.DELETE: 0,
    ChangeAction.REPLACE: 1,
    ChangeAction.UPDATE: 2,
    ChangeAction.CREATE: 3,
    ChangeAction.NOOP: 4,
}


class Sortable(Protocol):
    action: ChangeAction

    @property
    def identifier(self) -> str: ...

    @property
    def is_replacement(self) -> bool: ...


ChangeT = TypeVar("ChangeT", bound=Sortable)


def action_priority(change: Sortable) -> int:
    """Lower values sort first; replace paths promote a change to a replacement."""

    if change.is_replacement:
        return ACTION_PRIORITY[ChangeAction.REPLACE]
    return ACTION_PRIORITY[change.action]


def sort_changes(changes: Iterable[ChangeT]) -> Tuple[ChangeT, ...]:
    return tuple(sorted(changes, key=lambda change: (action_priority(change), change.identifier)))


__all__ = ["ACTION_PRIORITY", "action_priority", "sort_changes"]
