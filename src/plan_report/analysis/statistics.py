"""Summary counts over a set of resource changes."""

from __future__ import annotations

from typing import Callable, Iterable

from ..models import ChangeAction, DangerLevel, ResourceChange, RiskAssessment, Statistics

Classify = Callable[[ResourceChange], RiskAssessment]


def aggregate(changes: Iterable[ResourceChange], classify: Classify) -> Statistics:
    """Count resource changes per category.

    Each change lands in exactly one of added, removed, modified, replacements
    or unmodified; a change carrying replace paths is only counted as a
    replacement. ``high_risk`` is counted independently from the categories.
    """

    counts = {
        "added": 0,
        "removed": 0,
        "modified": 0,
        "replacements": 0,
        "unmodified": 0,
    }
    total = 0
    high_risk = 0

    for change in changes:
        total += 1
        counts[_category(change)] += 1
        if classify(change).level is DangerLevel.HIGH:
            high_risk += 1

    return Statistics(total=total, high_risk=high_risk, **counts)


def _category(change: ResourceChange) -> str:
    if change.is_replacement:
        return "replacements"
    if change.action is ChangeAction.CREATE:
        return "added"
    if change.action is ChangeAction.DELETE:
        return "removed"
    if change.action is ChangeAction.UPDATE:
        return "modified"
    return "unmodified"


__all__ = ["aggregate"]
