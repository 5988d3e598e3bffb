from __future__ import annotations

from plan_report.analysis import sort_changes
from plan_report.models import ChangeAction, OutputChange, ResourceChange


def _change(address: str, action: ChangeAction, **kwargs) -> ResourceChange:
    return ResourceChange(address=address, action=action, **kwargs)


def test_orders_by_action_priority_then_address() -> None:
    changes = [
        _change("b.create", ChangeAction.CREATE),
        _change("z.noop", ChangeAction.NOOP),
        _change("c.update", ChangeAction.UPDATE),
        _change("a.create", ChangeAction.CREATE),
        _change("d.replace", ChangeAction.REPLACE),
        _change("e.delete", ChangeAction.DELETE),
    ]

    ordered = [change.address for change in sort_changes(changes)]

    assert ordered == ["e.delete", "d.replace", "c.update", "a.create", "b.create", "z.noop"]


def test_replace_paths_sort_as_replacement() -> None:
    changes = [
        _change("a.update", ChangeAction.UPDATE),
        _change("b.update", ChangeAction.UPDATE, replace_paths=frozenset({("ami",)})),
    ]

    assert [change.address for change in sort_changes(changes)] == ["b.update", "a.update"]


def test_sorting_is_idempotent() -> None:
    changes = [
        _change("x", ChangeAction.CREATE),
        _change("y", ChangeAction.DELETE),
        _change("w", ChangeAction.UPDATE),
    ]

    once = sort_changes(changes)

    assert sort_changes(once) == once


def test_outputs_are_sorted_by_name() -> None:
    outputs = [
        OutputChange(name="endpoint", action=ChangeAction.CREATE),
        OutputChange(name="db_password", action=ChangeAction.UPDATE),
        OutputChange(name="arn", action=ChangeAction.CREATE),
    ]

    assert [output.name for output in sort_changes(outputs)] == ["db_password", "arn", "endpoint"]
