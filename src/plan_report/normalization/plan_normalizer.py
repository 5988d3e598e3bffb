"""Conversion helpers that turn raw Terraform plan JSON into change models."""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, List, Mapping, Set, Tuple

from ..analysis import RiskClassifier, build_summary
from ..models import (
    AttributePath,
    ChangeAction,
    OutputChange,
    PlanMetadata,
    PlanSummary,
    ResourceChange,
)

logger = logging.getLogger(__name__)

_MODULE_SEGMENT = re.compile(r"module\.([^.\[]+)")

_SINGLE_ACTIONS = {
    "no-op": ChangeAction.NOOP,
    "create": ChangeAction.CREATE,
    "update": ChangeAction.UPDATE,
    "delete": ChangeAction.DELETE,
    "read": ChangeAction.NOOP,
}


class PlanNormalizer:
    """Normalize Terraform plan JSON into :class:`ResourceChange` and :class:`OutputChange`."""

    def normalize(
        self,
        plan: Mapping[str, Any],
        *,
        plan_file: str | None = None,
    ) -> Tuple[List[ResourceChange], List[OutputChange], PlanMetadata]:
        """Return resource changes, output changes and metadata for ``plan``."""

        resource_changes: Iterable[Mapping[str, Any]] = plan.get("resource_changes") or []
        resources = [self._normalize_change(change) for change in resource_changes]

        output_changes: Mapping[str, Any] = plan.get("output_changes") or {}
        outputs = [
            self._normalize_output(name, change)
            for name, change in sorted(output_changes.items())
        ]

        metadata = PlanMetadata(
            plan_file=plan_file,
            terraform_version=plan.get("terraform_version"),
            format_version=plan.get("format_version"),
            workspace=plan.get("workspace"),
        )

        logger.debug(
            "Normalized %d resource change(s), %d output change(s)", len(resources), len(outputs)
        )
        return resources, outputs, metadata

    def summarize(
        self,
        plan: Mapping[str, Any],
        classifier: RiskClassifier | None = None,
        *,
        plan_file: str | None = None,
    ) -> PlanSummary:
        resources, outputs, metadata = self.normalize(plan, plan_file=plan_file)
        return build_summary(resources, outputs, classifier=classifier, metadata=metadata)

    # ------------------------------------------------------------------
    def _normalize_change(self, change: Mapping[str, Any]) -> ResourceChange:
        details: Mapping[str, Any] = change.get("change") or {}
        before = details.get("before")
        after = details.get("after")

        sensitive: Set[AttributePath] = set()
        sensitive.update(flatten_marks(details.get("before_sensitive")))
        sensitive.update(flatten_marks(details.get("after_sensitive")))

        return ResourceChange(
            address=change.get("address", ""),
            action=self._normalize_action(details.get("actions") or []),
            resource_type=change.get("type", ""),
            name=change.get("name", ""),
            provider=change.get("provider_name", "") or "",
            module=self._module_path(change.get("module_address")),
            before=before,
            after=after,
            replace_paths=frozenset(
                tuple(path) for path in details.get("replace_paths") or [] if isinstance(path, list)
            ),
            sensitive_attributes=frozenset(sensitive),
            unknown_attributes=frozenset(flatten_marks(details.get("after_unknown"))),
            physical_id=self._physical_id(before),
        )

    def _normalize_output(self, name: str, change: Mapping[str, Any]) -> OutputChange:
        action = self._normalize_action(change.get("actions") or [])
        if action is ChangeAction.REPLACE:
            action = ChangeAction.UPDATE
        unknown = frozenset(flatten_marks(change.get("after_unknown")))

        return OutputChange(
            name=name,
            action=action,
            sensitive=bool(change.get("before_sensitive")) or bool(change.get("after_sensitive")),
            before=change.get("before"),
            after=change.get("after"),
            after_unknown=() in unknown,
            unknown_attributes=unknown,
        )

    def _module_path(self, module_address: str | None) -> Tuple[str, ...]:
        if not module_address:
            return ()
        return tuple(_MODULE_SEGMENT.findall(module_address))

    def _physical_id(self, before: Any) -> str | None:
        if isinstance(before, Mapping) and before.get("id") not in (None, ""):
            return str(before["id"])
        return None

    def _normalize_action(self, actions: Iterable[str]) -> ChangeAction:
        action_list = list(actions)
        if set(action_list) == {"delete", "create"} and len(action_list) == 2:
            return ChangeAction.REPLACE
        if len(action_list) == 1 and action_list[0] in _SINGLE_ACTIONS:
            return _SINGLE_ACTIONS[action_list[0]]

        logger.debug("Treating unrecognized action list %s as no-op", action_list)
        return ChangeAction.NOOP


def flatten_marks(marks: Any, prefix: AttributePath = ()) -> List[AttributePath]:
    """Flatten Terraform's nested ``true`` markers into attribute paths."""

    if marks is True:
        return [prefix]
    paths: List[AttributePath] = []
    if isinstance(marks, Mapping):
        for key, value in marks.items():
            paths.extend(flatten_marks(value, prefix + (key,)))
    elif isinstance(marks, list):
        for index, value in enumerate(marks):
            paths.extend(flatten_marks(value, prefix + (index,)))
    return paths


__all__ = ["PlanNormalizer", "flatten_marks"]
