"""Assemble the immutable :class:`PlanSummary` for a report run."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterable

from ..models import OutputChange, PlanMetadata, PlanSummary, ResourceChange
from .risk import RiskClassifier
from .statistics import aggregate

logger = logging.getLogger(__name__)


def build_summary(
    resource_changes: Iterable[ResourceChange],
    output_changes: Iterable[OutputChange] = (),
    *,
    classifier: RiskClassifier | None = None,
    metadata: PlanMetadata | None = None,
) -> PlanSummary:
    """Classify every resource change once and compute the statistics.

    Addresses and output names must be unique; duplicates raise ``ValueError``.
    """

    resources = tuple(resource_changes)
    outputs = tuple(output_changes)
    _ensure_unique((change.address for change in resources), "resource address")
    _ensure_unique((change.name for change in outputs), "output name")

    classifier = classifier or RiskClassifier()
    risks = {change.address: classifier.classify(change) for change in resources}
    statistics = aggregate(resources, lambda change: risks[change.address])

    logger.debug(
        "Summarized %d resource change(s) and %d output change(s), %d high risk",
        len(resources),
        len(outputs),
        statistics.high_risk,
    )

    return PlanSummary(
        resource_changes=resources,
        output_changes=outputs,
        metadata=metadata or PlanMetadata(),
        risks=MappingProxyType(risks),
        statistics=statistics,
    )


def _ensure_unique(values: Iterable[str], label: str) -> None:
    seen: set[str] = set()
    for value in values:
        if value in seen:
            raise ValueError(f"Duplicate {label}: {value}")
        seen.add(value)


__all__ = ["build_summary"]
