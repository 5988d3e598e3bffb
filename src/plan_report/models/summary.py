"""Aggregate models produced once per analysis run."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from .change import DangerLevel, OutputChange, ResourceChange


@dataclass(frozen=True, slots=True)
class RiskAssessment:
    """Danger level plus the human readable reason behind it."""

    level: DangerLevel
    reason: str = ""


@dataclass(frozen=True, slots=True)
class Statistics:
    """Summary counts for the resource changes of a plan."""

    total: int = 0
    added: int = 0
    removed: int = 0
    modified: int = 0
    replacements: int = 0
    high_risk: int = 0
    unmodified: int = 0

    def __post_init__(self) -> None:
        categories = self.added + self.removed + self.modified + self.replacements + self.unmodified
        if categories != self.total:
            raise ValueError(
                f"Statistics categories sum to {categories} but total is {self.total}"
            )


@dataclass(frozen=True, slots=True)
class PlanMetadata:
    """Descriptive information about the plan being reported."""

    plan_file: Optional[str] = None
    terraform_version: Optional[str] = None
    format_version: Optional[str] = None
    workspace: Optional[str] = None


@dataclass(frozen=True, slots=True)
class PlanSummary:
    """Immutable aggregate root for a single report generation run."""

    resource_changes: Tuple[ResourceChange, ...] = ()
    output_changes: Tuple[OutputChange, ...] = ()
    metadata: PlanMetadata = field(default_factory=PlanMetadata)
    risks: Mapping[str, RiskAssessment] = field(default_factory=lambda: MappingProxyType({}))
    statistics: Statistics = field(default_factory=Statistics)

    def risk_for(self, change: ResourceChange) -> RiskAssessment:
        return self.risks.get(change.address, RiskAssessment(DangerLevel.NONE))

