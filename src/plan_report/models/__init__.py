"""Data models for canonical plan changes and derived report aggregates."""

from .change import (
    AttributePath,
    ChangeAction,
    DangerLevel,
    OutputChange,
    PropertyChange,
    PropertyChangeAnalysis,
    ResourceChange,
    format_path,
    path_within,
)
from .summary import PlanMetadata, PlanSummary, RiskAssessment, Statistics

__all__ = [
    "AttributePath",
    "ChangeAction",
    "DangerLevel",
    "OutputChange",
    "PlanMetadata",
    "PlanSummary",
    "PropertyChange",
    "PropertyChangeAnalysis",
    "ResourceChange",
    "RiskAssessment",
    "Statistics",
    "format_path",
    "path_within",
]
