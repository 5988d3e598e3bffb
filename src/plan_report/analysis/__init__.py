"""Pure analysis stages: value formatting, risk, statistics, ordering and property diffs."""

from .properties import (
    MAX_PROPERTIES_PER_RESOURCE,
    extract_property_changes,
    format_property_change,
    property_detail_lines,
    summarize_property_changes,
)
from .risk import DEFAULT_STATEFUL_RESOURCE_TYPES, RiskClassifier, RiskSettings
from .sorting import action_priority, sort_changes
from .statistics import aggregate
from .summary import build_summary
from .values import (
    MAX_VALUE_LENGTH,
    SENSITIVE_PLACEHOLDER,
    UNKNOWN_PLACEHOLDER,
    format_value,
)

__all__ = [
    "DEFAULT_STATEFUL_RESOURCE_TYPES",
    "MAX_PROPERTIES_PER_RESOURCE",
    "MAX_VALUE_LENGTH",
    "RiskClassifier",
    "RiskSettings",
    "SENSITIVE_PLACEHOLDER",
    "UNKNOWN_PLACEHOLDER",
    "action_priority",
    "aggregate",
    "build_summary",
    "extract_property_changes",
    "format_property_change",
    "format_value",
    "property_detail_lines",
    "sort_changes",
    "summarize_property_changes",
]
