"""Danger classification for resource changes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Iterable, Mapping, Tuple

from ..models import (
    AttributePath,
    ChangeAction,
    DangerLevel,
    ResourceChange,
    RiskAssessment,
    format_path,
)

# Data-bearing resource types whose deletion loses state that cannot be recreated.
DEFAULT_STATEFUL_RESOURCE_TYPES: FrozenSet[str] = frozenset(
    {
        "aws_db_instance",
        "aws_docdb_cluster",
        "aws_dynamodb_table",
        "aws_ebs_volume",
        "aws_efs_file_system",
        "aws_elasticache_cluster",
        "aws_elasticsearch_domain",
        "aws_kms_key",
        "aws_neptune_cluster",
        "aws_opensearch_domain",
        "aws_rds_cluster",
        "aws_redshift_cluster",
        "aws_s3_bucket",
        "azurerm_cosmosdb_account",
        "azurerm_key_vault",
        "azurerm_managed_disk",
        "azurerm_mssql_database",
        "azurerm_mysql_flexible_server",
        "azurerm_postgresql_flexible_server",
        "azurerm_storage_account",
        "google_bigquery_dataset",
        "google_compute_disk",
        "google_kms_crypto_key",
        "google_spanner_database",
        "google_sql_database_instance",
        "google_storage_bucket",
    }
)

REASON_STATEFUL_DELETION = "irreversible deletion of stateful resource"
REASON_DELETION = "resource deletion"
REASON_REPLACEMENT = "resource will be replaced"
REASON_UPDATE = "in-place update"


@dataclass(frozen=True, slots=True)
class RiskSettings:
    """Immutable inputs that tune the classifier."""

    stateful_resource_types: FrozenSet[str] = DEFAULT_STATEFUL_RESOURCE_TYPES
    sensitive_properties: Mapping[str, FrozenSet[str]] = field(default_factory=dict)
    update_danger: DangerLevel = DangerLevel.LOW

    def __post_init__(self) -> None:
        if self.update_danger not in (DangerLevel.NONE, DangerLevel.LOW):
            raise ValueError("update_danger must be either 'none' or 'low'")


class RiskClassifier:
    """Assign a :class:`RiskAssessment` to each resource change.

    Rules are evaluated in order and the first match wins:

    1. deleting a stateful resource type is high risk;
    2. a replacement is medium risk, naming the attributes forcing it;
    3. an update touching sensitive attributes is medium risk;
    4. a creation carries no risk;
    5. anything else falls back to the defaults (medium for other deletions,
       the configured level for plain updates, none for no-ops).
    """

    def __init__(self, settings: RiskSettings | None = None) -> None:
        self.settings = settings or RiskSettings()

    # ------------------------------------------------------------------
    def classify(self, change: ResourceChange) -> RiskAssessment:
        if change.action is ChangeAction.DELETE and self.is_stateful(change.resource_type):
            return RiskAssessment(DangerLevel.HIGH, REASON_STATEFUL_DELETION)

        if change.is_replacement:
            reason = REASON_REPLACEMENT
            if change.replace_paths:
                reason = "replacement forced by " + _join_paths(change.replace_paths)
            touched = self.touched_sensitive_paths(change)
            if touched:
                reason += "; also modifies sensitive attribute(s): " + _join_paths(touched)
            return RiskAssessment(DangerLevel.MEDIUM, reason)

        if change.action is ChangeAction.UPDATE:
            touched = self.touched_sensitive_paths(change)
            if touched:
                return RiskAssessment(
                    DangerLevel.MEDIUM,
                    "modifies sensitive attribute(s): " + _join_paths(touched),
                )

        if change.action is ChangeAction.CREATE:
            return RiskAssessment(DangerLevel.NONE)

        return self._default(change)

    # ------------------------------------------------------------------
    def is_stateful(self, resource_type: str) -> bool:
        return resource_type in self.settings.stateful_resource_types

    def sensitive_paths(self, change: ResourceChange) -> FrozenSet[AttributePath]:
        """Sensitive attributes of the change plus configured sensitive properties."""

        configured = self.settings.sensitive_properties.get(change.resource_type, frozenset())
        return change.sensitive_attributes | {(name,) for name in configured}

    def touched_sensitive_paths(self, change: ResourceChange) -> Tuple[AttributePath, ...]:
        touched = []
        for path in self.sensitive_paths(change):
            if change.is_after_unknown or path in change.unknown_attributes:
                touched.append(path)
                continue
            if _lookup(change.before, path) != _lookup(change.after, path):
                touched.append(path)
        return tuple(sorted(touched, key=format_path))

    # ------------------------------------------------------------------
    def _default(self, change: ResourceChange) -> RiskAssessment:
        if change.action is ChangeAction.DELETE:
            return RiskAssessment(DangerLevel.MEDIUM, REASON_DELETION)
        if change.action is ChangeAction.UPDATE:
            level = self.settings.update_danger
            return RiskAssessment(level, REASON_UPDATE if level is not DangerLevel.NONE else "")
        return RiskAssessment(DangerLevel.NONE)


_MISSING = object()


def _lookup(value: Any, path: AttributePath) -> Any:
    current = value
    for component in path:
        if isinstance(component, int):
            if not isinstance(current, (list, tuple)) or not -len(current) <= component < len(current):
                return _MISSING
            current = current[component]
        else:
            if not isinstance(current, Mapping) or component not in current:
                return _MISSING
            current = current[component]
    return current


def _join_paths(paths: Iterable[AttributePath]) -> str:
    return ", ".join(sorted(format_path(path) for path in paths))


__all__ = [
    "DEFAULT_STATEFUL_RESOURCE_TYPES",
    "RiskClassifier",
    "RiskSettings",
]
