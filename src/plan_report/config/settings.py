"""Loading of ``iac-plan-report.yaml`` configuration files."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

import yaml

from ..analysis import RiskSettings
from ..models import DangerLevel
from ..rendering import RenderOptions

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "iac-plan-report.yaml"
CONFIG_ENV_VAR = "IAC_PLAN_REPORT_CONFIG"


class SettingsError(RuntimeError):
    """Raised when configuration files cannot be loaded or validated."""


@dataclass(frozen=True, slots=True)
class Settings:
    """Fully resolved configuration for a report run."""

    risk: RiskSettings = field(default_factory=RiskSettings)
    render: RenderOptions = field(default_factory=RenderOptions)
    terraform_bin: str = "terraform"
    sources: tuple[Path, ...] = ()


def default_config_paths(
    cwd: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> List[Path]:
    """Return the configuration files picked up without an explicit ``--config``."""

    environ = os.environ if environ is None else environ
    override = environ.get(CONFIG_ENV_VAR)
    if override:
        return [Path(override)]

    candidate = (cwd or Path.cwd()) / DEFAULT_CONFIG_FILENAME
    return [candidate] if candidate.exists() else []


class SettingsLoader:
    """Merge configuration documents into immutable :class:`Settings`.

    Later documents override earlier ones key by key; sensitive resource and
    property lists accumulate across documents.
    """

    def __init__(self, default_paths: Sequence[Path | str] | None = None) -> None:
        if default_paths is None:
            self._default_paths = default_config_paths()
        else:
            self._default_paths = [Path(path) for path in default_paths]

    # ------------------------------------------------------------------
    def load(self, path: Path | str | None = None) -> Settings:
        paths = list(self._default_paths)
        if path is not None:
            paths.append(Path(path))

        settings = Settings()
        for config_path in paths:
            settings = self._apply(settings, self._load_document(config_path), config_path)
            logger.debug("Loaded configuration from %s", config_path)
        return settings

    # ------------------------------------------------------------------
    def _apply(self, settings: Settings, data: Mapping[str, Any], path: Path) -> Settings:
        risk = settings.risk
        render = settings.render

        stateful = set(risk.stateful_resource_types)
        for entry in _entries(data, "sensitive_resources", path):
            stateful.add(_require_str(entry, "resource_type", path))

        sensitive_properties: Dict[str, set[str]] = {
            resource_type: set(names) for resource_type, names in risk.sensitive_properties.items()
        }
        for entry in _entries(data, "sensitive_properties", path):
            resource_type = _require_str(entry, "resource_type", path)
            sensitive_properties.setdefault(resource_type, set()).add(
                _require_str(entry, "property", path)
            )

        plan = _section(data, "plan", path)
        update_danger = risk.update_danger
        if "update-danger" in plan:
            update_danger = _danger_level(plan["update-danger"], path)

        render_changes: Dict[str, Any] = {}
        for key, attribute in _PLAN_FLAGS.items():
            if key in plan:
                render_changes[attribute] = _require_bool(plan[key], key, path)
        if "max-value-length" in plan:
            render_changes["max_value_length"] = _require_int(
                plan["max-value-length"], "max-value-length", path
            )

        expandable = _section(plan, "expandable_sections", path)
        if "auto_expand_dangerous" in expandable:
            render_changes["auto_expand_dangerous"] = _require_bool(
                expandable["auto_expand_dangerous"], "auto_expand_dangerous", path
            )
        if "collapse_threshold" in expandable:
            render_changes["collapse_threshold"] = _require_int(
                expandable["collapse_threshold"], "collapse_threshold", path
            )

        terraform = _section(data, "terraform", path)
        terraform_bin = settings.terraform_bin
        if terraform.get("path"):
            terraform_bin = str(terraform["path"])

        try:
            new_risk = RiskSettings(
                stateful_resource_types=frozenset(stateful),
                sensitive_properties={
                    resource_type: frozenset(names)
                    for resource_type, names in sensitive_properties.items()
                },
                update_danger=update_danger,
            )
            new_render = replace(render, **render_changes)
        except ValueError as exc:
            raise SettingsError(f"Invalid configuration in {path}: {exc}") from exc

        return Settings(
            risk=new_risk,
            render=new_render,
            terraform_bin=terraform_bin,
            sources=settings.sources + (path,),
        )

    def _load_document(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            raise SettingsError(f"Configuration file not found: {path}")

        try:
            content = path.read_text(encoding="utf-8")
        except OSError as exc:  # pragma: no cover - filesystem errors surfaced to caller
            raise SettingsError(f"Failed to read configuration file {path}") from exc

        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as exc:
            raise SettingsError(f"Invalid YAML in configuration file {path}") from exc

        if not isinstance(data, Mapping):
            raise SettingsError(f"Configuration file must be a mapping: {path}")

        return dict(data)


_PLAN_FLAGS = {
    "show-details": "show_details",
    "always-show-sensitive": "always_show_sensitive",
    "show-no-ops": "show_no_ops",
    "expand-all": "expand_all",
}


def _section(data: Mapping[str, Any], key: str, path: Path) -> Mapping[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise SettingsError(f"'{key}' must be a mapping in {path}")
    return value


def _entries(data: Mapping[str, Any], key: str, path: Path) -> List[Mapping[str, Any]]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(entry, Mapping) for entry in value):
        raise SettingsError(f"'{key}' must be a list of mappings in {path}")
    return value


def _require_str(entry: Mapping[str, Any], key: str, path: Path) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value.strip():
        raise SettingsError(f"Entry is missing '{key}' in {path}")
    return value.strip()


def _require_bool(value: Any, key: str, path: Path) -> bool:
    if not isinstance(value, bool):
        raise SettingsError(f"'{key}' must be true or false in {path}")
    return value


def _require_int(value: Any, key: str, path: Path) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise SettingsError(f"'{key}' must be an integer in {path}")
    return value


def _danger_level(value: Any, path: Path) -> DangerLevel:
    try:
        return DangerLevel(str(value).strip().lower())
    except ValueError as exc:
        raise SettingsError(f"'update-danger' must be 'none' or 'low' in {path}") from exc


__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_FILENAME",
    "Settings",
    "SettingsError",
    "SettingsLoader",
    "default_config_paths",
]
