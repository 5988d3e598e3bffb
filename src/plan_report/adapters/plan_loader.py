"""Read Terraform plans from JSON artifacts or binary plan files."""

from __future__ import annotations

import json
import logging
import os
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Mapping

logger = logging.getLogger(__name__)

JSON_SUFFIXES = frozenset({".json"})


class PlanLoaderError(RuntimeError):
    """Exception raised when terraform plan ingestion fails."""


class PlanLoader:
    """Load Terraform plan data, converting binary plans with ``terraform show -json``."""

    def __init__(
        self,
        plan_path: str | os.PathLike[str],
        *,
        terraform_bin: str = "terraform",
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.plan_path = Path(plan_path).resolve()
        self.terraform_bin = terraform_bin
        self.env = dict(env) if env else None

    def load_plan(self) -> Dict[str, Any]:
        """Return the plan document as a mapping."""

        if not self.plan_path.exists():
            raise PlanLoaderError(f"Terraform plan file not found: {self.plan_path}")
        if self.plan_path.is_dir():
            raise PlanLoaderError(f"Terraform plan path is a directory: {self.plan_path}")

        if self.plan_path.suffix.lower() in JSON_SUFFIXES:
            plan = self._load_json_artifact(self.plan_path)
        else:
            plan = self._load_plan_file(self.plan_path)

        if not isinstance(plan, dict):
            raise PlanLoaderError(f"Terraform plan must be a JSON object: {self.plan_path}")

        logger.debug(
            "Loaded plan %s with %d resource change(s)",
            self.plan_path,
            len(plan.get("resource_changes") or []),
        )
        return plan

    # Artifact ingestion helpers -------------------------------------------------
    def _load_json_artifact(self, path: Path) -> Any:
        with path.open("r", encoding="utf-8") as handle:
            try:
                return json.load(handle)
            except json.JSONDecodeError as exc:
                raise PlanLoaderError(f"Invalid JSON in plan artifact: {path}") from exc

    def _load_plan_file(self, path: Path) -> Any:
        completed = self._run_command(
            [self.terraform_bin, "show", "-json", str(path)],
            cwd=path.parent,
        )
        return self._parse_command_output(completed.stdout)

    def _parse_command_output(self, output: str) -> Any:
        try:
            return json.loads(output)
        except json.JSONDecodeError as exc:
            raise PlanLoaderError("Command output was not valid JSON") from exc

    # Command runner -------------------------------------------------------------
    def _run_command(self, args: List[str], *, cwd: Path) -> subprocess.CompletedProcess[str]:
        logger.debug("Running %s in %s", " ".join(args), cwd)
        try:
            completed = subprocess.run(
                args,
                cwd=cwd,
                env=self.env,
                check=True,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as exc:
            raise PlanLoaderError(f"Executable not found: {args[0]}") from exc
        except subprocess.CalledProcessError as exc:
            raise PlanLoaderError(
                f"Command '{' '.join(args)}' failed with exit code {exc.returncode}"
            ) from exc

        return completed


__all__ = ["PlanLoader", "PlanLoaderError"]
