"""Orchestration layer used by the CLI to produce plan reports."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .adapters import PlanLoader, PlanLoaderError
from .analysis import RiskClassifier, RiskSettings
from .models import PlanSummary
from .normalization import PlanNormalizer
from .rendering import OutputFormat, RenderOptions, ReportRenderer, UnsupportedFormatError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReportResult:
    """Result returned by :class:`PlanReportService` runs."""

    summary: PlanSummary
    content: str
    output_format: OutputFormat


PlanLoaderFactory = Callable[..., PlanLoader]


class PlanReportService:
    """High level service responsible for plan ingestion, analysis and rendering."""

    def __init__(
        self,
        *,
        plan_loader_factory: PlanLoaderFactory | None = None,
        normalizer: PlanNormalizer | None = None,
    ) -> None:
        self._plan_loader_factory = plan_loader_factory or PlanLoader
        self._normalizer = normalizer or PlanNormalizer()

    # ------------------------------------------------------------------
    def analyze(
        self,
        plan_path: Path,
        *,
        risk_settings: RiskSettings | None = None,
        terraform_bin: str = "terraform",
    ) -> PlanSummary:
        """Load and classify a plan without rendering it."""

        loader = self._plan_loader_factory(plan_path, terraform_bin=terraform_bin)
        plan = loader.load_plan()
        return self._normalizer.summarize(
            plan,
            RiskClassifier(risk_settings),
            plan_file=str(plan_path),
        )

    def generate(
        self,
        plan_path: Path,
        *,
        output_format: str | OutputFormat = OutputFormat.TABLE,
        options: RenderOptions | None = None,
        risk_settings: RiskSettings | None = None,
        terraform_bin: str = "terraform",
    ) -> ReportResult:
        """Execute a report run and return the rendered artifact."""

        resolved = OutputFormat.parse(output_format)
        summary = self.analyze(plan_path, risk_settings=risk_settings, terraform_bin=terraform_bin)
        content = self.render(summary, resolved, options=options)
        logger.debug("Generated %s report for %s", resolved.value, plan_path)
        return ReportResult(summary=summary, content=content, output_format=resolved)

    def render(
        self,
        summary: PlanSummary,
        output_format: str | OutputFormat,
        *,
        options: RenderOptions | None = None,
    ) -> str:
        return ReportRenderer(options).render(summary, output_format)


__all__ = ["PlanReportService", "ReportResult", "PlanLoaderError", "UnsupportedFormatError"]
