"""Risk-annotated reports for Terraform change plans."""

from .analysis import RiskClassifier, RiskSettings, build_summary, format_value, sort_changes
from .models import (
    ChangeAction,
    DangerLevel,
    OutputChange,
    PlanSummary,
    ResourceChange,
    RiskAssessment,
    Statistics,
)
from .rendering import OutputFormat, RenderOptions, ReportRenderer, UnsupportedFormatError, render
from .service import PlanReportService, ReportResult

__all__ = [
    "ChangeAction",
    "DangerLevel",
    "OutputChange",
    "OutputFormat",
    "PlanReportService",
    "PlanSummary",
    "RenderOptions",
    "ReportRenderer",
    "ReportResult",
    "ResourceChange",
    "RiskAssessment",
    "RiskClassifier",
    "RiskSettings",
    "Statistics",
    "UnsupportedFormatError",
    "build_summary",
    "format_value",
    "render",
    "sort_changes",
]
