"""Entry point turning a plan summary into a report artifact."""

from __future__ import annotations

import logging

from ..models import PlanSummary
from .document import DocumentBuilder, RenderOptions, ReportDocument
from .formats import FORMAT_RENDERERS
from .schema import OutputFormat

logger = logging.getLogger(__name__)


class ReportRenderer:
    """Render :class:`PlanSummary` objects in any supported output format.

    The renderer keeps no state besides its immutable options, so a single
    instance may render the same summary to several formats.
    """

    def __init__(self, options: RenderOptions | None = None) -> None:
        self.options = options or RenderOptions()
        self._builder = DocumentBuilder(self.options)

    # ------------------------------------------------------------------
    def render(self, summary: PlanSummary, output_format: str | OutputFormat) -> str:
        resolved = OutputFormat.parse(output_format)
        document = self.build_document(summary, resolved)
        content = FORMAT_RENDERERS[resolved](document)
        logger.debug("Rendered %s report with %d section(s)", resolved.value, len(document.blocks))
        return content

    def build_document(self, summary: PlanSummary, output_format: str | OutputFormat) -> ReportDocument:
        return self._builder.build(summary, OutputFormat.parse(output_format))


def render(
    summary: PlanSummary,
    output_format: str | OutputFormat,
    options: RenderOptions | None = None,
) -> str:
    """Render ``summary`` as ``output_format`` text."""

    return ReportRenderer(options).render(summary, output_format)


__all__ = ["ReportRenderer", "render"]
