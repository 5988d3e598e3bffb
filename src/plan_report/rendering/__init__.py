"""Report rendering: schemas, the format independent document and format encoders."""

from .document import (
    CollapsibleValue,
    DocumentBuilder,
    MessageBlock,
    RenderOptions,
    ReportDocument,
    TableBlock,
)
from .renderer import ReportRenderer, render
from .schema import (
    Column,
    OutputField,
    OutputFormat,
    RenderSchema,
    ResourceField,
    Section,
    StatisticsField,
    UnsupportedFormatError,
    build_schema,
)

__all__ = [
    "CollapsibleValue",
    "Column",
    "DocumentBuilder",
    "MessageBlock",
    "OutputField",
    "OutputFormat",
    "RenderOptions",
    "RenderSchema",
    "ReportDocument",
    "ReportRenderer",
    "ResourceField",
    "Section",
    "StatisticsField",
    "TableBlock",
    "UnsupportedFormatError",
    "build_schema",
    "render",
]
