"""Column schemas per report section and output format."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Dict, Tuple, Type


class Section(str, Enum):
    """Report sections, in rendering order."""

    STATISTICS = "statistics"
    RESOURCES = "resources"
    OUTPUTS = "outputs"

    @property
    def heading(self) -> str:
        return SECTION_TITLES[self]


SECTION_TITLES = {
    Section.STATISTICS: "Summary Statistics",
    Section.RESOURCES: "Resource Changes",
    Section.OUTPUTS: "Output Changes",
}


class ResourceField(str, Enum):
    ACTION = "action"
    RESOURCE = "resource"
    TYPE = "type"
    ID = "id"
    REPLACEMENT = "replacement"
    MODULE = "module"
    DANGER = "danger"
    PROPERTY_CHANGES = "propertyChanges"


class OutputField(str, Enum):
    NAME = "name"
    ACTION = "action"
    CURRENT = "current"
    PLANNED = "planned"
    SENSITIVE = "sensitive"


class StatisticsField(str, Enum):
    TOTAL_CHANGES = "totalChanges"
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    REPLACEMENTS = "replacements"
    HIGH_RISK = "highRisk"
    UNMODIFIED = "unmodified"


SECTION_FIELDS: Dict[Section, Type[Enum]] = {
    Section.STATISTICS: StatisticsField,
    Section.RESOURCES: ResourceField,
    Section.OUTPUTS: OutputField,
}


class UnsupportedFormatError(ValueError):
    """Raised when a report is requested in a format that does not exist."""

    def __init__(self, requested: str, valid_formats: Tuple[str, ...]) -> None:
        self.requested = requested
        self.valid_formats = valid_formats
        super().__init__(
            f"Unsupported output format '{requested}'. Valid formats: {', '.join(valid_formats)}"
        )


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"
    HTML = "html"
    MARKDOWN = "markdown"
    CSV = "csv"

    @classmethod
    def parse(cls, name: str | OutputFormat) -> OutputFormat:
        if isinstance(name, OutputFormat):
            return name
        normalized = str(name).strip().lower()
        for candidate in cls:
            if candidate.value == normalized:
                return candidate
        raise UnsupportedFormatError(str(name), cls.names())

    @classmethod
    def names(cls) -> Tuple[str, ...]:
        return tuple(candidate.value for candidate in cls)

    @property
    def collapsible(self) -> bool:
        return self in _COLLAPSIBLE_FORMATS


_COLLAPSIBLE_FORMATS = frozenset({OutputFormat.TABLE, OutputFormat.HTML, OutputFormat.MARKDOWN})


@dataclass(frozen=True, slots=True)
class Column:
    key: str
    header: str


@dataclass(frozen=True, slots=True)
class RenderSchema:
    """Ordered columns of one section for one output format."""

    section: Section
    output_format: OutputFormat
    columns: Tuple[Column, ...]
    collapsible: bool

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(column.key for column in self.columns)

    @property
    def headers(self) -> Tuple[str, ...]:
        return tuple(column.header for column in self.columns)

    def header_for(self, key: str) -> str:
        for column in self.columns:
            if column.key == key:
                return column.header
        raise KeyError(key)


_ACRONYMS = {"id": "ID"}
_WORD_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def header_for_key(key: str, output_format: OutputFormat) -> str:
    """Derive a display header from a camelCase field key."""

    words = [_ACRONYMS.get(word.lower(), word.capitalize()) for word in _WORD_BOUNDARY.split(key)]
    header = " ".join(words)
    if output_format is OutputFormat.TABLE:
        return header.upper()
    return header


@lru_cache(maxsize=None)
def build_schema(section: Section, output_format: OutputFormat) -> RenderSchema:
    section = Section(section)
    output_format = OutputFormat.parse(output_format)
    columns = tuple(
        Column(key=field.value, header=header_for_key(field.value, output_format))
        for field in SECTION_FIELDS[section]
    )
    return RenderSchema(
        section=section,
        output_format=output_format,
        columns=columns,
        collapsible=output_format.collapsible,
    )


__all__ = [
    "Column",
    "OutputField",
    "OutputFormat",
    "RenderSchema",
    "ResourceField",
    "SECTION_TITLES",
    "Section",
    "StatisticsField",
    "UnsupportedFormatError",
    "build_schema",
    "header_for_key",
]
