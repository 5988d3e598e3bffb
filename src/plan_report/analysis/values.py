"""Display formatting for individual before/after values.

Every value that ends up in a report goes through :func:`format_value`. The
function is pure and never raises: sensitive values are always replaced by
:data:`SENSITIVE_PLACEHOLDER`, unknown values by :data:`UNKNOWN_PLACEHOLDER`,
and anything that cannot be serialized degrades to a placeholder naming its
type.

Length policy: a serialization longer than ``max_length`` characters
(:data:`MAX_VALUE_LENGTH` by default) keeps its first ``max_length``
characters followed by :data:`TRUNCATED_INDICATOR`. Passing ``None`` disables
truncation. Placeholders are never truncated.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

logger = logging.getLogger(__name__)

SENSITIVE_PLACEHOLDER = "(sensitive value)"
UNKNOWN_PLACEHOLDER = "(known after apply)"
ABSENT_PLACEHOLDER = "-"
TRUNCATED_INDICATOR = "... [truncated]"
MAX_VALUE_LENGTH = 200


def format_value(
    value: Any,
    is_sensitive: bool,
    is_unknown: bool,
    *,
    max_length: int | None = MAX_VALUE_LENGTH,
) -> str:
    """Return the display string for ``value``."""

    if is_sensitive:
        return SENSITIVE_PLACEHOLDER
    if is_unknown:
        return UNKNOWN_PLACEHOLDER

    try:
        rendered = _serialize(value)
    except Exception:  # noqa: BLE001 - a value must never prevent the report
        logger.debug("Falling back to placeholder for %s value", type(value).__name__, exc_info=True)
        return f"<unrenderable {type(value).__name__}>"

    if max_length is not None and len(rendered) > max_length:
        return rendered[:max_length] + TRUNCATED_INDICATOR
    return rendered


def _serialize(value: Any) -> str:
    if value is None:
        return ABSENT_PLACEHOLDER
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, Mapping):
        pairs = [f"{key} = {_serialize_nested(value[key])}" for key in sorted(value, key=str)]
        return "{ " + ", ".join(pairs) + " }" if pairs else "{}"
    if isinstance(value, (list, tuple)):
        items = [_serialize_nested(item) for item in value]
        return "[ " + ", ".join(items) + " ]" if items else "[]"
    return str(value)


def _serialize_nested(value: Any) -> str:
    # Nested nulls read better as Terraform's ``null`` than as an absent marker.
    if value is None:
        return "null"
    return _serialize(value)


__all__ = [
    "ABSENT_PLACEHOLDER",
    "MAX_VALUE_LENGTH",
    "SENSITIVE_PLACEHOLDER",
    "TRUNCATED_INDICATOR",
    "UNKNOWN_PLACEHOLDER",
    "format_value",
]
