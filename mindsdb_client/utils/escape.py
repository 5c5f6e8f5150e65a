"""Escaping helpers for building MindsDB SQL statements.

Identifiers are delimited with backticks and values are rendered as MySQL
literals, which is the dialect MindsDB SQL accepts. Structured values (dicts,
lists) are rendered as JSON text since MindsDB accepts JSON literals for
parameters. Every helper here is total: any input produces a safe fragment.
"""

import json
import math
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Set


# MySQL string literal escapes.
_STRING_ESCAPES = {
    "\0": "\\0",
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\r": "\\r",
    "\x1a": "\\Z",
    '"': '\\"',
    "'": "\\'",
    "\\": "\\\\",
}

_STRING_ESCAPE_TABLE = str.maketrans(_STRING_ESCAPES)


def escape_identifier(name: Any, qualified: bool = True) -> str:
    """Quote a SQL identifier with backticks.

    Args:
        name: Raw identifier (converted to string if needed)
        qualified: Treat '.' as a separator between qualified parts,
            e.g. ``proj.model`` becomes ```proj`.`model```

    Returns:
        Backtick-delimited identifier with embedded backticks doubled
    """
    escaped = str(name).replace("`", "``")
    if qualified:
        escaped = escaped.replace(".", "`.`")
    return f"`{escaped}`"


def escape_identifier_unquoted(name: Any) -> str:
    """Escape an identifier but strip the surrounding backticks.

    Used where the server would keep the quotes as part of the name
    (e.g. ``CREATE DATABASE``).
    """
    return escape_identifier(name)[1:-1]


def escape_string(value: str) -> str:
    """Render a string as a single-quoted MySQL literal."""
    return "'" + value.translate(_STRING_ESCAPE_TABLE) + "'"


def _is_non_finite(value: Any) -> bool:
    if isinstance(value, float):
        return not math.isfinite(value)
    if isinstance(value, Decimal):
        return not value.is_finite()
    return False


def _to_json_compatible(value: Any, seen: Set[int]) -> Any:
    """Copy a structure into something ``json.dumps`` accepts.

    Keys JSON can't encode become strings, NaN and infinities become null.

    Raises:
        ValueError: If the structure contains itself
    """
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if not isinstance(value, (dict, list, tuple)):
        return value

    if id(value) in seen:
        raise ValueError("Circular reference detected")
    seen.add(id(value))
    try:
        if isinstance(value, dict):
            return {
                key if key is None or isinstance(key, (str, int)) else str(key):
                _to_json_compatible(item, seen)
                for key, item in value.items()
            }
        return [_to_json_compatible(item, seen) for item in value]
    finally:
        seen.discard(id(value))


def escape_json(value: Any) -> str:
    """Render a value as canonical JSON text.

    Keys are rendered as strings, NaN and infinities as null, and other
    values JSON cannot represent natively with ``str``. A value that still
    can't be encoded (e.g. a dict that contains itself) is rendered as a
    string literal of its ``str``.
    """
    try:
        return json.dumps(_to_json_compatible(value, set()), default=str, allow_nan=False)
    except (TypeError, ValueError):
        return escape_string(str(value))


def escape_value(value: Any) -> str:
    """Render a Python value as a SQL literal.

    Args:
        value: None, bool, number, string, bytes, date/time or a
            structured value (dict, list, tuple)

    Returns:
        Literal text safe to interpolate into a statement
    """
    if value is None:
        return "NULL"
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, Decimal)):
        # SQL has no literal for NaN or infinity
        if _is_non_finite(value):
            return "NULL"
        return str(value)
    if isinstance(value, str):
        return escape_string(value)
    if isinstance(value, (bytes, bytearray)):
        return f"X'{bytes(value).hex()}'"
    if isinstance(value, datetime):
        return escape_string(value.isoformat(sep=" "))
    if isinstance(value, (date, time)):
        return escape_string(value.isoformat())
    if isinstance(value, (dict, list, tuple)):
        return escape_json(value)
    return escape_string(str(value))
