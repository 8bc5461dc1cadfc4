"""Value type inference for parameters, headers and JSON leaves."""

import re
from typing import Any

EMAIL_MARKER = "@"
DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
DATE_TIME_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}")
UUID_RE = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)


def infer_string_format(value: str) -> str | None:
    """Return the OpenAPI string format for a value, or None if plain.

    Checks run in a fixed priority order; the first match wins.
    """
    if EMAIL_MARKER in value:
        return "email"
    if DATE_RE.fullmatch(value):
        return "date"
    if DATE_TIME_RE.match(value):
        return "date-time"
    if UUID_RE.fullmatch(value):
        return "uuid"
    return None


def infer_type(value: Any) -> dict:
    """Infer the most specific schema for a single example value.

    Objects are not recursed into; arrays look at their first element only.
    Unrecognised values (including None) degrade to a plain string schema.
    """
    if isinstance(value, str):
        fmt = infer_string_format(value)
        return {"type": "string", "format": fmt} if fmt else {"type": "string"}
    # bool is an int subclass, so it must be checked first
    if isinstance(value, bool):
        return {"type": "boolean"}
    if isinstance(value, int):
        return {"type": "integer"}
    if isinstance(value, float):
        return {"type": "integer"} if value.is_integer() else {"type": "number"}
    if isinstance(value, (list, tuple)):
        if not value:
            return {"type": "array", "items": {}}
        return {"type": "array", "items": infer_type(value[0])}
    if isinstance(value, dict):
        return {"type": "object"}
    return {"type": "string"}
