"""Recursive JSON schema synthesis from example payloads."""

import logging
from typing import Any

from .context import BuildContext, schema_ref
from .infer import infer_type

logger = logging.getLogger(__name__)


class SchemaSynthesizer:
    """Builds structural schemas from parsed JSON values.

    Object and array roots given a proposed name are registered in the
    context and returned as ``$ref``s; scalar roots are always inline.
    """

    def __init__(self, context: BuildContext, max_depth: int = 64):
        self.context = context
        self.max_depth = max_depth

    def synthesize(self, value: Any, proposed_name: str | None = None) -> dict:
        schema = self._build(value, depth=0)
        if proposed_name and isinstance(value, (dict, list)):
            name = self.context.register_schema(proposed_name, schema)
            return schema_ref(name)
        return schema

    def _build(self, value: Any, depth: int) -> dict:
        if isinstance(value, (dict, list)) and depth >= self.max_depth:
            # Deeper levels are left unconstrained.
            logger.debug(f"Schema truncated at depth {depth}")
            return {}

        if isinstance(value, list):
            if not value:
                return {"type": "array", "items": {}}
            return {"type": "array", "items": self._build(value[0], depth + 1)}

        if isinstance(value, dict):
            properties = {}
            required = []
            for key, item in value.items():
                properties[key] = self._build(item, depth + 1)
                # "required" only means non-null in this one example
                if item is not None:
                    required.append(key)
            schema: dict = {"type": "object", "properties": properties}
            if required:
                schema["required"] = required
            return schema

        return infer_type(value)
