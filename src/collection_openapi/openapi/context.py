"""Run-scoped registries shared by every operation of one export.

A fresh BuildContext is created per export run. Nothing here is module
level, so concurrent exports never see each other's state.
"""

import re
from typing import Any

from pydantic import BaseModel

SCHEMA_REF_PREFIX = "#/components/schemas/"
EXAMPLE_REF_PREFIX = "#/components/examples/"


def sanitize_name(name: str, replacement: str = "") -> str:
    """Reduce a free-form name to characters valid in a component key."""
    return re.sub(r"[^a-zA-Z0-9]", replacement, name)


class OperationResult(BaseModel):
    """Outcome of building one request: an operation, or an omission."""

    request_name: str
    path: str | None = None
    method: str | None = None
    operation: dict | None = None
    omitted_reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.operation is not None


class BuildContext:
    """Accumulates servers, named schemas, examples, security schemes and tags."""

    def __init__(self):
        self.servers: dict[str, None] = {}  # insertion-ordered set
        self.schemas: dict[str, dict] = {}
        self.examples: dict[str, dict] = {}
        self.security_schemes: dict[str, dict] = {}
        self.tag_descriptions: dict[str, str] = {}
        self.results: list[OperationResult] = []
        self._schema_counter = 0

    # -- registries -----------------------------------------------------------

    def add_server(self, base_url: str) -> None:
        if base_url:
            self.servers.setdefault(base_url, None)

    def next_schema_index(self) -> int:
        index = self._schema_counter
        self._schema_counter += 1
        return index

    def register_schema(self, name: str, schema: dict) -> str:
        """Store a schema under a unique name and return that name.

        Existing entries are never replaced; a clashing name gets a numeric
        suffix.
        """
        unique = self._unique(name, self.schemas)
        self.schemas[unique] = schema
        return unique

    def register_example(self, name: str, value: Any) -> str:
        unique = self._unique(name, self.examples)
        self.examples[unique] = {"value": value}
        return unique

    def register_security_scheme(self, name: str, definition: dict) -> None:
        self.security_schemes.setdefault(name, definition)

    def add_tag_description(self, tag: str, description: str | None) -> None:
        if not tag or not isinstance(description, str) or not description.strip():
            return
        self.tag_descriptions.setdefault(tag, description.strip())

    def record(self, result: OperationResult) -> None:
        self.results.append(result)

    @property
    def omissions(self) -> list[OperationResult]:
        return [r for r in self.results if not r.ok]

    def _unique(self, name: str, registry: dict) -> str:
        if name not in registry:
            return name
        suffix = 1
        while f"{name}_{suffix}" in registry:
            suffix += 1
        return f"{name}_{suffix}"


def schema_ref(name: str) -> dict:
    return {"$ref": f"{SCHEMA_REF_PREFIX}{name}"}


def example_ref(name: str) -> dict:
    return {"$ref": f"{EXAMPLE_REF_PREFIX}{name}"}
