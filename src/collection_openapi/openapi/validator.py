"""Structural self-checks for exported OpenAPI documents."""

import re
from typing import Any, Iterator

from .context import EXAMPLE_REF_PREFIX, SCHEMA_REF_PREFIX
from .kinds import SUPPORTED_METHODS

TEMPLATE_VAR_RE = re.compile(r"\{([^{}]+)\}")


def validate_structure(document: dict) -> dict[str, str]:
    """Check the top-level keys every exported document carries.

    Returns dict of {location: error_message}.
    """
    errors = {}
    for key in ("openapi", "info", "paths", "components"):
        if key not in document:
            errors[key] = f"missing top-level key '{key}'"
    for key in ("paths", "components"):
        if key in document and not isinstance(document[key], dict):
            errors[key] = f"'{key}' must be a mapping"
    if "paths" not in errors:
        for path, methods in document["paths"].items():
            if not isinstance(methods, dict) or not all(isinstance(op, dict) for op in methods.values()):
                errors[f"paths.{path}"] = "path item must map methods to operations"

    servers = document.get("servers", [])
    if not isinstance(servers, list) or not all(isinstance(s, dict) for s in servers):
        errors["servers"] = "'servers' must be a list of mappings"
        return errors
    urls = [s.get("url") for s in servers]
    if len(urls) != len(set(urls)):
        errors["servers"] = "duplicate server URLs"
    return errors


def validate_refs(document: dict) -> dict[str, str]:
    """Check that every $ref points at a registered schema or example.

    Returns dict of {location: error_message}.
    """
    components = document.get("components", {})
    targets = {
        SCHEMA_REF_PREFIX: components.get("schemas", {}),
        EXAMPLE_REF_PREFIX: components.get("examples", {}),
    }

    errors = {}
    for location, ref in _iter_refs(document.get("paths", {}), "paths"):
        for prefix, registry in targets.items():
            if ref.startswith(prefix):
                if ref[len(prefix):] not in registry:
                    errors[location] = f"unresolved reference '{ref}'"
                break
        else:
            errors[location] = f"unsupported reference '{ref}'"
    return errors


def validate_path_params(document: dict) -> dict[str, str]:
    """Check that every {variable} in a path template has a required path parameter.

    Returns dict of {location: error_message}.
    """
    errors = {}
    for path, methods in document.get("paths", {}).items():
        variables = TEMPLATE_VAR_RE.findall(path)
        for method, operation in methods.items():
            if method not in SUPPORTED_METHODS:
                errors[f"paths.{path}.{method}"] = f"unsupported method '{method}'"
                continue
            declared = {
                p["name"]
                for p in operation.get("parameters", [])
                if p.get("in") == "path" and p.get("required")
            }
            missing = [v for v in variables if v not in declared]
            if missing:
                errors[f"paths.{path}.{method}"] = (
                    f"missing path parameters: {', '.join(missing)}"
                )
    return errors


def validate_security(document: dict) -> dict[str, str]:
    """Check that operation security requirements name defined schemes.

    Returns dict of {location: error_message}.
    """
    schemes = document.get("components", {}).get("securitySchemes", {})
    errors = {}
    for path, methods in document.get("paths", {}).items():
        for method, operation in methods.items():
            for requirement in operation.get("security", []):
                undefined = [name for name in requirement if name not in schemes]
                if undefined:
                    errors[f"paths.{path}.{method}.security"] = (
                        f"undefined security schemes: {', '.join(undefined)}"
                    )
    return errors


def validate_document(document: dict) -> dict[str, str]:
    """Run all validations on an exported document.

    Returns dict of {location: error_message} for all problems found.
    Reference and parameter checks only run once the structure is sound.
    """
    errors = {}
    errors.update(validate_structure(document))

    if not errors:
        errors.update(validate_refs(document))
        errors.update(validate_path_params(document))
        errors.update(validate_security(document))

    return errors


def _iter_refs(node: Any, location: str) -> Iterator[tuple[str, str]]:
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str):
            yield location, ref
        for key, value in node.items():
            if key == "example":
                continue  # literal payloads may carry their own $ref keys
            yield from _iter_refs(value, f"{location}.{key}")
    elif isinstance(node, list):
        for index, value in enumerate(node):
            yield from _iter_refs(value, f"{location}[{index}]")
