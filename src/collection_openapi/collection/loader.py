"""Collection file loader.

Reads exported collection files (JSON or YAML, Hoppscotch-style camelCase
keys) into Collection / Request models.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from collection_openapi.errors import CollectionLoadError

from .base import Auth, Body, Collection, KeyValue, Request, SavedResponse

logger = logging.getLogger(__name__)

IMPLICIT_ROOT_NAME = "API Collection"


def load_collection(file_path: Path) -> Collection | list[Request]:
    """Load a collection file.

    Accepts a collection object, a list of collections, or a flat list of
    requests. Malformed request entries are logged and skipped.
    """
    try:
        data = yaml.safe_load(Path(file_path).read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise CollectionLoadError(f"Cannot read collection {file_path}: {e}") from e
    return parse_collection_data(data)


def parse_collection_data(data: Any) -> Collection | list[Request]:
    """Convert already-decoded collection data into models."""
    if isinstance(data, dict):
        return _parse_collection(data)

    if isinstance(data, list):
        if all(isinstance(item, dict) and "endpoint" in item for item in data):
            return _parse_requests(data)
        collections = [_parse_collection(item) for item in data]
        if len(collections) == 1:
            return collections[0]
        return Collection(name=IMPLICIT_ROOT_NAME, folders=collections)

    raise CollectionLoadError(
        f"Expected a collection object or list, got {type(data).__name__}"
    )


def _parse_collection(data: Any) -> Collection:
    if not isinstance(data, dict) or not data.get("name"):
        raise CollectionLoadError("Collection entry is missing a name")
    return Collection(
        name=data["name"],
        description=data.get("description"),
        requests=_parse_requests(data.get("requests") or []),
        folders=[_parse_collection(f) for f in data.get("folders") or []],
    )


def _parse_requests(items: list[dict]) -> list[Request]:
    requests: list[Request] = []
    for item in items:
        try:
            requests.append(_parse_request(item))
        except (ValidationError, KeyError, TypeError, AttributeError) as e:
            name = item.get("name", "<unnamed>") if isinstance(item, dict) else "<invalid>"
            logger.warning(f"Skipping malformed request '{name}': {e}")
    return requests


def _parse_request(item: dict) -> Request:
    return Request(
        name=item["name"],
        method=item["method"],
        endpoint=item["endpoint"],
        headers=_parse_key_values(item.get("headers")),
        params=_parse_key_values(item.get("params")),
        body=_parse_body(item.get("body")),
        auth=_parse_auth(item.get("auth")),
        responses=_parse_responses(item.get("responses")),
        description=item.get("description"),
    )


def _parse_key_values(entries: list[dict] | None) -> list[KeyValue]:
    return [
        KeyValue(
            key=e["key"],
            value=e.get("value", ""),
            description=e.get("description") or "",
            active=e.get("active"),
        )
        for e in entries or []
    ]


def _parse_body(body: dict | None) -> Body | None:
    if not body:
        return None
    payload = body.get("body")
    if isinstance(payload, list):
        payload = _parse_key_values(payload)
    return Body(content_type=body.get("contentType"), body=payload)


def _parse_auth(auth: dict | None) -> Auth | None:
    if not auth:
        return None
    grant = auth.get("grantTypeInfo") or {}
    extras = {
        k: v
        for k, v in auth.items()
        if k not in ("authType", "authActive", "authURL", "authUrl", "key", "grantTypeInfo")
    }
    return Auth(
        auth_type=auth.get("authType", "none"),
        auth_active=auth.get("authActive", True),
        auth_url=auth.get("authURL") or auth.get("authUrl") or grant.get("authEndpoint"),
        key=auth.get("key") or grant.get("key"),
        **extras,
    )


def _parse_responses(responses: dict | None) -> dict[str, SavedResponse]:
    return {
        name: SavedResponse(
            code=r.get("code"),
            headers=_parse_key_values(r.get("headers")),
            body=r.get("body"),
            description=r.get("description"),
        )
        for name, r in (responses or {}).items()
    }
