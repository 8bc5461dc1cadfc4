"""Data models for API collections.

A collection is a tree of folders holding request definitions. The loader
converts exported collection files into these models; the OpenAPI exporter
only ever reads them.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class KeyValue(BaseModel):
    """A header, query parameter, or form field entry."""

    key: str
    value: Any = ""
    description: str = ""
    active: bool | None = None  # None counts as active

    @property
    def is_active(self) -> bool:
        return self.active is not False


class Body(BaseModel):
    """Request payload. Multipart bodies carry a key/value list."""

    content_type: str | None = None
    body: str | list[KeyValue] | None = None


class Auth(BaseModel):
    """Authentication descriptor attached to a request."""

    model_config = ConfigDict(extra="allow")  # username, password, token...

    auth_type: str = "none"  # none / basic / bearer / oauth-2 / api-key / inherit
    auth_active: bool = True
    auth_url: str | None = None
    key: str | None = None


class SavedResponse(BaseModel):
    """An example response saved alongside a request."""

    code: int | None = None
    headers: list[KeyValue] = []
    body: str | None = None
    description: str | None = None


class Request(BaseModel):
    """A single HTTP request definition."""

    name: str
    method: str  # validated by the exporter, not here
    endpoint: str
    headers: list[KeyValue] = []
    params: list[KeyValue] = []
    body: Body | None = None
    auth: Auth | None = None
    responses: dict[str, SavedResponse] = {}
    description: str | None = None


class Collection(BaseModel):
    """A named folder of requests and nested folders."""

    name: str
    description: str | None = None
    requests: list[Request] = []
    folders: list["Collection"] = []


Collection.model_rebuild()
