"""Closed dispatch tags for content types and auth types.

Collections store both as free-form strings. These enums map them onto the
families the exporter knows how to handle, with an explicit fallback member
for everything else.
"""

from enum import Enum

SUPPORTED_METHODS = ("get", "post", "put", "delete", "options", "head", "patch", "trace")

DEFAULT_CONTENT_TYPE = "application/json"


class ContentFamily(str, Enum):
    JSON = "json"
    FORM = "form"
    OPAQUE = "opaque"  # anything else: body kept as a raw string

    @classmethod
    def of(cls, content_type: str | None) -> "ContentFamily":
        media_type = (content_type or "").split(";")[0].strip().lower()
        if media_type == "application/json" or media_type.endswith("+json"):
            return cls.JSON
        if media_type in ("multipart/form-data", "application/x-www-form-urlencoded"):
            return cls.FORM
        return cls.OPAQUE


class AuthKind(str, Enum):
    NONE = "none"
    BASIC = "basic"
    BEARER = "bearer"
    OAUTH2 = "oauth-2"
    API_KEY = "api-key"
    UNKNOWN = "unknown"  # inherit, digest, aws-signature, ...

    @classmethod
    def of(cls, auth_type: str | None) -> "AuthKind":
        try:
            return cls((auth_type or "none").strip().lower())
        except ValueError:
            return cls.UNKNOWN
