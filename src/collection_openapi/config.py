"""Export options shared by the assembler and the CLI."""

from pydantic import BaseModel, Field

DEFAULT_OAUTH_AUTHORIZATION_URL = "https://example.com/oauth/authorize"
DEFAULT_API_KEY_HEADER = "X-API-KEY"


class ExportOptions(BaseModel):
    """Knobs for one export run. Every field has a usable default."""

    openapi_version: str = "3.1.0"
    title: str | None = None  # defaults to the collection name
    version: str = "1.0.0"
    description: str | None = None  # defaults to the collection description
    contact_name: str | None = None
    contact_url: str | None = None
    oauth_authorization_url: str = DEFAULT_OAUTH_AUTHORIZATION_URL
    api_key_header: str = DEFAULT_API_KEY_HEADER
    max_schema_depth: int = Field(default=64, ge=1)
