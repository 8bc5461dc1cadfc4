"""Operation builder — turns one collection request into an OpenAPI operation."""

import json
import logging
from typing import Any
from urllib.parse import urlsplit

from collection_openapi.collection.base import Auth, Body, KeyValue, Request, SavedResponse
from collection_openapi.config import ExportOptions
from collection_openapi.errors import UnsupportedMethodError

from .context import BuildContext, OperationResult, example_ref, sanitize_name
from .infer import infer_type
from .kinds import DEFAULT_CONTENT_TYPE, SUPPORTED_METHODS, AuthKind, ContentFamily
from .schema import SchemaSynthesizer
from .url import DecomposedURL, decompose_url

logger = logging.getLogger(__name__)


class OperationBuilder:
    """Builds operations for requests, writing shared state into a BuildContext."""

    def __init__(self, context: BuildContext, options: ExportOptions | None = None):
        self.context = context
        self.options = options or ExportOptions()
        self.synthesizer = SchemaSynthesizer(context, max_depth=self.options.max_schema_depth)

    def build(self, request: Request, folder_name: str | None = None) -> OperationResult:
        """Build the operation for a request.

        Never raises: unsupported methods and unexpected failures come back
        as an omitted result with the reason attached.
        """
        name = getattr(request, "name", None) or "<unnamed>"
        try:
            return self._build(request, folder_name)
        except UnsupportedMethodError as e:
            logger.debug(f"Skipping request '{name}': {e}")
            return OperationResult(request_name=name, omitted_reason=str(e))
        except Exception as e:
            logger.warning(f"Skipping request '{name}': {type(e).__name__}: {e}")
            return OperationResult(request_name=name, omitted_reason=f"{type(e).__name__}: {e}")

    def _build(self, request: Request, folder_name: str | None) -> OperationResult:
        url = decompose_url(request.endpoint)
        self.context.add_server(url.base_url)

        method = request.method.lower()
        if method not in SUPPORTED_METHODS:
            raise UnsupportedMethodError(request.method)

        operation: dict[str, Any] = {
            "summary": request.name,
            "description": (request.description or "").strip() or request.name,
        }

        tags = self._tags(url, folder_name)
        if tags:
            operation["tags"] = tags

        parameters = self._parameters(request, url)
        if parameters:
            operation["parameters"] = parameters

        if method != "get" and request.body is not None:
            request_body = self._request_body(request.name, request.body)
            if request_body:
                operation["requestBody"] = request_body

        operation["responses"] = self._responses(request)

        if request.auth is not None:
            security = self._security(request.auth)
            if security:
                operation["security"] = security

        return OperationResult(
            request_name=request.name,
            path=url.path,
            method=method,
            operation=operation,
        )

    # -- parameters -----------------------------------------------------------

    def _parameters(self, request: Request, url: DecomposedURL) -> list[dict]:
        parameters = []
        covered: set[str] = set()

        for param in request.params:
            if not param.is_active:
                continue
            in_path = param.key in url.path_variables
            if in_path:
                covered.add(param.key)
            parameters.append({
                "name": param.key,
                "in": "path" if in_path else "query",
                "required": in_path,
                "description": param.description
                or f"{'Path' if in_path else 'Query'} parameter: {param.key}",
                "schema": infer_type(param.value),
                "example": param.value,
            })

        for variable in url.path_variables:
            if variable in covered:
                continue
            covered.add(variable)
            parameters.append({
                "name": variable,
                "in": "path",
                "required": True,
                "description": f"Path parameter: {variable}",
                "schema": {"type": "string"},
            })

        for header in request.headers:
            if not header.is_active:
                continue
            parameters.append({
                "name": header.key,
                "in": "header",
                "required": True,
                "description": header.description or f"Header: {header.key}",
                "schema": infer_type(header.value),
            })

        return parameters

    # -- bodies ---------------------------------------------------------------

    def _request_body(self, request_name: str, body: Body) -> dict | None:
        if not body.content_type or not body.body:
            return None

        schema, example = self._payload_schema(
            body.content_type,
            body.body,
            f"{sanitize_name(request_name)}_Schema",
        )
        return {
            "description": f"{request_name} request body",
            "required": True,
            "content": {body.content_type: {"schema": schema, "example": example}},
        }

    def _payload_schema(
        self, content_type: str, payload: str | list[KeyValue], base_name: str
    ) -> tuple[dict, Any]:
        """Return (schema, example) for a body, parsing JSON where possible."""
        family = ContentFamily.of(content_type)
        if family is ContentFamily.FORM or isinstance(payload, list):
            return {"type": "string"}, _form_example(payload)
        if family is ContentFamily.OPAQUE:
            return {"type": "string"}, payload

        try:
            parsed = json.loads(payload, parse_constant=_reject_constant)
        except (ValueError, TypeError, RecursionError):
            return {"type": "string"}, payload

        name = f"{base_name}_{self.context.next_schema_index()}"
        return self.synthesizer.synthesize(parsed, name), parsed

    # -- responses ------------------------------------------------------------

    def _responses(self, request: Request) -> dict:
        if not request.responses:
            return {"200": {"description": "Successful response"}}

        responses = {}
        for response_name, saved in request.responses.items():
            status = str(saved.code or 200)
            responses[status] = self._response(request.name, response_name, saved)
        return responses

    def _response(self, request_name: str, response_name: str, saved: SavedResponse) -> dict:
        content_type = _header_value(saved.headers, "content-type") or DEFAULT_CONTENT_TYPE

        description = response_name
        if saved.description and saved.description.strip():
            description = f"{response_name}: {saved.description.strip()}"
        response: dict[str, Any] = {"description": description}

        headers = {
            h.key: {
                "description": h.description or f"Header {h.key}",
                "schema": infer_type(h.value),
            }
            for h in saved.headers
        }
        if headers:
            response["headers"] = headers

        if saved.body:
            schema, example = self._payload_schema(
                content_type,
                saved.body,
                f"{sanitize_name(request_name)}_Response_{sanitize_name(response_name)}",
            )
            example_name = self.context.register_example(
                f"{sanitize_name(request_name, '_')}_{sanitize_name(response_name, '_')}",
                example,
            )
            response["content"] = {
                content_type: {
                    "schema": schema,
                    "example": example,
                    "examples": {response_name: example_ref(example_name)},
                }
            }
        return response

    # -- tags and security ----------------------------------------------------

    def _tags(self, url: DecomposedURL, folder_name: str | None) -> list[str]:
        tags = []
        if folder_name:
            tags.append(folder_name)
        if url.base_url:
            hostname = urlsplit(url.base_url).hostname
            if hostname and hostname not in tags:
                tags.append(hostname)
        return tags

    def _security(self, auth: Auth) -> list[dict] | None:
        if not auth.auth_active:
            return None

        kind = AuthKind.of(auth.auth_type)
        if kind is AuthKind.NONE:
            return None

        if kind is AuthKind.BASIC:
            name, definition = "basicAuth", {"type": "http", "scheme": "basic"}
        elif kind is AuthKind.BEARER:
            name, definition = "bearerAuth", {"type": "http", "scheme": "bearer"}
        elif kind is AuthKind.OAUTH2:
            name, definition = "oauth2", {
                "type": "oauth2",
                "flows": {
                    "implicit": {
                        "authorizationUrl": auth.auth_url or self.options.oauth_authorization_url,
                        "scopes": {},
                    }
                },
            }
        elif kind is AuthKind.API_KEY:
            name, definition = "apiKey", {
                "type": "apiKey",
                "in": "header",
                "name": auth.key or self.options.api_key_header,
            }
        else:
            logger.debug(f"No security scheme for auth type '{auth.auth_type}'")
            return None

        self.context.register_security_scheme(name, definition)
        return [{name: []}]


def _header_value(headers: list[KeyValue], key: str) -> str | None:
    for header in headers:
        if header.key.lower() == key and header.value:
            return str(header.value)
    return None


def _form_example(payload: str | list[KeyValue]) -> Any:
    # multipart fields become {key, value} entries, urlencoded text stays as is
    if isinstance(payload, list):
        return [{"key": f.key, "value": f.value} for f in payload]
    return payload


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON and would not survive serialization
    raise ValueError(f"non-standard JSON constant {name}")
