"""Endpoint URL decomposition.

Collection endpoints are raw strings that may use ``<<name>>`` placeholders
for path variables. They are split into a server base URL and an OpenAPI
path template using ``{name}`` syntax.
"""

import re
from urllib.parse import parse_qsl, urlsplit

from pydantic import BaseModel

PLACEHOLDER_RE = re.compile(r"<<(.+?)>>")
FALLBACK_RE = re.compile(r"^(https?://[^/]+)(/.*)?$", re.IGNORECASE)


class DecomposedURL(BaseModel):
    """An endpoint split into server and path template."""

    url: str  # full URL with {name} placeholders
    base_url: str  # scheme://host[:port], "" when unknown
    path: str
    path_variables: list[str] = []
    query_names: list[str] = []


def decompose_url(url: str) -> DecomposedURL:
    """Split an endpoint string into base URL, path template and names.

    Falls back to a plain regex split when the string is not an absolute
    URL (e.g. it starts with an unresolved ``<<baseUrl>>`` variable). The
    fallback performs no placeholder rewriting and reports no names.
    """
    url = url.strip()
    parsed = _parse_absolute(url)
    if parsed is None:
        return _fallback(url)

    scheme, host, port, path, query = parsed
    path_variables = PLACEHOLDER_RE.findall(path)
    template = PLACEHOLDER_RE.sub(r"{\1}", path) or "/"

    query_names: list[str] = []
    for key, _ in parse_qsl(query, keep_blank_values=True):
        if key not in query_names:
            query_names.append(key)

    base_url = f"{scheme}://{host}" + (f":{port}" if port is not None else "")
    return DecomposedURL(
        url=PLACEHOLDER_RE.sub(r"{\1}", url),
        base_url=base_url,
        path=template,
        path_variables=path_variables,
        query_names=query_names,
    )


def _parse_absolute(url: str) -> tuple[str, str, int | None, str, str] | None:
    """Parse an absolute URL, or return None when it is not one."""
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        return None
    if not parts.scheme or not parts.hostname:
        return None
    if PLACEHOLDER_RE.search(parts.netloc):
        return None

    host = parts.hostname
    if ":" in host:
        host = f"[{host}]"
    return parts.scheme.lower(), host, port, parts.path, parts.query


def _fallback(url: str) -> DecomposedURL:
    match = FALLBACK_RE.match(url)
    if match:
        base_url, path = match.group(1), match.group(2) or "/"
    else:
        base_url, path = "", url
    return DecomposedURL(url=url, base_url=base_url, path=path)
