"""Document assembler — walks a collection tree into one OpenAPI document.

Each request is turned into an operation by the OperationBuilder. Servers,
named schemas, examples, security schemes and folder tag descriptions are
accumulated in a BuildContext owned by this run and attached to the final
document once the walk is complete.
"""

import logging
from typing import Sequence

from collection_openapi.collection.base import Collection, Request
from collection_openapi.config import ExportOptions

from .context import BuildContext
from .operation import OperationBuilder

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "API Collection"
DEFAULT_DESCRIPTION = "Generated from API collection"


class DocumentAssembler:
    """One export run. Create a new instance per document."""

    def __init__(self, options: ExportOptions | None = None):
        self.options = options or ExportOptions()
        self.context = BuildContext()
        self.builder = OperationBuilder(self.context, self.options)
        self.paths: dict[str, dict] = {}

    def assemble(self, source: Collection | Sequence[Request]) -> dict:
        """Build the OpenAPI document for a collection or a flat request list."""
        if isinstance(source, Collection):
            self._walk(source, folder_name=None)
            title, description = source.name, source.description
        else:
            self._process_requests(source, folder_name=None)
            title, description = DEFAULT_TITLE, None

        document = {
            "openapi": self.options.openapi_version,
            "info": self._info(title, description),
            "servers": [
                {"url": url, "description": f"Server for {url}"}
                for url in self.context.servers
            ],
            "paths": self.paths,
            "components": {
                "schemas": self.context.schemas,
                "securitySchemes": self.context.security_schemes,
                "examples": self.context.examples,
            },
            "tags": [
                {"name": name, "description": description}
                for name, description in self.context.tag_descriptions.items()
            ],
        }

        operations = sum(len(methods) for methods in self.paths.values())
        skipped = len(self.context.omissions)
        logger.info(
            f"Assembled {operations} operations across {len(self.paths)} paths"
            f" ({skipped} requests skipped)"
        )
        return document

    # -- traversal ------------------------------------------------------------

    def _walk(self, collection: Collection, folder_name: str | None) -> None:
        self._process_requests(collection.requests, folder_name)
        for folder in collection.folders:
            self.context.add_tag_description(folder.name, folder.description)
            self._walk(folder, folder_name=folder.name)

    def _process_requests(self, requests: Sequence[Request], folder_name: str | None) -> None:
        for request in requests:
            result = self.builder.build(request, folder_name)
            self.context.record(result)
            if not result.ok:
                continue
            methods = self.paths.setdefault(result.path, {})
            if result.method in methods:
                logger.debug(
                    f"Request '{result.request_name}' replaces existing operation"
                    f" {result.method.upper()} {result.path}"
                )
            methods[result.method] = result.operation

    # -- info -----------------------------------------------------------------

    def _info(self, title: str | None, description: str | None) -> dict:
        info = {
            "title": self.options.title or title or DEFAULT_TITLE,
            "version": self.options.version,
            "description": self.options.description
            or (description or "").strip()
            or DEFAULT_DESCRIPTION,
        }
        contact = {}
        if self.options.contact_name:
            contact["name"] = self.options.contact_name
        if self.options.contact_url:
            contact["url"] = self.options.contact_url
        if contact:
            info["contact"] = contact
        return info


def assemble(
    source: Collection | Sequence[Request], options: ExportOptions | None = None
) -> dict:
    """Export a collection (or a flat list of requests) as an OpenAPI document."""
    return DocumentAssembler(options).assemble(source)
