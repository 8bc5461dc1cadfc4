"""Exception hierarchy for collection-openapi.

All custom exceptions inherit from CollectionOpenAPIError so callers can
catch everything raised by this package in a single except clause.

The export core itself never lets these escape: a request that fails to
build is recorded as an omission and the document is still produced.
"""


class CollectionOpenAPIError(Exception):
    """Base exception for all collection-openapi errors."""

    pass


class CollectionLoadError(CollectionOpenAPIError):
    """A collection file could not be read or has an unrecognised shape.

    Raised when:
    - The file is not valid JSON/YAML
    - The top-level value is neither a collection object nor a list
    - A collection entry is missing its name
    """

    pass


class UnsupportedMethodError(CollectionOpenAPIError):
    """A request uses an HTTP method OpenAPI has no operation slot for."""

    def __init__(self, method: str):
        self.method = method
        super().__init__(f"unsupported method '{method}'")
