"""Shared error types for the protocol layer.

Every error carries the JSON-RPC ``code`` it maps to when it escapes a
method handler.
"""

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603


class ProtocolError(Exception):
    """Base error for all protocol-layer failures."""

    code: int = INTERNAL_ERROR
    default_message: str = "Internal error"

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail or self.default_message)


class ParseError(ProtocolError):
    """The message is not well-formed JSON or lacks a ``method``."""

    code = PARSE_ERROR
    default_message = "Parse error"


class InvalidRequestError(ProtocolError):
    """The message is JSON but not a valid JSON-RPC 2.0 request object."""

    code = INVALID_REQUEST
    default_message = "Invalid Request"


class MethodNotFoundError(ProtocolError):
    """No handler is registered for the requested method."""

    code = METHOD_NOT_FOUND
    default_message = "Method not found"

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Unknown method: {method}")


class InternalError(ProtocolError):
    """Unexpected failure while routing or executing a request."""


class NotFoundError(ProtocolError):
    """A named capability does not exist in the registry."""

    code = METHOD_NOT_FOUND
    kind = "Capability"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"{self.kind} not found: {name}")


class ToolNotFoundError(NotFoundError):
    """Requested tool does not exist in the registry."""

    kind = "Tool"


class ResourceNotFoundError(NotFoundError):
    """Requested resource does not exist in the registry."""

    kind = "Resource"


class PromptNotFoundError(NotFoundError):
    """Requested prompt does not exist in the registry."""

    kind = "Prompt"
