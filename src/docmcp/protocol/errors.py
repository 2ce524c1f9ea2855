"""Protocol-level error types and JSON-RPC error codes.

Raising a :class:`ProtocolError` from a request handler means the *request*
was bad (unknown method, unknown resource, malformed params).  The dispatcher
turns it into a JSON-RPC error envelope carrying :attr:`ProtocolError.code`.
Tool failures are *not* protocol errors; they travel as ``isError`` results.
"""

from __future__ import annotations

from typing import Any

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
RESOURCE_NOT_FOUND = -32002


class ProtocolError(Exception):
    """Base error for all protocol-layer failures."""

    code: int = INTERNAL_ERROR

    def __init__(self, message: str, *, data: Any = None) -> None:
        self.message = message
        self.data = data
        super().__init__(message)


class InvalidRequestError(ProtocolError):
    """The envelope is well-formed JSON but not a valid request."""

    code = INVALID_REQUEST


class MethodNotFoundError(ProtocolError):
    """No handler exists for the requested method."""

    code = METHOD_NOT_FOUND

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Unknown method: {method}", data={"method": method})


class InvalidParamsError(ProtocolError):
    """Params are missing, of the wrong type, or reference something unknown."""

    code = INVALID_PARAMS


class ResourceNotFoundError(ProtocolError):
    """``resources/read`` referenced a URI no resource or template resolves."""

    code = RESOURCE_NOT_FOUND

    def __init__(self, uri: str) -> None:
        self.uri = uri
        super().__init__(f"Unknown resource: {uri}", data={"uri": uri})


class InternalError(ProtocolError):
    """An unexpected exception escaped a handler."""

    code = INTERNAL_ERROR

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Internal error", data=detail or None)
