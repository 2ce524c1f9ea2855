"""Protocol layer — JSON-RPC envelopes, codec, and protocol errors."""

from docmcp.protocol.codec import (
    DecodeError,
    decode_request,
    encode_error,
    encode_frame,
    encode_notification,
    encode_result,
)
from docmcp.protocol.errors import (
    InternalError,
    InvalidParamsError,
    InvalidRequestError,
    MethodNotFoundError,
    ProtocolError,
    ResourceNotFoundError,
)
from docmcp.protocol.models import (
    ContentBlock,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    ToolResult,
)

__all__ = [
    "ContentBlock",
    "DecodeError",
    "InternalError",
    "InvalidParamsError",
    "InvalidRequestError",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MethodNotFoundError",
    "ProtocolError",
    "ResourceNotFoundError",
    "ToolResult",
    "decode_request",
    "encode_error",
    "encode_frame",
    "encode_notification",
    "encode_result",
]
