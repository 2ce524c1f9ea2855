"""Envelope codec — pure transforms between raw frames and JSON-RPC models.

:func:`decode_request` never raises; structural problems come back as a
:class:`DecodeError` value that callers turn into an error envelope.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ValidationError

from docmcp.protocol.errors import INVALID_REQUEST, PARSE_ERROR
from docmcp.protocol.models import JsonRpcError, JsonRpcRequest, JsonRpcResponse, JsonScalar

_SCALARS = (str, int, float, bool)


class DecodeError(BaseModel):
    """A request frame that could not be decoded into a :class:`JsonRpcRequest`."""

    code: int
    message: str
    id: JsonScalar = None
    detail: str = ""

    def to_response(self) -> JsonRpcResponse:
        return encode_error(self.id, self.code, self.message, self.detail or None)


def encode_result(request_id: JsonScalar, result: dict[str, Any]) -> JsonRpcResponse:
    """Wrap *result* in a success envelope echoing *request_id*."""
    return JsonRpcResponse(id=request_id, result=result)


def encode_error(
    request_id: JsonScalar,
    code: int,
    message: str,
    data: Any = None,
) -> JsonRpcResponse:
    """Wrap an error object in an envelope echoing *request_id*."""
    return JsonRpcResponse(
        id=request_id,
        error=JsonRpcError(code=code, message=message, data=data),
    )


def decode_request(raw: str | bytes | dict[str, Any]) -> JsonRpcRequest | DecodeError:
    """Decode one request frame.

    Unparseable input yields a parse error with a null id.  Parseable input
    that is not a valid request yields an invalid-request error carrying the
    original id whenever it is a JSON scalar.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            return DecodeError(code=PARSE_ERROR, message="Parse error", detail=str(exc))

    data: Any = raw
    if isinstance(raw, str):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            return DecodeError(code=PARSE_ERROR, message="Parse error", detail=str(exc))

    if not isinstance(data, dict):
        return DecodeError(
            code=INVALID_REQUEST,
            message="Invalid Request",
            detail="request must be a JSON object",
        )

    request_id = _recover_id(data)
    method = data.get("method")
    if not isinstance(method, str) or not method:
        return DecodeError(
            code=INVALID_REQUEST,
            message="Invalid Request",
            id=request_id,
            detail="'method' must be a non-empty string",
        )

    try:
        return JsonRpcRequest.model_validate(data)
    except ValidationError as exc:
        return DecodeError(
            code=INVALID_REQUEST,
            message="Invalid Request",
            id=request_id,
            detail=_first_error(exc),
        )


def encode_frame(message: BaseModel | dict[str, Any]) -> str:
    """Serialise a response or notification to a single JSON line (no newline)."""
    if isinstance(message, JsonRpcResponse):
        payload: Any = message.to_wire()
    elif isinstance(message, BaseModel):
        payload = message.model_dump(by_alias=True, exclude_none=True)
    else:
        payload = message
    return json.dumps(payload, ensure_ascii=False, default=str)


def _recover_id(data: dict[str, Any]) -> JsonScalar:
    value = data.get("id")
    if value is None or isinstance(value, _SCALARS):
        return value
    return None


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg', '')}" if location else str(first.get("msg", ""))


def encode_notification(notification: BaseModel) -> str:
    """Serialise a server-initiated notification (a message with no ``id``) to one line."""
    wire = notification.model_dump(by_alias=True, exclude_none=True)
    wire.pop("id", None)
    return json.dumps(wire, ensure_ascii=False)
