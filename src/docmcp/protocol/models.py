"""MCP models — JSON-RPC 2.0 envelopes and the tool-result payload.

Wire names are camelCase; Python attributes are snake_case with aliases.
Serialise with :meth:`JsonRpcResponse.to_wire` / ``model_dump(by_alias=True)``.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

JsonScalar = str | int | float | bool | None

DEFAULT_PROTOCOL_VERSION = "2024-11-05"

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request message."""

    jsonrpc: Literal["2.0"] = "2.0"
    method: str = Field(min_length=1)
    id: JsonScalar = None
    params: dict[str, Any] = Field(default_factory=dict)

    @field_validator("params", mode="before")
    @classmethod
    def _null_params(cls, value: Any) -> Any:
        return {} if value is None else value


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message carrying exactly one of result/error."""

    jsonrpc: str = "2.0"
    id: JsonScalar = None
    result: dict[str, Any] | None = None
    error: JsonRpcError | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> JsonRpcResponse:
        if (self.result is None) == (self.error is None):
            msg = "response must carry exactly one of 'result' or 'error'"
            raise ValueError(msg)
        return self

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_wire(self) -> dict[str, Any]:
        """Return the wire dict; ``id`` is always present, even when null."""
        wire: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            wire["error"] = self.error.model_dump(exclude_none=True)
        else:
            wire["result"] = self.result
        return wire


# ---------------------------------------------------------------------------
# Tool results
# ---------------------------------------------------------------------------


class ContentBlock(BaseModel):
    """One block of tool output."""

    type: str = "text"
    text: str


class ToolResult(BaseModel):
    """Canonical ``tools/call`` payload.

    ``is_error`` marks a tool that ran and reported failure; it is unrelated
    to JSON-RPC errors, which mean the request itself was bad.
    """

    model_config = {"populate_by_name": True}

    content: list[ContentBlock] = Field(min_length=1)
    is_error: bool = Field(default=False, alias="isError")
    metadata: dict[str, Any] | None = None
    mime_type: str | None = Field(default=None, alias="mimeType")

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        is_error: bool = False,
        mime_type: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ToolResult:
        """Convenience constructor for a single text block."""
        return cls(
            content=[ContentBlock(text=text)],
            is_error=is_error,
            mime_type=mime_type,
            metadata=metadata,
        )

    @property
    def text(self) -> str:
        """All text blocks joined by newlines."""
        return "\n".join(block.text for block in self.content if block.type == "text")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
