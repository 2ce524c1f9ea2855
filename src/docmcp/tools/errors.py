"""Tool-layer error types.

These never leave the tool layer as exceptions: :class:`ToolRegistry`
converts them into ``isError`` results so the client sees a tool failure,
not a protocol failure.
"""

from __future__ import annotations


class ToolError(Exception):
    """Base error for all tool-layer failures."""


class ToolNotFoundError(ToolError):
    """Requested tool has no registered handler."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool not found: {name}")


class ToolArgumentsError(ToolError):
    """Arguments were missing or failed schema validation."""

    def __init__(self, name: str, detail: str) -> None:
        self.name = name
        self.detail = detail
        super().__init__(f"Invalid arguments for {name}: {detail}")
