"""Invocation result normaliser.

Handlers return whatever is convenient: a :class:`ToolResult`, a loose
mapping with ``content``/``isError``, a bare string, or nothing at all.
:func:`normalize_tool_result` coerces each of these into the one shape
``tools/call`` puts on the wire, with non-empty ``content`` guaranteed.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from docmcp.protocol.models import ContentBlock, ToolResult

ERROR_PLACEHOLDER = "Tool execution failed"
EMPTY_PLACEHOLDER = "No content returned"


def normalize_tool_result(raw: Mapping[str, Any] | ToolResult | str | None) -> ToolResult:
    """Coerce a handler's raw return value into a :class:`ToolResult`.

    * ``None`` becomes a success carrying the empty-content placeholder.
    * A string becomes a single text block.
    * A mapping is read for ``content``, ``isError`` (or ``is_error``),
      ``metadata`` and ``mimeType``; empty content is replaced by a
      placeholder that depends on the error flag.  ``metadata`` and
      ``mimeType`` survive only when present.
    """
    if isinstance(raw, ToolResult):
        return raw
    if raw is None:
        return ToolResult.from_text(EMPTY_PLACEHOLDER)
    if isinstance(raw, str):
        return ToolResult.from_text(raw if raw else EMPTY_PLACEHOLDER)

    is_error = bool(raw.get("isError", raw.get("is_error", False)))
    blocks = _content_blocks(raw.get("content"))
    if not blocks:
        blocks = [ContentBlock(text=ERROR_PLACEHOLDER if is_error else EMPTY_PLACEHOLDER)]

    metadata = raw.get("metadata")
    mime_type = raw.get("mimeType", raw.get("mime_type"))
    return ToolResult(
        content=blocks,
        is_error=is_error,
        metadata=dict(metadata) if isinstance(metadata, Mapping) else None,
        mime_type=mime_type if isinstance(mime_type, str) else None,
    )


def _content_blocks(content: Any) -> list[ContentBlock]:
    if content is None:
        return []
    if isinstance(content, str):
        return [ContentBlock(text=content)] if content else []
    if isinstance(content, Mapping):
        content = [content]
    blocks: list[ContentBlock] = []
    for item in content:
        if isinstance(item, ContentBlock):
            blocks.append(item)
        elif isinstance(item, Mapping):
            blocks.append(
                ContentBlock(type=str(item.get("type") or "text"), text=str(item.get("text", "")))
            )
        elif item is not None:
            blocks.append(ContentBlock(text=str(item)))
    return blocks
