"""ToolRegistry — maps tool names to handlers and runs them safely."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from docmcp.dispatch.normalizer import normalize_tool_result
from docmcp.protocol.models import ToolResult
from docmcp.tools.errors import ToolArgumentsError, ToolNotFoundError
from docmcp.utils.telemetry import ATTR_TOOL_IS_ERROR, ATTR_TOOL_NAME, get_tracer

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

ToolHandler = Callable[[dict[str, Any] | None], ToolResult | Mapping[str, Any] | str | None]


class ToolRegistry:
    """Name-to-handler routing table for ``tools/call``.

    :meth:`call` never raises for a registered tool: argument problems and
    handler exceptions both come back as ``isError`` results.

    Usage::

        registry = ToolRegistry()
        registry.register("generate_text", GenerateTextTool(generator))
        registry.call("generate_text", {"prompt": "hello"}).is_error  # False
    """

    def __init__(self) -> None:
        self._handlers: dict[str, ToolHandler] = {}

    def register(self, name: str, handler: ToolHandler) -> None:
        if name in self._handlers:
            msg = f"Tool already registered: {name}"
            raise ValueError(msg)
        self._handlers[name] = handler

    def names(self) -> list[str]:
        return list(self._handlers)

    def has(self, name: str) -> bool:
        return name in self._handlers

    def call(self, name: str, arguments: dict[str, Any] | None) -> ToolResult:
        """Run the handler registered under *name*.

        Raises:
            ToolNotFoundError: If no handler is registered under *name*.
        """
        handler = self._handlers.get(name)
        if handler is None:
            raise ToolNotFoundError(name)

        with _tracer.start_as_current_span("tool.call") as span:
            span.set_attribute(ATTR_TOOL_NAME, name)
            try:
                result = normalize_tool_result(handler(arguments))
            except ToolArgumentsError as exc:
                logger.info("Rejected arguments for %s: %s", name, exc.detail)
                result = ToolResult.from_text(str(exc), is_error=True)
            except Exception as exc:
                logger.exception("Tool %s failed", name)
                result = ToolResult.from_text(f"Tool execution failed: {exc}", is_error=True)
            span.set_attribute(ATTR_TOOL_IS_ERROR, result.is_error)
            return result
