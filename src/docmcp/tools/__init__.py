"""Tools — argument models, handlers, and the registry that runs them."""

from docmcp.tools.builtin import build_tool_registry
from docmcp.tools.errors import ToolArgumentsError, ToolError, ToolNotFoundError
from docmcp.tools.registry import ToolHandler, ToolRegistry

__all__ = [
    "ToolArgumentsError",
    "ToolError",
    "ToolHandler",
    "ToolNotFoundError",
    "ToolRegistry",
    "build_tool_registry",
]
