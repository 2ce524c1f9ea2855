"""Server — component wiring and the stdio transport."""

from docmcp.server.app import Application, build_server_components
from docmcp.server.stdio import StdioServer

__all__ = ["Application", "StdioServer", "build_server_components"]
