"""Resource reader — resolves ``resources/read`` URIs to text contents.

Resolution order:

1. exact static resource (``mcp://server/info``, ``mcp://tools/examples``)
2. ``mcp://tools/{toolName}/docs`` (unknown tool is invalid params)
3. ``mcp://logs/{level}`` (unknown level is invalid params)
4. anything else is :class:`ResourceNotFoundError`
"""

from __future__ import annotations

import json
import logging

from pydantic import BaseModel, Field

from docmcp.catalog.catalog import Catalog
from docmcp.catalog.models import (
    LOGS_TEMPLATE,
    SERVER_INFO_URI,
    TOOL_DOCS_TEMPLATE,
    TOOL_EXAMPLES_URI,
)
from docmcp.catalog.templates import match_template
from docmcp.logs import LogReader, is_valid_level
from docmcp.protocol.errors import InvalidParamsError, ResourceNotFoundError

logger = logging.getLogger(__name__)


class ResourceContent(BaseModel):
    """One entry of the ``contents`` array in a ``resources/read`` result."""

    model_config = {"populate_by_name": True}

    uri: str
    mime_type: str = Field(alias="mimeType")
    text: str

    def to_wire(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)


class ResourceReader:
    """Turn a resource URI into its contents using the catalog and log reader."""

    def __init__(self, catalog: Catalog, log_reader: LogReader) -> None:
        self._catalog = catalog
        self._log_reader = log_reader

    def read(self, uri: str) -> list[ResourceContent]:
        """Resolve *uri*.

        Raises:
            InvalidParamsError: For a tool-docs URI naming an unknown tool
                or a logs URI naming an unknown level.
            ResourceNotFoundError: When no resource or template matches.
        """
        static = self._catalog.get_resource(uri)
        if static is not None:
            return [ResourceContent(uri=uri, mime_type=static.mime_type, text=self._static_text(uri))]

        tool_name = match_template(TOOL_DOCS_TEMPLATE, uri)
        if tool_name is not None:
            docs = self._catalog.tool_documentation(tool_name)
            if docs is None:
                msg = f"Unknown tool: {tool_name}"
                raise InvalidParamsError(msg, data={"available": self._catalog.tool_names()})
            return [ResourceContent(uri=uri, mime_type="text/markdown", text=docs)]

        level = match_template(LOGS_TEMPLATE, uri)
        if level is not None:
            if not is_valid_level(level):
                msg = f"Invalid log level: {level}"
                raise InvalidParamsError(
                    msg, data={"valid": ["debug", "info", "warn", "error", "all", "trace"]}
                )
            return [ResourceContent(uri=uri, mime_type="text/plain", text=self._log_reader.read(level))]

        raise ResourceNotFoundError(uri)

    def _static_text(self, uri: str) -> str:
        if uri == SERVER_INFO_URI:
            return json.dumps(
                {
                    "server": self._catalog.server_name,
                    "version": self._catalog.server_version,
                    "capabilities": ["tools", "resources", "prompts", "completion"],
                },
                indent=2,
            )
        if uri == TOOL_EXAMPLES_URI:
            return self._catalog.tool_examples()
        logger.warning("Static resource %s has no content provider", uri)
        return ""
