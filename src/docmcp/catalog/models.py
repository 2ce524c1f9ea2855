"""Catalog descriptors — tools, resources, resource templates, and prompts."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

SERVER_INFO_URI = "mcp://server/info"
TOOL_EXAMPLES_URI = "mcp://tools/examples"
LOGS_TEMPLATE = "mcp://logs/{level}"
TOOL_DOCS_TEMPLATE = "mcp://tools/{toolName}/docs"


class ToolDescriptor(BaseModel):
    """A tool definition as returned by ``tools/list``."""

    model_config = {"populate_by_name": True, "frozen": True}

    name: str
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")


class ResourceDescriptor(BaseModel):
    """A concrete, URI-addressed resource."""

    model_config = {"populate_by_name": True, "frozen": True}

    uri: str
    name: str
    description: str = ""
    mime_type: str = Field(default="text/plain", alias="mimeType")


class ResourceTemplate(BaseModel):
    """A family of resources addressed by a ``{placeholder}`` URI pattern."""

    model_config = {"populate_by_name": True, "frozen": True}

    uri_template: str = Field(alias="uriTemplate")
    name: str
    description: str = ""
    mime_type: str = Field(default="text/plain", alias="mimeType")


class PromptArgument(BaseModel):
    model_config = {"frozen": True}

    name: str
    description: str = ""
    required: bool = False


class PromptDescriptor(BaseModel):
    """A reusable prompt listed by ``prompts/list``.

    ``template`` holds the ``{{argument}}`` text returned by ``prompts/get``;
    it is excluded from listings.
    """

    model_config = {"frozen": True}

    name: str
    description: str = ""
    arguments: list[PromptArgument] = []
    template: str = Field(default="", exclude=True)
