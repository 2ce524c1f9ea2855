"""Catalog — static descriptors of tools, resources, templates, and prompts."""

from docmcp.catalog.catalog import DEFAULT_PROTOCOL_VERSION, Catalog
from docmcp.catalog.data import build_default_catalog
from docmcp.catalog.models import (
    PromptArgument,
    PromptDescriptor,
    ResourceDescriptor,
    ResourceTemplate,
    ToolDescriptor,
)
from docmcp.catalog.templates import match_template

__all__ = [
    "DEFAULT_PROTOCOL_VERSION",
    "Catalog",
    "PromptArgument",
    "PromptDescriptor",
    "ResourceDescriptor",
    "ResourceTemplate",
    "ToolDescriptor",
    "build_default_catalog",
    "match_template",
]
