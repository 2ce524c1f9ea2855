"""Dispatch — method routing, resource reading, and result normalisation."""

from docmcp.dispatch.cancellation import CancellationRegistry
from docmcp.dispatch.completion import CompletionProvider
from docmcp.dispatch.dispatcher import Method, RequestDispatcher
from docmcp.dispatch.normalizer import normalize_tool_result
from docmcp.dispatch.resources import ResourceContent, ResourceReader

__all__ = [
    "CancellationRegistry",
    "CompletionProvider",
    "Method",
    "RequestDispatcher",
    "ResourceContent",
    "ResourceReader",
    "normalize_tool_result",
]
