"""Wiring — build every server component from a :class:`ServerConfig`."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TextIO

from docmcp.catalog.catalog import Catalog
from docmcp.catalog.data import build_default_catalog
from docmcp.collaborators.docs import DocsRetriever, KeywordDocsIndex
from docmcp.collaborators.llm import LiteLLMGenerator, TextGenerator
from docmcp.collaborators.search import DocumentSearch, MarkLogicSearchClient
from docmcp.config import ServerConfig
from docmcp.dispatch.completion import CompletionProvider
from docmcp.dispatch.dispatcher import RequestDispatcher
from docmcp.dispatch.resources import ResourceReader
from docmcp.logs import LogReader
from docmcp.server.stdio import StdioServer
from docmcp.subscriptions.registry import SubscriptionRegistry
from docmcp.subscriptions.sinks import CompositeSink, LoggingSink
from docmcp.tools.builtin import build_tool_registry
from docmcp.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


@dataclass
class Application:
    """Every long-lived component of one server process."""

    config: ServerConfig
    catalog: Catalog
    tools: ToolRegistry
    registry: SubscriptionRegistry
    resources: ResourceReader
    dispatcher: RequestDispatcher
    generator: TextGenerator | None = None
    search: DocumentSearch | None = None
    docs: DocsRetriever | None = None
    sink: CompositeSink = field(default_factory=CompositeSink)

    def stdio_server(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> StdioServer:
        """Create a stdio server that also receives this app's notifications."""
        server = StdioServer(
            self.dispatcher,
            max_workers=self.config.server.max_workers,
            stdin=stdin,
            stdout=stdout,
        )
        self.sink.add(server)
        return server


def log_paths(config: ServerConfig) -> list[str]:
    """Candidate log files for the logs resource, configured file first."""
    paths: list[str] = []
    if config.logging.file is not None:
        paths.append(str(config.logging.file))
    for fallback in ("logs/docmcp.log", "./logs/docmcp.log", "../logs/docmcp.log"):
        if fallback not in paths:
            paths.append(fallback)
    return paths


def build_server_components(
    config: ServerConfig | None = None,
    *,
    generator: TextGenerator | None = None,
    search: DocumentSearch | None = None,
    docs: DocsRetriever | None = None,
) -> Application:
    """Assemble an :class:`Application`.

    Collaborators passed explicitly win over the ones *config* would build,
    which lets tests inject fakes.
    """
    config = config or ServerConfig()

    if generator is None and config.llm.enabled:
        generator = LiteLLMGenerator(config.llm)
    if search is None and config.database.enabled:
        search = MarkLogicSearchClient(config.database)
    if docs is None and config.docs.paths:
        docs = KeywordDocsIndex.from_config(config.docs)

    catalog = build_default_catalog(config)
    tools = build_tool_registry(generator=generator, search=search, docs=docs)
    missing = [name for name in catalog.tool_names() if not tools.has(name)]
    if missing:
        msg = f"Catalog tools without handlers: {', '.join(missing)}"
        raise RuntimeError(msg)

    sink = CompositeSink(LoggingSink())
    registry = SubscriptionRegistry(sink=sink)
    reader = ResourceReader(catalog, LogReader(log_paths(config)))
    dispatcher = RequestDispatcher(
        catalog,
        tools,
        reader,
        registry,
        completions=CompletionProvider(generator),
    )
    logger.info(
        "Components ready: model=%s database=%s docs=%d path(s)",
        config.llm.model or "none",
        config.database.base_url or "none",
        len(config.docs.paths),
    )
    return Application(
        config=config,
        catalog=catalog,
        tools=tools,
        registry=registry,
        resources=reader,
        dispatcher=dispatcher,
        generator=generator,
        search=search,
        docs=docs,
        sink=sink,
    )
