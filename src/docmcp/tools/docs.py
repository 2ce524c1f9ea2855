"""``marklogic_docs`` — answer questions from the indexed documentation."""

from __future__ import annotations

import logging
from typing import Any

from docmcp.collaborators.docs import DocMatch, DocsRetriever
from docmcp.collaborators.errors import CollaboratorError
from docmcp.protocol.models import ToolResult
from docmcp.tools.args import DocsQueryArgs, parse_arguments

logger = logging.getLogger(__name__)

NAME = "marklogic_docs"
MIME_TYPE = "text/plain"


class MarkLogicDocsTool:
    def __init__(self, retriever: DocsRetriever | None) -> None:
        self._retriever = retriever

    def __call__(self, arguments: dict[str, Any] | None) -> ToolResult:
        args = parse_arguments(DocsQueryArgs, NAME, arguments)
        if self._retriever is None:
            return ToolResult.from_text(
                "Documentation index is not configured (set docs.paths).",
                is_error=True,
                mime_type=MIME_TYPE,
            )
        try:
            matches = self._retriever.search(args.prompt, args.limit)
        except CollaboratorError as exc:
            logger.error("Documentation lookup failed: %s", exc)
            return ToolResult.from_text(
                f"Documentation lookup failed: {exc}", is_error=True, mime_type=MIME_TYPE
            )

        if not matches:
            return ToolResult.from_text(
                f"No documentation matched: {args.prompt}",
                mime_type=MIME_TYPE,
                metadata={"matches": 0},
            )
        return ToolResult.from_text(
            _render(matches),
            mime_type=MIME_TYPE,
            metadata={"matches": len(matches), "sources": sorted({m.source for m in matches})},
        )


def _render(matches: list[DocMatch]) -> str:
    sections = [f"[{i}] {m.source} (score {m.score:g})\n{m.text}" for i, m in enumerate(matches, 1)]
    return "\n\n".join(sections)
