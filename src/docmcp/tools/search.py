"""``search_marklogic`` — natural language to MarkLogic structured query.

The query is a single ``and-query`` of ``term-query`` clauses::

    {"query": {"queries": [{"and-query": {"queries": [
        {"term-query": {"text": ["neural"]}},
        {"term-query": {"text": ["network"]}}
    ]}}]}}

When a language model is configured it proposes the terms; otherwise they
are extracted from the prompt by dropping stop words.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from docmcp.collaborators.errors import CollaboratorError, GenerationError
from docmcp.collaborators.llm import TextGenerator
from docmcp.collaborators.search import DocumentSearch, SearchResultSet
from docmcp.protocol.models import ToolResult
from docmcp.tools.args import SearchArgs, parse_arguments

logger = logging.getLogger(__name__)

NAME = "search_marklogic"
MIME_TYPE = "text/markdown"
TOOL_VERSION = "structured_v1.0"
MAX_TERMS = 8

_WORD = re.compile(r"\w[\w\-]*", re.UNICODE)
STOP_WORDS = frozenset(
    """
    a about all an and any are as at be by can could do documents docs document
    find for from get give have i in into is it list me my of on or please
    related search show some that the their them these this those to want
    was were what which with would you
    """.split()
)

_TERMS_PROMPT = """\
Extract the search terms a MarkLogic term-query should match for the request
below. Reply with a JSON array of lowercase strings and nothing else.

Request: {request}
"""


def extract_terms(prompt: str) -> list[str]:
    """Meaningful words of *prompt*, in order, without duplicates."""
    terms: list[str] = []
    for word in _WORD.findall(prompt.lower()):
        if word in STOP_WORDS or len(word) < 2 or word in terms:
            continue
        terms.append(word)
    return terms[:MAX_TERMS]


def build_structured_query(terms: list[str]) -> dict[str, Any]:
    clauses = [{"term-query": {"text": [term]}} for term in terms]
    return {"query": {"queries": [{"and-query": {"queries": clauses}}]}}


def _parse_terms(reply: str) -> list[str] | None:
    text = reply.strip()
    if text.startswith("```"):
        text = text.strip("`")
        text = text.removeprefix("json").strip()
    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, list):
        return None
    terms = [str(t).strip().lower() for t in data if isinstance(t, str) and t.strip()]
    return terms[:MAX_TERMS] or None


class SearchMarkLogicTool:
    def __init__(
        self,
        generator: TextGenerator | None,
        backend: DocumentSearch | None,
    ) -> None:
        self._generator = generator
        self._backend = backend

    def __call__(self, arguments: dict[str, Any] | None) -> ToolResult:
        args = parse_arguments(SearchArgs, NAME, arguments)
        terms, from_model = self._terms(args.prompt)
        if not terms:
            # nothing meaningful left, so search the prompt as one phrase
            terms = [args.prompt.strip()]
        query = build_structured_query(terms)
        metadata: dict[str, Any] = {
            "searchPrompt": args.prompt,
            "toolVersion": TOOL_VERSION,
            "queryFormat": "json",
            "searchFramework": "marklogic_structured",
            "searchTerms": terms,
        }

        if self._backend is None:
            metadata["status"] = "query_only" if from_model else "fallback_template"
            return ToolResult.from_text(
                _render(args.prompt, query, None, note="No database configured; query not executed."),
                mime_type=MIME_TYPE,
                metadata=metadata,
            )

        try:
            results = self._backend.search(query)
        except CollaboratorError as exc:
            logger.error("MarkLogic search failed: %s", exc)
            metadata["status"] = "failed"
            return ToolResult.from_text(
                _render(args.prompt, query, None, note=f"Search failed: {exc}"),
                is_error=True,
                mime_type=MIME_TYPE,
                metadata=metadata,
            )

        metadata["status"] = "executed"
        metadata["totalResults"] = results.total
        return ToolResult.from_text(
            _render(args.prompt, query, results), mime_type=MIME_TYPE, metadata=metadata
        )

    def _terms(self, prompt: str) -> tuple[list[str], bool]:
        if self._generator is not None:
            try:
                proposed = _parse_terms(self._generator.generate(_TERMS_PROMPT.format(request=prompt)))
            except GenerationError as exc:
                logger.warning("Term extraction by model failed: %s", exc)
            else:
                if proposed:
                    return proposed, True
                logger.warning("Model reply was not a JSON array of terms; extracting locally")
        return extract_terms(prompt), False


def _render(
    prompt: str,
    query: dict[str, Any],
    results: SearchResultSet | None,
    *,
    note: str = "",
) -> str:
    parts = [
        "## MarkLogic Structured Query",
        "",
        f"**Request:** {prompt}",
        "",
        "```json",
        json.dumps(query, indent=2, ensure_ascii=False),
        "```",
        "",
    ]
    if results is not None:
        parts.append(f"### Results ({results.total} total)")
        parts.append("")
        if not results.hits:
            parts.append("No matching documents.")
        for hit in results.hits:
            line = f"- `{hit.uri}` (score {hit.score:g})"
            if hit.snippet:
                line += f": {hit.snippet}"
            parts.append(line)
    if note:
        parts.append(note)
    return "\n".join(parts).rstrip() + "\n"
