"""``completion/complete`` suggestions.

Static suggestions are keyed on what precedes the cursor.  When a language
model is configured its reply is offered first, trimmed to a short snippet.
"""

from __future__ import annotations

import logging
from typing import Any

from docmcp.collaborators.errors import GenerationError
from docmcp.collaborators.llm import TextGenerator

logger = logging.getLogger(__name__)

MAX_AI_SNIPPET = 100

_RULES: list[tuple[tuple[str, ...], list[tuple[str, str]]]] = [
    (
        ("op.",),
        [
            ("fromView('schema', 'view')", "Rows from a TDE view"),
            ("fromSQL('SELECT * FROM schema.view')", "Rows from a SQL query"),
            ("fromTriples([...])", "Rows from RDF triple patterns"),
            ("col('column')", "Column reference"),
        ],
    ),
    (
        (").", "]."),
        [
            (".where(op.eq(op.col('column'), value))", "Filter rows"),
            (".select(['column'])", "Project columns"),
            (".orderBy(op.desc('column'))", "Sort rows"),
            (".result()", "Execute the plan"),
        ],
    ),
    (
        ("cts.",),
        [
            ("wordQuery('text')", "Word query"),
            ("andQuery([...])", "Conjunction of queries"),
            ("collectionQuery('name')", "Documents in a collection"),
        ],
    ),
    (
        ("/**", "* "),
        [
            ("@param name Description of the parameter", "Parameter documentation"),
            ("@return Description of return value", "Return value documentation"),
            ("@throws Error Description of the error", "Error documentation"),
        ],
    ),
    (
        ("if ", "while ", "for "),
        [
            ("!== null", "Null check"),
            (".length > 0", "Non-empty check"),
        ],
    ),
]


class CompletionProvider:
    def __init__(self, generator: TextGenerator | None = None) -> None:
        self._generator = generator

    def complete(self, text: str, position: int | None = None) -> dict[str, Any]:
        """Return the ``completion`` result for *text* with the cursor at *position*."""
        cursor = len(text) if position is None else max(0, min(position, len(text)))
        before, after = text[:cursor], text[cursor:]

        values: list[dict[str, str]] = []
        ai = self._ai_suggestion(before, after)
        if ai:
            values.append({"text": ai, "description": "AI-generated completion"})
        lowered = before.lower()
        for triggers, suggestions in _RULES:
            if any(trigger in lowered for trigger in triggers):
                values.extend({"text": t, "description": d} for t, d in suggestions)

        return {"completion": {"values": values, "total": len(values), "hasMore": False}}

    def _ai_suggestion(self, before: str, after: str) -> str | None:
        if self._generator is None or not before.strip():
            return None
        prompt = (
            "Suggest the most likely continuation at the cursor.\n\n"
            f"Text before cursor: {before!r}\nText after cursor: {after!r}\n\n"
            "Reply with the continuation only."
        )
        try:
            reply = self._generator.generate(prompt, max_tokens=64).strip()
        except GenerationError as exc:
            logger.warning("AI completion failed: %s", exc)
            return None
        if not reply:
            return None
        if len(reply) > MAX_AI_SNIPPET:
            reply = reply[:MAX_AI_SNIPPET] + "..."
        return reply
