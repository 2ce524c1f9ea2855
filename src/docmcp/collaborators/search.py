"""Document database boundary — MarkLogic structured search over REST."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx
from pydantic import BaseModel

from docmcp.collaborators.errors import CollaboratorUnavailableError, SearchError
from docmcp.config import DatabaseConfig
from docmcp.utils.telemetry import get_tracer

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


class SearchHit(BaseModel):
    """One matching document."""

    uri: str
    score: float = 0.0
    snippet: str = ""


class SearchResultSet(BaseModel):
    total: int = 0
    hits: list[SearchHit] = []


class DocumentSearch(Protocol):
    """Runs a structured query against the document database."""

    def search(self, query: dict[str, Any]) -> SearchResultSet:
        """Execute *query*.

        Raises:
            SearchError: If the database rejects or fails the query.
        """
        ...


class MarkLogicSearchClient:
    """:class:`DocumentSearch` that POSTs to MarkLogic's ``/v1/search`` endpoint."""

    def __init__(self, config: DatabaseConfig, transport: httpx.BaseTransport | None = None) -> None:
        if not config.base_url:
            msg = "MarkLogicSearchClient requires database.base_url to be set"
            raise CollaboratorUnavailableError(msg)
        self.config = config
        self._transport = transport

    def search(self, query: dict[str, Any]) -> SearchResultSet:
        params: dict[str, str] = {"format": "json", "pageLength": str(self.config.page_length)}
        if self.config.database:
            params["database"] = self.config.database
        auth = None
        if self.config.username:
            auth = httpx.DigestAuth(self.config.username, self.config.password or "")

        with _tracer.start_as_current_span("marklogic.search"):
            try:
                with httpx.Client(
                    base_url=self.config.base_url or "",
                    auth=auth,
                    timeout=self.config.timeout,
                    transport=self._transport,
                ) as client:
                    response = client.post("/v1/search", params=params, json=query)
                    response.raise_for_status()
                    payload: Any = response.json()
            except httpx.HTTPError as exc:
                logger.warning("MarkLogic search failed: %s", exc)
                raise SearchError(str(exc)) from exc
            except ValueError as exc:
                raise SearchError(f"Invalid JSON from MarkLogic: {exc}") from exc

        return parse_search_response(payload)


def parse_search_response(payload: Any) -> SearchResultSet:
    """Convert a ``/v1/search?format=json`` body into a :class:`SearchResultSet`."""
    if not isinstance(payload, dict):
        raise SearchError("MarkLogic search response must be a JSON object")
    hits: list[SearchHit] = []
    for item in payload.get("results") or []:
        if not isinstance(item, dict) or "uri" not in item:
            continue
        hits.append(
            SearchHit(
                uri=str(item["uri"]),
                score=float(item.get("score") or 0.0),
                snippet=_snippet_text(item.get("matches")),
            )
        )
    total = payload.get("total")
    return SearchResultSet(total=int(total) if isinstance(total, int) else len(hits), hits=hits)


def _snippet_text(matches: Any) -> str:
    # matches: [{"match-text": ["plain", {"highlight": "term"}, ...]}, ...]
    if not isinstance(matches, list):
        return ""
    fragments: list[str] = []
    for match in matches:
        if not isinstance(match, dict):
            continue
        parts: list[str] = []
        for piece in match.get("match-text") or []:
            if isinstance(piece, str):
                parts.append(piece)
            elif isinstance(piece, dict) and "highlight" in piece:
                parts.append(str(piece["highlight"]))
        fragments.append("".join(parts))
    return " ".join(" ".join(fragments).split())
