"""Documentation retrieval boundary — keyword-ranked passages from local docs.

:class:`KeywordDocsIndex` loads ``.md``, ``.txt`` and ``.rst`` files (loose or
inside ``.zip`` archives) from the configured directories, splits them into
overlapping chunks, and ranks chunks by how many query terms they contain.
"""

from __future__ import annotations

import logging
import re
import zipfile
from collections import Counter
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel

from docmcp.collaborators.errors import SearchError
from docmcp.config import DocsConfig

logger = logging.getLogger(__name__)

DOC_SUFFIXES = frozenset({".md", ".txt", ".rst"})
_TOKEN = re.compile(r"[a-z0-9][a-z0-9_\-]+")
_STOP_WORDS = frozenset(
    "a an and are as at be by can do does for from how i in into is it of on or "
    "the this to what when where which with you your".split()
)


class DocMatch(BaseModel):
    """A passage of documentation relevant to a query."""

    source: str
    text: str
    score: float


class DocsRetriever(Protocol):
    def search(self, text: str, limit: int) -> list[DocMatch]:
        """Return up to *limit* passages ranked by relevance to *text*.

        Raises:
            SearchError: If the index cannot be queried.
        """
        ...


def tokenize(text: str) -> list[str]:
    return [t for t in _TOKEN.findall(text.lower()) if t not in _STOP_WORDS]


def split_chunks(text: str, size: int, overlap: int) -> list[str]:
    """Split *text* into windows of *size* characters overlapping by *overlap*.

    Window ends are pulled back to the last blank line or space so passages
    do not start or stop mid-word where that can be avoided.
    """
    text = text.strip()
    if not text:
        return []
    if len(text) <= size:
        return [text]
    step_floor = max(1, size - overlap)
    chunks: list[str] = []
    start = 0
    while start < len(text):
        end = min(len(text), start + size)
        if end < len(text):
            cut = max(text.rfind("\n\n", start, end), text.rfind(" ", start, end))
            if cut > start + step_floor // 2:
                end = cut
        chunk = text[start:end].strip()
        if chunk:
            chunks.append(chunk)
        if end >= len(text):
            break
        start = max(start + 1, end - overlap)
    return chunks


class _Chunk:
    __slots__ = ("source", "terms", "text")

    def __init__(self, source: str, text: str) -> None:
        self.source = source
        self.text = text
        self.terms = Counter(tokenize(text))


class KeywordDocsIndex:
    """In-memory :class:`DocsRetriever` ranked by query-term overlap.

    Usage::

        index = KeywordDocsIndex.from_config(DocsConfig(paths=[Path("docs")]))
        index.search("configure a TDE template", limit=3)
    """

    def __init__(self, *, chunk_size: int = 1500, chunk_overlap: int = 200) -> None:
        self._chunk_size = chunk_size
        self._chunk_overlap = min(chunk_overlap, chunk_size - 1)
        self._chunks: list[_Chunk] = []

    @classmethod
    def from_config(cls, config: DocsConfig) -> KeywordDocsIndex:
        index = cls(chunk_size=config.chunk_size, chunk_overlap=config.chunk_overlap)
        for path in config.paths:
            index.add_path(path)
        logger.info("Indexed %d documentation chunk(s) from %d path(s)", len(index), len(config.paths))
        return index

    def __len__(self) -> int:
        return len(self._chunks)

    def add_document(self, source: str, text: str) -> int:
        """Index one document and return how many chunks it produced."""
        pieces = split_chunks(text, self._chunk_size, self._chunk_overlap)
        self._chunks.extend(_Chunk(source, piece) for piece in pieces)
        logger.debug("Split %s into %d chunk(s)", source, len(pieces))
        return len(pieces)

    def add_path(self, path: Path) -> None:
        """Index a file, a ``.zip`` archive, or every document under a directory."""
        for source, text in _read_documents(path):
            self.add_document(source, text)

    def search(self, text: str, limit: int) -> list[DocMatch]:
        query = set(tokenize(text))
        if not query:
            return []
        if not self._chunks:
            msg = "No documentation has been indexed"
            raise SearchError(msg)
        scored: list[DocMatch] = []
        for chunk in self._chunks:
            hits = [term for term in query if term in chunk.terms]
            if not hits:
                continue
            # coverage of the query dominates, frequency breaks ties
            score = len(hits) / len(query) + 0.01 * sum(chunk.terms[t] for t in hits)
            scored.append(DocMatch(source=chunk.source, text=chunk.text, score=round(score, 4)))
        scored.sort(key=lambda m: m.score, reverse=True)
        return scored[:limit]


def _read_documents(path: Path) -> Iterator[tuple[str, str]]:
    if path.is_dir():
        for child in sorted(path.rglob("*")):
            if child.is_file():
                yield from _read_documents(child)
        return
    if not path.is_file():
        logger.warning("Documentation path %s does not exist", path)
        return
    if path.suffix == ".zip":
        yield from _read_zip(path)
    elif path.suffix in DOC_SUFFIXES:
        yield str(path), path.read_text(encoding="utf-8", errors="replace")


def _read_zip(path: Path) -> Iterable[tuple[str, str]]:
    try:
        with zipfile.ZipFile(path) as archive:
            for info in archive.infolist():
                if info.is_dir() or Path(info.filename).suffix not in DOC_SUFFIXES:
                    continue
                data = archive.read(info)
                yield f"{path.name}:{info.filename}", data.decode("utf-8", errors="replace")
    except zipfile.BadZipFile as exc:
        logger.error("Skipping unreadable archive %s: %s", path, exc)
