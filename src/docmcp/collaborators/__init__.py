"""External collaborators — language model, document database, documentation index."""

from docmcp.collaborators.docs import DocMatch, DocsRetriever, KeywordDocsIndex
from docmcp.collaborators.errors import (
    CollaboratorError,
    CollaboratorUnavailableError,
    GenerationError,
    SearchError,
)
from docmcp.collaborators.llm import LiteLLMGenerator, TextGenerator
from docmcp.collaborators.search import (
    DocumentSearch,
    MarkLogicSearchClient,
    SearchHit,
    SearchResultSet,
)

__all__ = [
    "CollaboratorError",
    "CollaboratorUnavailableError",
    "DocMatch",
    "DocsRetriever",
    "DocumentSearch",
    "GenerationError",
    "KeywordDocsIndex",
    "LiteLLMGenerator",
    "MarkLogicSearchClient",
    "SearchError",
    "SearchHit",
    "SearchResultSet",
    "TextGenerator",
]
