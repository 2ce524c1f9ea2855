"""Collaborator error types.

Tool handlers catch these and report them as ``isError`` results; they never
reach the dispatcher.
"""

from __future__ import annotations


class CollaboratorError(Exception):
    """Base error for language-model, search, and docs backends."""


class GenerationError(CollaboratorError):
    """The language model call failed or returned nothing usable."""


class SearchError(CollaboratorError):
    """The document database rejected or failed a query."""


class CollaboratorUnavailableError(CollaboratorError):
    """The backend is not configured or cannot be reached."""
