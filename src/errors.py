"""Error taxonomy for the retrieval engine.

None of these escape :meth:`ContextEngine.resolve_context`; each cascade
state turns them into an empty result and the next state is tried.
"""

from __future__ import annotations


class RetrievalError(Exception):
    """Base class for retrieval engine errors."""


class DocumentNotFoundError(RetrievalError):
    """A document name or episode reference resolved to no corpus file."""


class CorpusIOError(RetrievalError):
    """A corpus file could not be read or decoded."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"{name}: {reason}")
        self.name = name
        self.reason = reason


class ExternalServiceError(RetrievalError):
    """The embedding or vector-search service failed or timed out."""
