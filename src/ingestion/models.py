"""Data models for the vector-index build."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Chunk:
    """A chunk ready for embedding and storage."""

    content: str
    filename: str
    chunk_index: int = 0


@dataclass
class IndexReport:
    """Outcome of an index run over the corpus."""

    indexed: list[str] = field(default_factory=list)
    chunks: int = 0
    errors: list[str] = field(default_factory=list)
