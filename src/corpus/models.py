"""Data models for corpus documents and their structural units."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class DocumentType(StrEnum):
    """Structural type assigned by the document classifier."""

    TRANSCRIPT = "transcript"
    MARKDOWN = "markdown"
    PLAIN = "plain"


@dataclass(frozen=True)
class DocumentInfo:
    """Listing entry for a corpus file."""

    name: str
    size: int
    modified_at: datetime


@dataclass(frozen=True)
class Document:
    """A corpus file read for one retrieval request."""

    id: str
    type: DocumentType
    size: int
    modified_at: datetime
    raw_text: str


@dataclass
class TimeBlock:
    """Transcript lines anchored to one ``[h:mm:ss]`` timestamp."""

    timestamp: str
    lines: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return " ".join(self.lines)


@dataclass
class Section:
    """A markdown heading and the non-empty lines beneath it.

    ``parent`` is the index of the nearest preceding section with a lower
    level in the parsed section list, or None for a top-level section.
    """

    title: str
    level: int
    content: list[str] = field(default_factory=list)
    parent: int | None = None

    @property
    def text(self) -> str:
        return "\n".join(self.content)


@dataclass(frozen=True)
class PlainStats:
    """Derived figures for documents with no structural units."""

    line_count: int
    words: list[str]

    @property
    def word_count(self) -> int:
        return len(self.words)
