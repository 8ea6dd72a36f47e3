"""Per-document analysis: structure, top terms, topics or key points."""

from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime

from src.analysis.terms import (
    MARKDOWN_TOP_TERMS,
    STOPWORDS,
    TEXT_TOP_TERMS,
    TRANSCRIPT_STOPWORDS,
    TRANSCRIPT_TOP_TERMS,
    TermCount,
    term_frequencies,
    top_terms,
)
from src.analysis.topics import KeyPoint, Topic, extract_key_points, rank_topics
from src.corpus.models import Document, DocumentType, Section, TimeBlock
from src.corpus.parsers import (
    extract_authors,
    extract_quotes,
    parse_markdown,
    parse_plain,
    parse_transcript,
)

MAX_KEY_POINTS = 20


@dataclass
class DocumentAnalysis:
    """Structured view of one document."""

    name: str
    type: DocumentType
    line_count: int
    word_count: int
    top_terms: list[TermCount]
    structural_units: list[TimeBlock] | list[Section] = field(default_factory=list)
    topics: list[Topic] = field(default_factory=list)
    key_points: list[KeyPoint] = field(default_factory=list)
    authors: list[str] = field(default_factory=list)
    quotes: list[str] = field(default_factory=list)


def analyze_transcript(document: Document) -> DocumentAnalysis:
    text = document.raw_text
    blocks = parse_transcript(text)
    terms = top_terms(term_frequencies(text, TRANSCRIPT_STOPWORDS), TRANSCRIPT_TOP_TERMS)
    stats = parse_plain(text)
    return DocumentAnalysis(
        name=document.id,
        type=document.type,
        line_count=stats.line_count,
        word_count=stats.word_count,
        top_terms=terms,
        structural_units=blocks,
        topics=rank_topics(blocks, terms),
    )


def analyze_markdown(document: Document) -> DocumentAnalysis:
    text = document.raw_text
    sections = parse_markdown(text)
    terms = top_terms(term_frequencies(text), MARKDOWN_TOP_TERMS)
    stats = parse_plain(text)
    return DocumentAnalysis(
        name=document.id,
        type=document.type,
        line_count=stats.line_count,
        word_count=stats.word_count,
        top_terms=terms,
        structural_units=sections,
        key_points=extract_key_points(sections, terms, limit=MAX_KEY_POINTS),
        authors=extract_authors(text),
        quotes=extract_quotes(text),
    )


def analyze_plain(document: Document) -> DocumentAnalysis:
    text = document.raw_text
    stats = parse_plain(text)
    return DocumentAnalysis(
        name=document.id,
        type=document.type,
        line_count=stats.line_count,
        word_count=stats.word_count,
        top_terms=top_terms(term_frequencies(text, STOPWORDS), TEXT_TOP_TERMS),
    )


def analyze(document: Document) -> DocumentAnalysis:
    """Analyze *document* according to its classified type."""
    if document.type is DocumentType.TRANSCRIPT:
        return analyze_transcript(document)
    if document.type is DocumentType.MARKDOWN:
        return analyze_markdown(document)
    return analyze_plain(document)


class AnalysisCache:
    """Bounded cache of analyses keyed by ``(filename, mtime)``.

    A document re-uploaded under the same name gets a new mtime and misses
    the cache; :meth:`invalidate` drops a name explicitly (e.g. on delete).
    """

    def __init__(self, max_entries: int = 64) -> None:
        self.max_entries = max_entries
        self._entries: OrderedDict[tuple[str, datetime], DocumentAnalysis] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, document: Document) -> DocumentAnalysis:
        key = (document.id, document.modified_at)
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._entries.move_to_end(key)
                return cached

        result = analyze(document)

        with self._lock:
            self._entries[key] = result
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
        return result

    def invalidate(self, name: str) -> None:
        with self._lock:
            for key in [k for k in self._entries if k[0] == name]:
                del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)
