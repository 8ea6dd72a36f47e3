"""Keyword search over the full corpus: headings first, then chunks."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from src.corpus.classifier import TIMESTAMP_RE
from src.corpus.models import Document, DocumentType
from src.corpus.parsers import HEADING_RE, parse_markdown, parse_transcript
from src.ingestion.chunking import split_paragraphs
from src.retrieval.intent import LOOSE_STOPWORDS, derive_search_terms


class MatchLevel(StrEnum):
    HEADING = "heading"
    CHUNK = "chunk"
    LOOSE = "loose"


@dataclass(frozen=True)
class KeywordHit:
    file: str
    label: str
    text: str
    matched_terms: tuple[str, ...]


@dataclass(frozen=True)
class KeywordSearchResult:
    terms: tuple[str, ...]
    level: MatchLevel | None
    hits: list[KeywordHit]


def _term_pattern(term: str) -> re.Pattern[str]:
    return re.compile(rf"(?<!\w){re.escape(term)}(?!\w)", re.IGNORECASE)


def _matching(text: str, patterns: dict[str, re.Pattern[str]]) -> tuple[str, ...]:
    return tuple(term for term, pattern in patterns.items() if pattern.search(text))


def _preamble(text: str, marker: re.Pattern[str]) -> str:
    """Non-empty lines before the first line carrying *marker*."""
    lines: list[str] = []
    for raw_line in text.splitlines():
        if marker.search(raw_line):
            break
        if raw_line.strip():
            lines.append(raw_line.strip())
    return "\n".join(lines)


def search_units(document: Document) -> list[tuple[str, str]]:
    """Split a document into ``(label, text)`` search units by type.

    Transcripts yield time-blocks, markdown yields sections, and plain text
    yields blank-line separated paragraphs. Text ahead of the first
    timestamp or heading becomes a ``preamble`` unit. A transcript or
    markdown file with no parsed units is split into paragraphs.
    """
    text = document.raw_text
    units: list[tuple[str, str]] = []
    marker: re.Pattern[str] | None = None
    if document.type is DocumentType.TRANSCRIPT:
        units = [(f"[{b.timestamp}]", b.text) for b in parse_transcript(text)]
        marker = TIMESTAMP_RE
    elif document.type is DocumentType.MARKDOWN:
        units = [
            (s.title, f"{'#' * s.level} {s.title}\n{s.text}")
            for s in parse_markdown(text)
        ]
        marker = HEADING_RE

    if not units or marker is None:
        return [(f"paragraph {i + 1}", p) for i, p in enumerate(split_paragraphs(text))]

    preamble = _preamble(text, marker)
    if preamble:
        units.insert(0, ("preamble", preamble))
    return units


def heading_sections(text: str) -> list[tuple[str, str]]:
    """Every heading with its whole section as ``(title, text)``.

    A section runs to the next heading of the same or a higher level, so it
    includes its subsections. Headings with no content of their own are kept.
    """
    lines = text.splitlines()
    headings: list[tuple[int, int, str]] = []
    for index, raw_line in enumerate(lines):
        match = HEADING_RE.match(raw_line)
        if match:
            headings.append((index, len(match.group(1)), match.group(2).strip()))

    sections: list[tuple[str, str]] = []
    for position, (start, level, title) in enumerate(headings):
        end = next(
            (line for line, lvl, _ in headings[position + 1 :] if lvl <= level),
            len(lines),
        )
        body = [line.rstrip() for line in lines[start:end] if line.strip()]
        sections.append((title, "\n".join(body)))
    return sections


def heading_matches(documents: list[Document], terms: list[str]) -> list[KeywordHit]:
    """Whole markdown sections whose heading contains any search term."""
    patterns = {term: _term_pattern(term) for term in terms}
    hits: list[KeywordHit] = []
    for document in documents:
        if document.type is not DocumentType.MARKDOWN:
            continue
        for title, text in heading_sections(document.raw_text):
            matched = _matching(title, patterns)
            if matched:
                hits.append(KeywordHit(document.id, title, text, matched))
    return hits


def chunk_matches(documents: list[Document], terms: list[str], limit: int) -> list[KeywordHit]:
    """Search units containing any term, ranked by distinct matching terms.

    Ties keep corpus order, then position within the document.
    """
    patterns = {term: _term_pattern(term) for term in terms}
    hits: list[KeywordHit] = []
    for document in documents:
        for label, text in search_units(document):
            matched = _matching(text, patterns)
            if matched:
                hits.append(KeywordHit(document.id, label, text, matched))
    hits.sort(key=lambda hit: len(hit.matched_terms), reverse=True)
    return hits[:limit]


def keyword_search(
    documents: list[Document],
    query: str,
    limit: int = 15,
    loose_limit: int = 10,
    terms: list[str] | None = None,
) -> KeywordSearchResult:
    """Search the corpus for query keywords, loosening in three steps.

    1. Headings containing any term (words > 2 chars plus bigrams).
    2. Paragraph/section chunks ranked by distinct matches, up to *limit*.
    3. Same with 2+ character terms and a smaller stopword list, up to
       *loose_limit*.

    *terms* overrides the strict-pass terms derived from *query*.
    """
    if terms is None:
        terms = derive_search_terms(query)
    if terms:
        hits = heading_matches(documents, terms)
        if hits:
            return KeywordSearchResult(tuple(terms), MatchLevel.HEADING, hits)

        hits = chunk_matches(documents, terms, limit)
        if hits:
            return KeywordSearchResult(tuple(terms), MatchLevel.CHUNK, hits)

    loose_terms = derive_search_terms(query, min_length=2, stopwords=LOOSE_STOPWORDS)
    if loose_terms:
        hits = chunk_matches(documents, loose_terms, loose_limit)
        if hits:
            return KeywordSearchResult(tuple(loose_terms), MatchLevel.LOOSE, hits)

    return KeywordSearchResult(tuple(terms), None, [])
