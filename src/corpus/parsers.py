"""Structural parsers for transcript, markdown, and plain-text documents."""

from __future__ import annotations

import re
from collections.abc import Callable

from src.corpus.classifier import TIMESTAMP_RE
from src.corpus.models import DocumentType, PlainStats, Section, TimeBlock

HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")

# Emphasis or quotation-mark wrapped spans. Single quotes must not touch a
# word character on the outside so apostrophes ("don't") are not treated as
# quote delimiters.
QUOTE_RE = re.compile(r"\*\*.*?\*\*|\*.*?\*|\".*?\"|“.*?”|(?<!\w)'[^']*?'(?!\w)")
QUOTE_MARKERS_RE = re.compile(r"\*\*|\*|[\"“”']")
AUTHOR_RE = re.compile(r"\*\*([^*]+?)(?:,|\*\*)|\bby\s+([A-Z][a-zA-Z]*(?:[ ]+[A-Z][a-zA-Z]*)*)")

WORD_RE = re.compile(r"\b[a-z]{3,}\b")

MIN_QUOTE_LENGTH = 10
MAX_QUOTES = 10


def parse_transcript(content: str) -> list[TimeBlock]:
    """Split a transcript into time-blocks.

    A line carrying a ``[h:mm:ss]`` token closes the open block and starts a
    new one whose first line is the rest of that line (when non-empty).
    Other non-empty lines are appended to the open block; lines before the
    first timestamp have no anchor and are dropped. Only blocks with at
    least one line are emitted.
    """
    blocks: list[TimeBlock] = []
    current: TimeBlock | None = None

    for raw_line in content.splitlines():
        match = TIMESTAMP_RE.search(raw_line)
        if match:
            if current is not None and current.lines:
                blocks.append(current)
            residual = (raw_line[: match.start()] + raw_line[match.end() :]).strip()
            current = TimeBlock(timestamp=match.group(1), lines=[residual] if residual else [])
            continue

        line = raw_line.strip()
        if line and current is not None:
            current.lines.append(line)

    if current is not None and current.lines:
        blocks.append(current)

    return blocks


def parse_markdown(content: str) -> list[Section]:
    """Split markdown into a flat, ordered list of sections.

    Level is the heading-marker count. Sections without any content line are
    dropped, as is text before the first heading.
    """
    sections: list[Section] = []
    current: Section | None = None
    # open_levels[level] -> index in `sections` of the latest emitted section at that level
    open_levels: dict[int, int] = {}

    def close(section: Section | None) -> None:
        if section is None or not section.content:
            return
        section.parent = next(
            (open_levels[lvl] for lvl in range(section.level - 1, 0, -1) if lvl in open_levels),
            None,
        )
        sections.append(section)
        open_levels[section.level] = len(sections) - 1
        for deeper in [lvl for lvl in open_levels if lvl > section.level]:
            del open_levels[deeper]

    for raw_line in content.splitlines():
        match = HEADING_RE.match(raw_line)
        if match:
            close(current)
            current = Section(title=match.group(2).strip(), level=len(match.group(1)))
        elif raw_line.strip() and current is not None:
            current.content.append(raw_line.strip())

    close(current)
    return sections


def extract_quotes(content: str) -> list[str]:
    """Return up to ten distinct emphasised or quoted spans longer than 10 characters."""
    quotes: list[str] = []
    flat = content.replace("\n", " ")
    for match in QUOTE_RE.finditer(flat):
        quote = QUOTE_MARKERS_RE.sub("", match.group(0)).strip()
        if len(quote) > MIN_QUOTE_LENGTH and quote not in quotes:
            quotes.append(quote)
    return quotes[:MAX_QUOTES]


def extract_authors(content: str) -> list[str]:
    """Return distinct bolded names and capitalised phrases following "by "."""
    authors: list[str] = []
    for match in AUTHOR_RE.finditer(content):
        author = (match.group(1) or match.group(2) or "").strip()
        if author and author not in authors:
            authors.append(author)
    return authors


def parse_plain(content: str) -> PlainStats:
    """Plain text has no structural units: derive line count and word stream."""
    return PlainStats(
        line_count=len(content.splitlines()),
        words=WORD_RE.findall(content.lower()),
    )


def parse_document(content: str, doc_type: DocumentType) -> list[TimeBlock] | list[Section]:
    """Dispatch to the structural parser for *doc_type*.

    Returns:
        Time-blocks for transcripts, sections for markdown, and an empty
        list for plain text.
    """
    dispatch: dict[DocumentType, Callable[[str], list[TimeBlock] | list[Section]]] = {
        DocumentType.TRANSCRIPT: parse_transcript,
        DocumentType.MARKDOWN: parse_markdown,
    }

    parser = dispatch.get(doc_type)
    if parser is None:
        return []
    return parser(content)
