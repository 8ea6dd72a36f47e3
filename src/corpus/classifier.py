"""Document type classification by filename and content sample."""

from __future__ import annotations

import re
from collections.abc import Callable

from src.corpus.models import DocumentType

TIMESTAMP_RE = re.compile(r"\[(\d+:\d{2}:\d{2})\]")
HEADING_LINE_RE = re.compile(r"^#+\s", re.MULTILINE)

MARKDOWN_SUFFIXES = (".md", ".markdown")


def _looks_like_transcript(filename: str, content: str) -> bool:
    return "transcript" in filename.lower() or TIMESTAMP_RE.search(content) is not None


def _looks_like_markdown(filename: str, content: str) -> bool:
    return filename.lower().endswith(MARKDOWN_SUFFIXES) or HEADING_LINE_RE.search(content) is not None


# Ordered: timestamps are a stronger structural signal than headings, so
# transcripts win when both match.
CLASSIFICATION_RULES: list[tuple[DocumentType, Callable[[str, str], bool]]] = [
    (DocumentType.TRANSCRIPT, _looks_like_transcript),
    (DocumentType.MARKDOWN, _looks_like_markdown),
]


def classify_document(filename: str, content: str) -> DocumentType:
    """Assign a document type; the first matching rule wins.

    Args:
        filename: Corpus file name (only the name is inspected).
        content: The document text, or a leading sample of it large
            enough to contain headings/timestamps.

    Returns:
        The matching :class:`DocumentType`, ``PLAIN`` when no rule matches.
    """
    for doc_type, matches in CLASSIFICATION_RULES:
        if matches(filename, content):
            return doc_type
    return DocumentType.PLAIN
