"""Stopword-filtered term frequencies and top-term selection."""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass

TERM_RE = re.compile(r"\b[a-z]{3,}\b")

STOPWORDS: frozenset[str] = frozenset(
    {
        "the", "and", "for", "that", "this", "with", "you", "have", "are",
        "what", "was", "from", "they", "your", "but", "not", "its",
    }
)

# Conversational filler that dominates spoken transcripts.
FILLER_WORDS: frozenset[str] = frozenset({"yeah", "like", "just", "know", "right", "think"})

TRANSCRIPT_STOPWORDS: frozenset[str] = STOPWORDS | FILLER_WORDS

TRANSCRIPT_TOP_TERMS = 25
TEXT_TOP_TERMS = 20
MARKDOWN_TOP_TERMS = 15


@dataclass(frozen=True)
class TermCount:
    term: str
    count: int


def tokenize(text: str) -> list[str]:
    """Lowercase *text* and return its runs of three or more ASCII letters."""
    return TERM_RE.findall(text.lower())


def term_frequencies(text: str, stopwords: Iterable[str] = STOPWORDS) -> Counter[str]:
    """Count non-stopword terms; iteration order is first occurrence."""
    excluded = frozenset(stopwords)
    return Counter(token for token in tokenize(text) if token not in excluded)


def top_terms(frequencies: Counter[str], limit: int) -> list[TermCount]:
    """Highest-count terms first; ties keep first-occurrence order."""
    return [TermCount(term, count) for term, count in frequencies.most_common(limit)]
