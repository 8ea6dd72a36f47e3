"""Term occurrence counting across corpus documents."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from src.corpus.models import Document
from src.retrieval.intent import pad_episode

MAX_EXAMPLES = 5


@dataclass(frozen=True)
class FileCount:
    file: str
    count: int
    examples: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CountResult:
    term: str
    total_count: int
    per_file: list[FileCount] = field(default_factory=list)
    document_filter: str | None = None
    episode_filter: str | None = None
    searched: int = 0


def count_occurrences(text: str, term: str) -> int:
    """Count case-insensitive, non-overlapping occurrences of *term*.

    Scanning resumes after the end of each match, so ``"aa"`` occurs twice
    in ``"aaaa"``, not three times.
    """
    if not term:
        return 0
    haystack = text.lower()
    needle = term.lower()
    count = 0
    position = haystack.find(needle)
    while position != -1:
        count += 1
        position = haystack.find(needle, position + len(needle))
    return count


def example_lines(text: str, term: str, limit: int = MAX_EXAMPLES) -> list[str]:
    """Return up to *limit* stripped lines containing *term*, in file order."""
    needle = term.lower()
    examples: list[str] = []
    for line in text.splitlines():
        if needle in line.lower():
            examples.append(line.strip())
            if len(examples) >= limit:
                break
    return examples


def episode_pattern(episode: str | int) -> re.Pattern[str]:
    """Case-sensitive ``E<3-digit>`` filename token for an episode number."""
    return re.compile(rf"E{pad_episode(episode)}(?!\d)")


def select_documents(
    names: list[str],
    document_filter: str | None = None,
    episode_filter: str | int | None = None,
) -> list[str]:
    """Narrow *names* by a document filter, else by an episode filter.

    The document filter is a case-insensitive substring match on the file
    name and takes precedence when both are given. With no filter every
    name is returned.
    """
    if document_filter:
        needle = document_filter.lower()
        return [n for n in names if needle in n.lower()]
    if episode_filter is not None and str(episode_filter).strip():
        pattern = episode_pattern(episode_filter)
        return [n for n in names if pattern.search(n)]
    return list(names)


def count_in_documents(
    documents: list[Document],
    term: str,
    example_limit: int = MAX_EXAMPLES,
    document_filter: str | None = None,
    episode_filter: str | None = None,
) -> CountResult:
    """Count *term* in each document and sum across them.

    Only files with at least one occurrence are reported; they are sorted by
    count, highest first (ties keep corpus order).
    """
    per_file: list[FileCount] = []
    total = 0
    for document in documents:
        count = count_occurrences(document.raw_text, term)
        if count == 0:
            continue
        total += count
        per_file.append(
            FileCount(
                file=document.id,
                count=count,
                examples=example_lines(document.raw_text, term, example_limit),
            )
        )

    per_file.sort(key=lambda fc: fc.count, reverse=True)
    return CountResult(
        term=term,
        total_count=total,
        per_file=per_file,
        document_filter=document_filter,
        episode_filter=episode_filter,
        searched=len(documents),
    )
