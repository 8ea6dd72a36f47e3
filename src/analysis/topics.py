"""Topic ranking for transcripts and key-point extraction for markdown."""

from __future__ import annotations

import random
import re
from dataclasses import dataclass

from src.analysis.terms import FILLER_WORDS, TermCount
from src.corpus.models import Section, TimeBlock

MAX_TOPICS = 8
TOPIC_TITLE_TERMS = 3
TOPIC_SUMMARY_CHARS = 120

KEY_POINT_CHARS = 200
KEY_SECTION_RE = re.compile(
    r"strategic|plan|phase|goal|action|gtm|market|author|quote|relevant", re.IGNORECASE
)
# Emoji glyphs may carry a trailing variation selector (U+FE0F).
BULLET_RE = re.compile(r"^[•✅📊📢🎥✍🎤🧩👑📰🗣🎉💬🏠🧠]\ufe0f?\s+")

SAMPLE_BOUNDARIES = (0.0, 0.25, 0.5, 0.75, 1.0)
EXTRA_RANDOM_SAMPLES = 10
MAX_SAMPLES = 15


@dataclass(frozen=True)
class Topic:
    title: str
    timestamp: str
    summary: str


@dataclass(frozen=True)
class KeyPoint:
    title: str
    content: str


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def block_significance(block: TimeBlock, terms: list[TermCount]) -> int:
    """Sum the counts of every top term appearing (as a substring) in the block."""
    text = block.text.lower()
    return sum(t.count for t in terms if t.term in text)


def rank_topics(
    blocks: list[TimeBlock],
    terms: list[TermCount],
    limit: int = MAX_TOPICS,
) -> list[Topic]:
    """Select the most significant time-blocks and summarise them as topics.

    Ranking decides which blocks are kept; the result is emitted in
    chronological order. Blocks containing no usable title term are skipped.
    """
    ranked = sorted(
        range(len(blocks)),
        key=lambda idx: block_significance(blocks[idx], terms),
        reverse=True,
    )
    selected = sorted(ranked[:limit])

    topics: list[Topic] = []
    for idx in selected:
        block = blocks[idx]
        text = block.text
        lowered = text.lower()
        title_terms = [
            t.term for t in terms if t.term in lowered and t.term not in FILLER_WORDS
        ][:TOPIC_TITLE_TERMS]
        if not title_terms:
            continue
        topics.append(
            Topic(
                title=", ".join(title_terms).title(),
                timestamp=block.timestamp,
                summary=_truncate(text, TOPIC_SUMMARY_CHARS),
            )
        )
    return topics


def extract_key_points(
    sections: list[Section],
    boost_terms: list[TermCount] | None = None,
    limit: int | None = None,
) -> list[KeyPoint]:
    """Collect key points from signal-titled sections and bullet lines.

    When *limit* is set and more key points qualify, the ones whose content
    carries the most *boost_terms* weight are kept, in document order.
    """
    points: list[KeyPoint] = []
    for section in sections:
        if KEY_SECTION_RE.search(section.title):
            points.append(
                KeyPoint(
                    title=section.title,
                    content=_truncate(" ".join(section.content), KEY_POINT_CHARS),
                )
            )
        for line in section.content:
            if BULLET_RE.match(line):
                points.append(KeyPoint(title=section.title, content=line))

    if limit is None or len(points) <= limit:
        return points

    weights = boost_terms or []

    def weight(idx: int) -> int:
        text = points[idx].content.lower()
        return sum(t.count for t in weights if t.term in text)

    keep = sorted(sorted(range(len(points)), key=weight, reverse=True)[:limit])
    return [points[idx] for idx in keep]


def sample_block_indices(count: int, seed: int = 0) -> list[int]:
    """Pick a chronological, representative sample of block positions.

    Boundary positions (0%, 25%, 50%, 75%, 100%) are always included; extra
    positions are drawn from a generator seeded with *seed*, so the sample is
    reproducible for a given seed.
    """
    if count <= 0:
        return []

    picks = {round(fraction * (count - 1)) for fraction in SAMPLE_BOUNDARIES}
    rng = random.Random(seed)
    for _ in range(EXTRA_RANDOM_SAMPLES):
        picks.add(rng.randrange(count))

    return sorted(picks)[:MAX_SAMPLES]
