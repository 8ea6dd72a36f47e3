"""Shared fixtures: small on-disk corpora for engine tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from src.corpus.accessor import FileSystemCorpus
from src.pipeline_config import PipelineConfig
from src.retrieval.orchestrator import ContextEngine

COCKTAIL_TRANSCRIPT = """[0:00:01]
Welcome back to another episode of the show.
Tonight we talk about the cocktail party, the cocktail menu and a cocktail for every guest.
[0:05:30]
The food was great and the music was loud.
We also tried a new beer from the local brewery.
[0:12:10]
Nobody expected the last cocktail of the night to be that strong.
Cocktail hour turned into cocktail night, then a cocktail morning.
[0:20:00]
Thanks for watching, see you next week.
"""

GTM_MARKDOWN = """# GTM Strategy

Our go-to-market plan for the next year.

## Phase 1: Launch

- Build the landing page
✅ Ship the beta to early adopters

## Relevant Author Quotes

**Casper ter Kuile**, The Power of Ritual: "Rituals turn ordinary moments into sacred ones."
**Will Storr**, The Science of Storytelling: "Story is the language of the brain."

---

## Action Items

Follow up with partners written by Jason Fried.
"""

AUTHOR_QUOTES_BODY = (
    '**Casper ter Kuile**, The Power of Ritual: "Rituals turn ordinary moments into sacred ones."\n'
    '**Will Storr**, The Science of Storytelling: "Story is the language of the brain."'
)

PLAIN_NOTES = """Meeting notes from the planning session.

Budget review happened on Monday. The budget is approved.

Hiring plan is on hold until next quarter.
"""


@pytest.fixture
def write_corpus(tmp_path: Path) -> Callable[[dict[str, str | bytes]], Path]:
    """Return a helper that writes ``{name: content}`` into a fresh corpus dir."""

    def _write(files: dict[str, str | bytes]) -> Path:
        root = tmp_path / "knowledge_base"
        root.mkdir(exist_ok=True)
        for name, content in files.items():
            path = root / name
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return root

    return _write


@pytest.fixture
def sample_corpus(write_corpus: Callable[[dict[str, str | bytes]], Path]) -> Path:
    return write_corpus(
        {
            "Diggnation E013_transcript.txt": COCKTAIL_TRANSCRIPT,
            "gtm_plan.md": GTM_MARKDOWN,
            "notes.txt": PLAIN_NOTES,
        }
    )


@pytest.fixture
def engine(sample_corpus: Path) -> ContextEngine:
    return ContextEngine(FileSystemCorpus(sample_corpus), config=PipelineConfig())
