"""Pipeline configuration: cascade strategy enum and PipelineConfig dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from src.config import Settings, settings


class SourceStrategy(str, Enum):
    """Cascade states, in fixed fallback priority."""

    COUNT = "count"
    DOCUMENT_ANALYSIS = "document-analysis"
    FILE_METADATA = "file-metadata"
    AUTHOR_QUOTES = "author-quotes"
    KEYWORD_SEARCH = "keyword-search"
    SEMANTIC_SEARCH = "semantic-search"
    FULL_CORPUS = "full-corpus"
    NO_CONTEXT = "no-context"


@dataclass(frozen=True)
class PipelineConfig:
    """Immutable configuration for one retrieval engine.

    Defaults mirror the values in :mod:`src.config`; use
    :meth:`from_settings` to pick up environment overrides.
    """

    max_context_chars: int = 12000
    semantic_match_count: int = 5
    semantic_timeout_seconds: float = 10.0
    sample_seed: int = 0
    count_example_lines: int = 5
    keyword_chunk_limit: int = 15
    loose_keyword_chunk_limit: int = 10
    preview_chars: int = 500

    @classmethod
    def from_settings(cls, source: Settings = settings) -> PipelineConfig:
        return cls(
            max_context_chars=source.max_context_chars,
            semantic_match_count=source.semantic_match_count,
            semantic_timeout_seconds=source.semantic_timeout_seconds,
            sample_seed=source.sample_seed,
        )
