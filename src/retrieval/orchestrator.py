"""Retrieval orchestrator: run the cascade and bound the resulting context."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache

from src.analysis.analyzer import AnalysisCache, DocumentAnalysis
from src.config import settings
from src.corpus.accessor import Corpus, FileSystemCorpus, load_corpus
from src.errors import DocumentNotFoundError, RetrievalError
from src.pipeline_config import PipelineConfig, SourceStrategy
from src.retrieval.counting import CountResult, count_in_documents, select_documents
from src.retrieval.intent import IntentKind, NoIntent, classify_intent, pad_episode
from src.retrieval.rendering import truncate_context
from src.retrieval.search import SemanticSearchAdapter, build_semantic_search
from src.retrieval.strategies import CASCADE, RequestContext, match_document_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetrievalResult:
    """Context block handed to the caller for prompt injection."""

    context_text: str
    source_strategy: SourceStrategy
    truncated: bool = False
    intent: IntentKind = IntentKind.NONE
    skipped: list[str] = field(default_factory=list)

    @property
    def has_context(self) -> bool:
        return self.source_strategy is not SourceStrategy.NO_CONTEXT and bool(self.context_text)


class ContextEngine:
    """Resolve free-text queries against a corpus.

    Each call reads a fresh corpus snapshot; the only state kept between
    calls is the analysis cache keyed by ``(filename, mtime)``.
    """

    def __init__(
        self,
        corpus: Corpus,
        semantic: SemanticSearchAdapter | None = None,
        config: PipelineConfig | None = None,
        analyses: AnalysisCache | None = None,
    ) -> None:
        self.corpus = corpus
        self.semantic = semantic
        self.config = config or PipelineConfig()
        self.analyses = analyses or AnalysisCache()

    def resolve_context(self, query: str) -> RetrievalResult:
        """Run the retrieval cascade for *query*.

        Never raises for corpus or query content: failing states fall
        through, and an empty corpus yields a ``NO_CONTEXT`` result.
        """
        intent = classify_intent(query)
        listing = self.corpus.list_documents()
        snapshot = load_corpus(self.corpus)

        if snapshot.is_empty:
            logger.info("No context available: corpus is empty")
            return RetrievalResult(
                context_text="",
                source_strategy=SourceStrategy.NO_CONTEXT,
                intent=intent.kind,
                skipped=snapshot.skipped,
            )

        ctx = RequestContext(
            query=query,
            intent=intent,
            snapshot=snapshot,
            listing=listing,
            config=self.config,
            analyses=self.analyses,
            semantic=self.semantic,
        )

        cascade = CASCADE
        if isinstance(intent, NoIntent):
            cascade = [(s, fn) for s, fn in CASCADE if s is SourceStrategy.FULL_CORPUS]

        for strategy, run in cascade:
            try:
                text = run(ctx)
            except RetrievalError as exc:
                logger.warning("%s produced no context: %s", strategy.value, exc)
                continue
            except Exception:
                logger.exception("%s failed; falling through", strategy.value)
                continue

            if text.strip():
                context_text, truncated = truncate_context(text, self.config.max_context_chars)
                if truncated:
                    logger.debug("Context truncated from %d characters", len(text))
                logger.info("Resolved %s query via %s", intent.kind.value, strategy.value)
                return RetrievalResult(
                    context_text=context_text,
                    source_strategy=strategy,
                    truncated=truncated,
                    intent=intent.kind,
                    skipped=snapshot.skipped,
                )

        return RetrievalResult(
            context_text="",
            source_strategy=SourceStrategy.NO_CONTEXT,
            intent=intent.kind,
            skipped=snapshot.skipped,
        )

    def count_term(
        self,
        term: str,
        document_filter: str | None = None,
        episode_filter: str | int | None = None,
    ) -> CountResult:
        """Count *term* across the corpus, optionally narrowed by document or episode."""
        episode = pad_episode(episode_filter) if episode_filter not in (None, "") else None
        names = select_documents(
            [info.name for info in self.corpus.list_documents()],
            document_filter,
            episode,
        )
        snapshot = load_corpus(self.corpus, names)
        return count_in_documents(
            snapshot.documents,
            term,
            example_limit=self.config.count_example_lines,
            document_filter=document_filter,
            episode_filter=episode,
        )

    def analyze_document(
        self,
        name: str | None = None,
        episode_number: str | int | None = None,
    ) -> DocumentAnalysis:
        """Analyze one document found by name (exact, then partial) or episode.

        Raises:
            DocumentNotFoundError: Nothing matches, or the match is unreadable.
        """
        episode = pad_episode(episode_number) if episode_number not in (None, "") else None
        names = [info.name for info in self.corpus.list_documents()]
        match = match_document_name(names, name, episode)
        if match is None:
            raise DocumentNotFoundError(name or f"episode {episode}")

        snapshot = load_corpus(self.corpus, [match])
        if snapshot.is_empty:
            raise DocumentNotFoundError(f"{match} could not be read")
        return self.analyses.get(snapshot.documents[0])

    def invalidate(self, name: str) -> None:
        """Drop cached analyses of *name* after it was changed or removed."""
        self.analyses.invalidate(name)


def build_engine() -> ContextEngine:
    """Create an engine over the configured corpus directory."""
    config = PipelineConfig.from_settings(settings)
    return ContextEngine(
        corpus=FileSystemCorpus(settings.corpus_dir),
        semantic=build_semantic_search(config.semantic_timeout_seconds),
        config=config,
    )


@lru_cache(maxsize=1)
def get_engine() -> ContextEngine:
    """Process-wide engine, created on first use."""
    return build_engine()
