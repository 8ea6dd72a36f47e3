"""Cascade states of the retrieval orchestrator.

Each state takes the request context and returns context text, or an empty
string when it has nothing to contribute. States may raise
:class:`DocumentNotFoundError` or :class:`ExternalServiceError`; the
orchestrator treats both as an empty result.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass

from src.analysis.analyzer import AnalysisCache
from src.analysis.topics import sample_block_indices
from src.corpus.accessor import CorpusSnapshot
from src.corpus.models import Document, DocumentInfo, DocumentType
from src.errors import DocumentNotFoundError
from src.pipeline_config import PipelineConfig, SourceStrategy
from src.retrieval.counting import count_in_documents, count_occurrences, episode_pattern, select_documents
from src.retrieval.intent import (
    QUERY_STOPWORDS,
    CountIntent,
    DocumentReferenceIntent,
    KeywordSearchIntent,
    QueryIntent,
    TopicAnalysisIntent,
    derive_search_terms,
    extract_episode,
)
from src.retrieval.keyword import keyword_search
from src.retrieval.rendering import (
    render_corpus_dump,
    render_count,
    render_file_metadata,
    render_keyword_hits,
    render_markdown_analysis,
    render_plain_analysis,
    render_semantic_matches,
    render_transcript_analysis,
)
from src.retrieval.search import SemanticSearchAdapter

logger = logging.getLogger(__name__)

MARKDOWN_HINT_RE = re.compile(r"\b(?:gtm|authors?|quotes?)\b", re.IGNORECASE)
TRANSCRIPT_HINT_RE = re.compile(r"\b(?:transcripts?|episodes?)\b", re.IGNORECASE)
FILE_VOCABULARY_RE = re.compile(r"\b(?:files?|uploads?|uploaded|transcripts?|index(?:ed)?)\b", re.IGNORECASE)
AUTHOR_QUOTE_RE = re.compile(r"\b(?:authors?|quotes?)\b", re.IGNORECASE)

AUTHOR_QUOTES_HEADING_RE = re.compile(
    r"^#{1,6}\s+Relevant\s+Author\s+Quotes\b.*$", re.IGNORECASE | re.MULTILINE
)
HORIZONTAL_RULE_RE = re.compile(r"^\s*---+\s*$", re.MULTILINE)

NAME_TOKEN_RE = re.compile(r"[\w\-.]{3,}")
FILE_VOCABULARY_WORDS = frozenset(
    {"file", "files", "upload", "uploads", "uploaded", "transcript", "transcripts", "index", "indexed"}
)

MAX_METADATA_FILES = 3
MAX_ENRICHMENT_TERMS = 5
MIN_DUMP_CHARS_PER_DOCUMENT = 500


@dataclass(frozen=True)
class RequestContext:
    """Everything one retrieval request needs; never shared across requests."""

    query: str
    intent: QueryIntent
    snapshot: CorpusSnapshot
    listing: list[DocumentInfo]
    config: PipelineConfig
    analyses: AnalysisCache
    semantic: SemanticSearchAdapter | None = None

    def document(self, name: str) -> Document:
        for document in self.snapshot.documents:
            if document.id == name:
                return document
        raise DocumentNotFoundError(name)

    def info(self, name: str) -> DocumentInfo:
        for info in self.listing:
            if info.name == name:
                return info
        raise DocumentNotFoundError(name)


def match_document_name(
    names: list[str],
    document_name: str | None = None,
    episode_number: str | None = None,
) -> str | None:
    """Resolve an explicit reference to one corpus file name.

    Exact (case-insensitive) name match first, then partial match, then the
    ``E<padded>`` episode token. Returns None when nothing matches.
    """
    if document_name:
        wanted = document_name.lower()
        for name in names:
            if name.lower() == wanted:
                return name
        for name in names:
            if wanted in name.lower():
                return name
    if episode_number:
        pattern = episode_pattern(episode_number)
        for name in names:
            if pattern.search(name):
                return name
    return None


def _first_of_type(documents: list[Document], doc_type: DocumentType) -> Document | None:
    return next((d for d in documents if d.type is doc_type), None)


def resolve_target_document(ctx: RequestContext, name: str | None, episode: str | None) -> Document:
    """Pick the single document a document/topic query is about.

    An explicit name or episode must resolve, otherwise NotFound is raised.
    Without one, the query wording picks a preferred type, falling back to
    the first document in listing order.
    """
    documents = ctx.snapshot.documents
    if name or episode:
        match = match_document_name(ctx.snapshot.names(), name, episode)
        if match is None:
            raise DocumentNotFoundError(name or f"episode {episode}")
        return ctx.document(match)

    preferred: Document | None = None
    if MARKDOWN_HINT_RE.search(ctx.query):
        preferred = _first_of_type(documents, DocumentType.MARKDOWN)
    elif TRANSCRIPT_HINT_RE.search(ctx.query):
        preferred = _first_of_type(documents, DocumentType.TRANSCRIPT)
    if preferred is not None:
        return preferred
    if not documents:
        raise DocumentNotFoundError("empty corpus")
    return documents[0]


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------


def count_state(ctx: RequestContext) -> str:
    intent = ctx.intent
    if not isinstance(intent, CountIntent):
        return ""
    names = select_documents(ctx.snapshot.names(), intent.document_filter, intent.episode_filter)
    candidates = [d for d in ctx.snapshot.documents if d.id in names]
    result = count_in_documents(
        candidates,
        intent.term,
        example_limit=ctx.config.count_example_lines,
        document_filter=intent.document_filter,
        episode_filter=intent.episode_filter,
    )
    return render_count(result)


def document_analysis_state(ctx: RequestContext) -> str:
    intent = ctx.intent
    if not isinstance(intent, DocumentReferenceIntent | TopicAnalysisIntent):
        return ""

    document = resolve_target_document(ctx, intent.document_name, intent.episode_number)
    analysis = ctx.analyses.get(document)

    if document.type is DocumentType.TRANSCRIPT:
        sample = sample_block_indices(len(analysis.structural_units), ctx.config.sample_seed)
        return render_transcript_analysis(analysis, sample)
    if document.type is DocumentType.MARKDOWN:
        return render_markdown_analysis(analysis)
    return render_plain_analysis(analysis, document.raw_text)


def file_metadata_state(ctx: RequestContext) -> str:
    if not FILE_VOCABULARY_RE.search(ctx.query):
        return ""

    tokens = [
        token.lower().strip(".-")
        for token in NAME_TOKEN_RE.findall(ctx.query)
        if token.lower() not in FILE_VOCABULARY_WORDS and token.lower() not in QUERY_STOPWORDS
    ]
    tokens = [t for t in tokens if len(t) >= 3]
    episode = extract_episode(ctx.query)
    episode_re = episode_pattern(episode) if episode else None

    matched = [
        name
        for name in ctx.snapshot.names()
        if any(t in name.lower() for t in tokens) or (episode_re and episode_re.search(name))
    ][:MAX_METADATA_FILES]
    if not matched:
        return ""

    terms = [
        t
        for t in derive_search_terms(ctx.query)
        if " " not in t and t not in FILE_VOCABULARY_WORDS
    ]
    parts: list[str] = []
    for name in matched:
        document = ctx.document(name)
        name_lower = name.lower()
        enrich = [t for t in terms if t not in name_lower][:MAX_ENRICHMENT_TERMS]
        parts.append(
            render_file_metadata(
                ctx.info(name),
                document,
                ctx.analyses.get(document),
                ctx.config.preview_chars,
                {t: count_occurrences(document.raw_text, t) for t in enrich},
            )
        )
    return "\n\n".join(parts)


def extract_author_quotes(text: str) -> str:
    """Return the body of the "Relevant Author Quotes" section, if present.

    The body runs from the line after the heading to the next ``---`` rule,
    or to the end of the text when no rule follows.
    """
    heading = AUTHOR_QUOTES_HEADING_RE.search(text)
    if heading is None:
        return ""
    rule = HORIZONTAL_RULE_RE.search(text, heading.end())
    end = rule.start() if rule else len(text)
    return text[heading.end() : end].strip()


def author_quotes_state(ctx: RequestContext) -> str:
    if not AUTHOR_QUOTE_RE.search(ctx.query):
        return ""
    documents = sorted(
        ctx.snapshot.documents,
        key=lambda d: d.type is not DocumentType.MARKDOWN,
    )
    for document in documents:
        section = extract_author_quotes(document.raw_text)
        if section:
            return section
    return ""


def keyword_search_state(ctx: RequestContext) -> str:
    terms = list(ctx.intent.terms) if isinstance(ctx.intent, KeywordSearchIntent) else None
    result = keyword_search(
        ctx.snapshot.documents,
        ctx.query,
        limit=ctx.config.keyword_chunk_limit,
        loose_limit=ctx.config.loose_keyword_chunk_limit,
        terms=terms,
    )
    if not result.hits:
        return ""
    logger.debug("Keyword search matched %d units at %s level", len(result.hits), result.level)
    return render_keyword_hits(result)


def semantic_search_state(ctx: RequestContext) -> str:
    if ctx.semantic is None:
        return ""
    matches = ctx.semantic.search(ctx.query, ctx.config.semantic_match_count)
    return render_semantic_matches([m for m in matches if m.score >= 0])


def full_corpus_state(ctx: RequestContext) -> str:
    documents = ctx.snapshot.documents
    if not documents:
        return ""
    share = max(ctx.config.max_context_chars // len(documents), MIN_DUMP_CHARS_PER_DOCUMENT)
    return render_corpus_dump(documents, per_document_chars=share)


Strategy = Callable[[RequestContext], str]

CASCADE: list[tuple[SourceStrategy, Strategy]] = [
    (SourceStrategy.COUNT, count_state),
    (SourceStrategy.DOCUMENT_ANALYSIS, document_analysis_state),
    (SourceStrategy.FILE_METADATA, file_metadata_state),
    (SourceStrategy.AUTHOR_QUOTES, author_quotes_state),
    (SourceStrategy.KEYWORD_SEARCH, keyword_search_state),
    (SourceStrategy.SEMANTIC_SEARCH, semantic_search_state),
    (SourceStrategy.FULL_CORPUS, full_corpus_state),
]
