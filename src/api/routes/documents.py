"""Document endpoints: listing, analysis, and term counts."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query

from src.api.models import (
    AnalysisResponse,
    CountResponse,
    DocumentSummary,
    FileCountResponse,
    KeyPointResponse,
    SectionResponse,
    TermCountResponse,
    TimeBlockResponse,
    TopicResponse,
)
from src.corpus.accessor import load_corpus
from src.corpus.models import Section, TimeBlock
from src.errors import DocumentNotFoundError
from src.retrieval.orchestrator import get_engine

router = APIRouter()


@router.get("/api/documents", response_model=list[DocumentSummary])
def list_documents() -> list[DocumentSummary]:
    """List corpus documents in listing order, with their classified type."""
    corpus = get_engine().corpus
    snapshot = load_corpus(corpus)
    types = {d.id: d.type for d in snapshot.documents}
    return [
        DocumentSummary(
            name=info.name,
            type=types.get(info.name),
            size=info.size,
            modified_at=info.modified_at,
        )
        for info in corpus.list_documents()
    ]


@router.get("/api/documents/analysis", response_model=AnalysisResponse)
def analyze_document(
    document: Annotated[str | None, Query()] = None,
    episode: Annotated[int | None, Query(ge=0)] = None,
) -> AnalysisResponse:
    """Analyze one document selected by (partial) name or episode number."""
    if not document and episode is None:
        raise HTTPException(status_code=400, detail="Provide a document name or an episode number")
    try:
        analysis = get_engine().analyze_document(document, episode)
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail=f"No matching document: {exc}") from exc

    units = analysis.structural_units
    return AnalysisResponse(
        name=analysis.name,
        type=analysis.type,
        line_count=analysis.line_count,
        word_count=analysis.word_count,
        top_terms=[TermCountResponse(term=t.term, count=t.count) for t in analysis.top_terms],
        time_blocks=[
            TimeBlockResponse(timestamp=u.timestamp, lines=u.lines)
            for u in units
            if isinstance(u, TimeBlock)
        ],
        sections=[
            SectionResponse(title=u.title, level=u.level, content=u.content, parent=u.parent)
            for u in units
            if isinstance(u, Section)
        ],
        topics=[
            TopicResponse(title=t.title, timestamp=t.timestamp, summary=t.summary)
            for t in analysis.topics
        ],
        key_points=[KeyPointResponse(title=k.title, content=k.content) for k in analysis.key_points],
        authors=analysis.authors,
        quotes=analysis.quotes,
    )


@router.get("/api/count", response_model=CountResponse)
def count_term(
    term: Annotated[str, Query(min_length=1)],
    document: Annotated[str | None, Query()] = None,
    episode: Annotated[int | None, Query(ge=0)] = None,
) -> CountResponse:
    """Count case-insensitive occurrences of a term across the corpus."""
    result = get_engine().count_term(term, document, episode)
    return CountResponse(
        term=result.term,
        total_count=result.total_count,
        per_file=[
            FileCountResponse(file=fc.file, count=fc.count, examples=fc.examples)
            for fc in result.per_file
        ],
        document_filter=result.document_filter,
        episode_filter=result.episode_filter,
    )
