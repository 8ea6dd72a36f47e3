"""Semantic search endpoint over the vector index."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from src.api.models import SearchMatchResponse, SearchRequest, SearchResponse
from src.errors import ExternalServiceError
from src.retrieval.orchestrator import get_engine

router = APIRouter()


@router.post("/api/search", response_model=SearchResponse)
def semantic_search(request: SearchRequest) -> SearchResponse:
    """Return the top vector-index matches for a query, best first."""
    semantic = get_engine().semantic
    if semantic is None:
        raise HTTPException(
            status_code=501,
            detail="Semantic search is not configured: set OPENAI_API_KEY, SUPABASE_URL and SUPABASE_KEY.",
        )
    try:
        matches = semantic.search(request.query, request.match_count)
    except ExternalServiceError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return SearchResponse(
        results=[SearchMatchResponse(text=m.text, score=m.score, metadata=m.metadata) for m in matches]
    )
