"""Context endpoint: resolve a query into a bounded context block."""

from __future__ import annotations

from fastapi import APIRouter

from src.api.models import ContextRequest, ContextResponse
from src.retrieval.orchestrator import get_engine

router = APIRouter()


@router.post("/api/context", response_model=ContextResponse)
def resolve_context(request: ContextRequest) -> ContextResponse:
    """Run the retrieval cascade for a query.

    Always 200: an empty corpus is reported through ``has_context``.
    """
    result = get_engine().resolve_context(request.query)
    return ContextResponse(
        context_text=result.context_text,
        source_strategy=result.source_strategy,
        truncated=result.truncated,
        has_context=result.has_context,
        intent=result.intent,
        skipped=result.skipped,
    )
