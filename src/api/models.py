"""Pydantic request/response schemas for the Context Retrieval API."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from src.corpus.models import DocumentType
from src.pipeline_config import SourceStrategy
from src.retrieval.intent import IntentKind


class ContextRequest(BaseModel):
    """Request body for the /api/context endpoint."""

    query: str


class ContextResponse(BaseModel):
    """Response body for the /api/context endpoint."""

    context_text: str
    source_strategy: SourceStrategy
    truncated: bool
    has_context: bool
    intent: IntentKind
    skipped: list[str] = []


class FileCountResponse(BaseModel):
    file: str
    count: int
    examples: list[str] = []


class CountResponse(BaseModel):
    """Response body for the /api/count endpoint."""

    term: str
    total_count: int
    per_file: list[FileCountResponse]
    document_filter: str | None = None
    episode_filter: str | None = None


class DocumentSummary(BaseModel):
    """Listing entry for the /api/documents endpoint."""

    name: str
    type: DocumentType | None = None
    size: int
    modified_at: datetime


class TermCountResponse(BaseModel):
    term: str
    count: int


class TimeBlockResponse(BaseModel):
    timestamp: str
    lines: list[str]


class SectionResponse(BaseModel):
    title: str
    level: int
    content: list[str]
    parent: int | None = None


class TopicResponse(BaseModel):
    title: str
    timestamp: str
    summary: str


class KeyPointResponse(BaseModel):
    title: str
    content: str


class AnalysisResponse(BaseModel):
    """Response body for the /api/documents/analysis endpoint."""

    name: str
    type: DocumentType
    line_count: int
    word_count: int
    top_terms: list[TermCountResponse]
    time_blocks: list[TimeBlockResponse] = []
    sections: list[SectionResponse] = []
    topics: list[TopicResponse] = []
    key_points: list[KeyPointResponse] = []
    authors: list[str] = []
    quotes: list[str] = []


class SearchRequest(BaseModel):
    """Request body for the /api/search endpoint."""

    query: str = Field(min_length=1)
    match_count: int = Field(default=5, ge=1, le=50)


class SearchMatchResponse(BaseModel):
    text: str
    score: float
    metadata: dict[str, Any] = {}


class SearchResponse(BaseModel):
    """Response body for the /api/search endpoint."""

    results: list[SearchMatchResponse]
