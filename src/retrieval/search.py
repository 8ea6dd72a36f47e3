"""Semantic search: embedding service, vector index, and the timeout-bounded adapter."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from typing import Any, Protocol, cast

from openai import OpenAI
from supabase import Client

from src.config import settings
from src.errors import ExternalServiceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VectorMatch:
    """One ranked hit from the vector index."""

    text: str
    score: float
    metadata: dict[str, Any] = field(default_factory=dict)


class EmbeddingService(Protocol):
    def embed(self, text: str) -> list[float]: ...


class VectorIndex(Protocol):
    def search(self, vector: list[float], k: int) -> list[VectorMatch]: ...


class OpenAIEmbeddingService:
    """Query embeddings via the OpenAI embeddings API.

    Created once per process and passed to whatever needs it.
    """

    def __init__(
        self,
        client: OpenAI | None = None,
        model: str | None = None,
        dimensions: int | None = None,
    ) -> None:
        self._client = client
        self.model = model or settings.embedding_model
        self.dimensions = dimensions or settings.embedding_dimensions

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(api_key=settings.openai_api_key or None)
        return self._client

    def embed(self, text: str) -> list[float]:
        response = self.client.embeddings.create(
            input=[text],
            model=self.model,
            dimensions=self.dimensions,
        )
        return response.data[0].embedding


class SupabaseVectorIndex:
    """Vector similarity search using the ``match_chunks`` database function."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def search(self, vector: list[float], k: int) -> list[VectorMatch]:
        result = self.client.rpc(
            "match_chunks",
            {"query_embedding": vector, "match_count": k},
        ).execute()
        # Supabase .data is typed as JSON (broad union); cast to concrete type.
        rows = cast(list[dict[str, Any]], result.data or [])
        return [
            VectorMatch(
                text=row.get("content", ""),
                score=float(row.get("similarity", 0.0)),
                metadata={"filename": row.get("filename"), "chunk_index": row.get("chunk_index")},
            )
            for row in rows
        ]


class SemanticSearchAdapter:
    """Embed a query and search the vector index within a time budget."""

    def __init__(
        self,
        embedder: EmbeddingService,
        index: VectorIndex,
        timeout_seconds: float = 10.0,
    ) -> None:
        self.embedder = embedder
        self.index = index
        self.timeout_seconds = timeout_seconds

    def _search(self, query: str, k: int) -> list[VectorMatch]:
        vector = self.embedder.embed(query)
        return self.index.search(vector, k)

    def search(self, query: str, k: int) -> list[VectorMatch]:
        """Return the top *k* matches in the order the index ranked them.

        Raises:
            ExternalServiceError: The embedding or index call failed or did
                not finish within ``timeout_seconds``.
        """
        # The worker thread is abandoned on timeout, not joined.
        pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="semantic-search")
        future = pool.submit(self._search, query, k)
        try:
            return future.result(timeout=self.timeout_seconds)
        except FutureTimeoutError as exc:
            raise ExternalServiceError(
                f"semantic search timed out after {self.timeout_seconds:.1f}s"
            ) from exc
        except Exception as exc:
            raise ExternalServiceError(f"semantic search failed: {exc}") from exc
        finally:
            pool.shutdown(wait=False, cancel_futures=True)


def build_semantic_search(timeout_seconds: float | None = None) -> SemanticSearchAdapter | None:
    """Wire the OpenAI + Supabase adapter from settings.

    Returns None when credentials are not configured, which disables the
    semantic-search state of the cascade.
    """
    if not (settings.openai_api_key and settings.supabase_url and settings.supabase_key):
        return None

    from src.ingestion.storage import get_supabase_client

    return SemanticSearchAdapter(
        embedder=OpenAIEmbeddingService(),
        index=SupabaseVectorIndex(get_supabase_client()),
        timeout_seconds=timeout_seconds or settings.semantic_timeout_seconds,
    )
