"""Embedding helpers using OpenAI text-embedding-3-small."""

from __future__ import annotations

from openai import OpenAI

from src.config import settings
from src.ingestion.models import Chunk


def embed_texts(texts: list[str], model: str | None = None) -> list[list[float]]:
    """Embed a list of texts using the OpenAI embeddings API.

    Args:
        texts: Strings to embed.
        model: OpenAI embedding model name; defaults to ``settings.embedding_model``.

    Returns:
        A list of embedding vectors (one per input text).
    """
    if not texts:
        return []
    client = OpenAI(api_key=settings.openai_api_key or None)
    response = client.embeddings.create(
        input=texts,
        model=model or settings.embedding_model,
        dimensions=settings.embedding_dimensions,
    )
    return [item.embedding for item in response.data]


def embed_chunks(chunks: list[Chunk]) -> list[tuple[Chunk, list[float]]]:
    """Embed chunks and return ``(chunk, embedding)`` pairs.

    Args:
        chunks: Chunks whose ``content`` will be embedded.

    Returns:
        List of ``(Chunk, embedding_vector)`` tuples.
    """
    texts = [c.content for c in chunks]
    embeddings = embed_texts(texts)
    return list(zip(chunks, embeddings, strict=True))
