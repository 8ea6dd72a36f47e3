"""Supabase storage helpers for the chunk vector index."""

from __future__ import annotations

from typing import TYPE_CHECKING

from supabase import Client, create_client

from src.config import settings

if TYPE_CHECKING:
    from src.ingestion.models import Chunk

CHUNKS_TABLE = "chunks"


def get_supabase_client() -> Client:
    """Create and return a Supabase client from settings / environment."""
    return create_client(settings.supabase_url, settings.supabase_key)


def delete_document_chunks(client: Client, filename: str) -> None:
    """Remove every stored chunk of *filename*."""
    client.table(CHUNKS_TABLE).delete().eq("filename", filename).execute()


def store_chunks(
    client: Client,
    filename: str,
    chunks_with_embeddings: list[tuple[Chunk, list[float]]],
) -> None:
    """Store chunks with embeddings in Supabase (batched by 50)."""
    rows: list[dict[str, object]] = []
    for chunk, embedding in chunks_with_embeddings:
        rows.append(
            {
                "filename": filename,
                "content": chunk.content,
                "chunk_index": chunk.chunk_index,
                "embedding": embedding,
            }
        )

    # Insert in batches of 50
    batch_size = 50
    for i in range(0, len(rows), batch_size):
        client.table(CHUNKS_TABLE).insert(rows[i : i + batch_size]).execute()
