"""Paragraph splitting and packing for keyword search and vector indexing."""

from __future__ import annotations

import re

from src.ingestion.models import Chunk

PARAGRAPH_BREAK_RE = re.compile(r"\n\s*\n")


def split_paragraphs(text: str) -> list[str]:
    """Split on blank lines; paragraphs are stripped and empty ones dropped."""
    return [p.strip() for p in PARAGRAPH_BREAK_RE.split(text) if p.strip()]


def chunk_text(text: str, chunk_size: int = 800) -> list[str]:
    """Greedily pack paragraphs into chunks of at most *chunk_size* characters.

    Paragraphs are never split, so a single paragraph longer than
    *chunk_size* becomes its own oversized chunk.
    """
    chunks: list[str] = []
    current = ""
    for paragraph in split_paragraphs(text):
        candidate = f"{current}\n\n{paragraph}" if current else paragraph
        if len(candidate) > chunk_size and current:
            chunks.append(current)
            current = paragraph
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks


def chunk_document(filename: str, text: str, chunk_size: int = 800) -> list[Chunk]:
    """Chunk a corpus document for embedding.

    Returns:
        List of :class:`Chunk` instances tagged with *filename*.
    """
    return [
        Chunk(content=content, filename=filename, chunk_index=idx)
        for idx, content in enumerate(chunk_text(text, chunk_size))
    ]
