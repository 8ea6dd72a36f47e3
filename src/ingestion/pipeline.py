"""Vector-index build: read -> chunk -> embed -> store, per corpus document."""

from __future__ import annotations

import logging

from supabase import Client

from src.config import settings
from src.corpus.accessor import Corpus
from src.errors import CorpusIOError
from src.ingestion.chunking import chunk_document
from src.ingestion.embeddings import embed_chunks
from src.ingestion.models import IndexReport
from src.ingestion.storage import delete_document_chunks, get_supabase_client, store_chunks

logger = logging.getLogger(__name__)


def index_document(
    client: Client,
    filename: str,
    text: str,
    chunk_size: int | None = None,
) -> int:
    """Replace the stored chunks of one document.

    Returns:
        Number of chunks stored.
    """
    chunks = chunk_document(filename, text, chunk_size or settings.index_chunk_size)
    chunks_with_embeddings = embed_chunks(chunks)
    delete_document_chunks(client, filename)
    store_chunks(client, filename, chunks_with_embeddings)
    return len(chunks)


def index_corpus(corpus: Corpus, client: Client | None = None) -> IndexReport:
    """Index every corpus document into the vector store.

    Unreadable documents and per-document embedding/storage failures are
    logged and reported, never abort the run.
    """
    client = client or get_supabase_client()
    report = IndexReport()

    for info in corpus.list_documents():
        try:
            text = corpus.read_document(info.name)
        except CorpusIOError as exc:
            logger.warning("Skipping unreadable document %s: %s", exc.name, exc.reason)
            report.errors.append(f"{info.name}: {exc.reason}")
            continue

        try:
            stored = index_document(client, info.name, text)
        except Exception as exc:
            logger.exception("Indexing failed for %s", info.name)
            report.errors.append(f"{info.name}: {exc}")
            continue

        logger.info("Indexed %s with %d chunks", info.name, stored)
        report.indexed.append(info.name)
        report.chunks += stored

    return report
