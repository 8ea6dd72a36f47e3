"""Corpus access: list, read, and snapshot the documents on disk."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from src.corpus.classifier import classify_document
from src.corpus.models import Document, DocumentInfo
from src.errors import CorpusIOError

logger = logging.getLogger(__name__)

METADATA_SUFFIX = ".meta.json"


class Corpus(Protocol):
    """Read-only view of a document corpus."""

    def list_documents(self) -> list[DocumentInfo]: ...

    def read_document(self, name: str) -> str: ...


class FileSystemCorpus:
    """Corpus backed by a flat directory of text files.

    Sidecar metadata files (``*.meta.json``), dot-files and subdirectories
    are not documents. Listing order is by file name.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def list_documents(self) -> list[DocumentInfo]:
        if not self.root.is_dir():
            return []

        infos: list[DocumentInfo] = []
        for path in sorted(self.root.iterdir(), key=lambda p: p.name):
            if path.name.startswith(".") or path.name.endswith(METADATA_SUFFIX):
                continue
            try:
                if not path.is_file():
                    continue
                stat = path.stat()
            except OSError as exc:
                logger.warning("Cannot stat corpus file %s: %s", path.name, exc)
                continue
            infos.append(
                DocumentInfo(
                    name=path.name,
                    size=stat.st_size,
                    modified_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                )
            )
        return infos

    def read_document(self, name: str) -> str:
        """Read a document as UTF-8 text.

        Raises:
            CorpusIOError: The file is missing, unreadable, or not UTF-8.
        """
        path = self.root / name
        if path.parent != self.root:
            raise CorpusIOError(name, "not a top-level corpus file")
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise CorpusIOError(name, str(exc)) from exc


@dataclass(frozen=True)
class CorpusSnapshot:
    """Documents read for one request, plus the names that failed to read."""

    documents: list[Document] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.documents

    def names(self) -> list[str]:
        return [d.id for d in self.documents]


def load_document(corpus: Corpus, info: DocumentInfo) -> Document:
    """Read and classify a single listed document."""
    text = corpus.read_document(info.name)
    return Document(
        id=info.name,
        type=classify_document(info.name, text),
        size=info.size,
        modified_at=info.modified_at,
        raw_text=text,
    )


def load_corpus(corpus: Corpus, names: list[str] | None = None) -> CorpusSnapshot:
    """Read every listed document (or only *names*), skipping unreadable ones.

    Failures are logged and recorded in ``skipped``; they never abort the scan.
    """
    documents: list[Document] = []
    skipped: list[str] = []

    for info in corpus.list_documents():
        if names is not None and info.name not in names:
            continue
        try:
            documents.append(load_document(corpus, info))
        except CorpusIOError as exc:
            logger.warning("Skipping unreadable document %s: %s", exc.name, exc.reason)
            skipped.append(info.name)

    return CorpusSnapshot(documents=documents, skipped=skipped)
