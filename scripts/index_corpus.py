"""Index the knowledge-base corpus into the Supabase vector store."""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.config import settings
from src.corpus.accessor import FileSystemCorpus
from src.ingestion.pipeline import index_corpus


def main(corpus_dir: str) -> int:
    corpus = FileSystemCorpus(corpus_dir)
    documents = corpus.list_documents()
    if not documents:
        print(f"No documents found in {corpus_dir}.")
        return 1

    print(f"Indexing {len(documents)} documents from {corpus_dir}...")
    report = index_corpus(corpus)

    for name in report.indexed:
        print(f"  OK    {name}")
    for error in report.errors:
        print(f"  ERROR {error}")

    print(f"\nDone! Indexed {len(report.indexed)} documents ({report.chunks} chunks), "
          f"{len(report.errors)} errors.")
    return 0 if not report.errors else 2


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    parser = argparse.ArgumentParser()
    parser.add_argument("--dir", default=settings.corpus_dir)
    args = parser.parse_args()
    sys.exit(main(args.dir))
