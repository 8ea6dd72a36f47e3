"""Resolve a query against the local corpus and print the context block."""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.retrieval.orchestrator import build_engine

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    parser = argparse.ArgumentParser()
    parser.add_argument("query")
    args = parser.parse_args()

    result = build_engine().resolve_context(args.query)
    print(f"# strategy={result.source_strategy.value} intent={result.intent.value} "
          f"truncated={result.truncated}")
    if result.skipped:
        print(f"# skipped: {', '.join(result.skipped)}")
    print(result.context_text or "(no context available)")
