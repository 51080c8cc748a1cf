#!/usr/bin/env python3
"""
Smoke test script for the product search pipeline.
Runs sample queries against the JSON sample catalog and prints the replies.

Usage:
    python scripts/smoke_test.py
    CATALOG_PATH=other.json python scripts/smoke_test.py "8mm amethist beads"
"""
import logging
import os
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from gem_finder.cache import InMemoryCache
from gem_finder.catalog import CachedCatalog, JsonCatalogSource
from gem_finder.query import QueryNormalizer
from gem_finder.responder import Responder

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

DEFAULT_QUERIES = [
    "ruby",
    "8mm amethist beads",
    "labradoright",
    "saphire necklace",
    "hi",
    "turquoise",
]


def print_separator():
    print("\n" + "=" * 80 + "\n")


def main():
    """Run smoke queries."""
    root = Path(__file__).parent.parent
    path = os.getenv("CATALOG_PATH", str(root / "data" / "sample_catalog.json"))

    # no correction: the smoke run must work offline
    responder = Responder(
        normalizer=QueryNormalizer(),
        catalog=CachedCatalog(JsonCatalogSource(path), InMemoryCache(), ttl=300),
    )

    logger.info(f"Using catalog file: {path}")
    queries = sys.argv[1:] or DEFAULT_QUERIES
    for query in queries:
        print_separator()
        print(f"🔍 Query: {query}\n")
        print(responder.build_response_text(query))
    print_separator()


if __name__ == "__main__":
    main()
