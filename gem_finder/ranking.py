"""
Filter/rank engine: applies the matcher across a catalog snapshot.

Ordering is the catalog's own (first match wins); there is no relevance
re-sort. Capping to DISPLAY_LIMIT happens in the formatter, except for
the empty-query fallback.
"""
import logging
from typing import Any, Callable, Sequence

from .matcher import match_product
from .models import MatchResult, Product, coerce_products

logger = logging.getLogger(__name__)

DISPLAY_LIMIT = 20
MIN_TOKEN_LENGTH = 3

Matcher = Callable[[Product, Sequence[str]], MatchResult]


def clean_tokens(tokens: Any) -> list[str]:
    """Drop non-strings and tokens of 2 chars or fewer."""
    if not isinstance(tokens, (list, tuple)):
        return []
    return [t for t in tokens if isinstance(t, str) and len(t) >= MIN_TOKEN_LENGTH]


def filter_with_matches(products: Any, tokens: Any, matcher: Matcher = match_product) -> list[MatchResult]:
    """Like filter_and_rank, but keeps the matched tokens of each product."""
    if not isinstance(products, (list, tuple)):
        logger.warning(f"Catalog is not a sequence ({type(products).__name__}), returning no products")
        return []

    # dict rows are validated here; rows that are not products are dropped
    snapshot = tuple(coerce_products(products))
    words = clean_tokens(tokens)
    if not words:
        logger.info(f"No search words, returning first {DISPLAY_LIMIT} products")
        return [MatchResult(product=p, is_match=True) for p in snapshot[:DISPLAY_LIMIT]]

    logger.info(f"Filtering products with fuzzy matching for words: {words}")
    results = []
    for product in snapshot:
        result = matcher(product, words)
        if result.is_match:
            results.append(result)

    logger.info(f"Fuzzy filtering: {len(snapshot)} -> {len(results)} products")
    return results


def filter_and_rank(products: Any, tokens: Any, matcher: Matcher = match_product) -> list[Product]:
    """Stable filter of `products` by `tokens`; empty tokens -> first DISPLAY_LIMIT products."""
    return [result.product for result in filter_with_matches(products, tokens, matcher)]
