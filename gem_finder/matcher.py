"""
Layered fuzzy matcher: decides whether a product matches a set of search
tokens and which tokens caused it.

Layers, tried in order for each token (first success wins):
1. exact substring of the haystack
2. substring overlap: a contiguous window of the token appears in the haystack
3. similarity: edit-distance similarity against a haystack word
"""
import logging
import math
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from .models import MatchResult, Product
from .similarity import similarity
from .utils import log_fuzzy_match

logger = logging.getLogger(__name__)

EXACT = "exact"
OVERLAP = "overlap"
SIMILARITY = "similarity"


@dataclass(frozen=True)
class MatchThresholds:
    """Tunable gates for the overlap and similarity layers."""
    overlap_min_token_length: int = 5      # token length must exceed this
    overlap_min_window: int = 5
    overlap_window_ratio: float = 0.7
    similarity_min_token_length: int = 4   # token length must exceed this
    similarity_min_word_length: int = 3    # haystack word length must exceed this
    similarity_threshold: float = 0.6

    def window_length(self, token_length: int) -> int:
        return max(self.overlap_min_window, math.floor(self.overlap_window_ratio * token_length))

    def with_threshold(self, threshold: float) -> "MatchThresholds":
        return replace(self, similarity_threshold=threshold)


# Decides whether a product is included.
DECISION_THRESHOLDS = MatchThresholds()

# Reports which tokens matched; deliberately looser than the decision gates.
DIAGNOSTIC_THRESHOLDS = MatchThresholds(
    overlap_min_token_length=3,
    overlap_min_window=3,
    overlap_window_ratio=0.6,
    similarity_min_token_length=3,
)


@dataclass(frozen=True)
class MatchDetail:
    layer: str
    fragment: str   # the haystack fragment that satisfied the layer
    score: float = 1.0


def token_matches(
    token: str,
    haystack: str,
    thresholds: MatchThresholds = DECISION_THRESHOLDS,
    words: Optional[Sequence[str]] = None,
) -> Optional[MatchDetail]:
    """Apply the layers to one token. Returns the first layer that fired, or None."""
    if token in haystack:
        return MatchDetail(EXACT, token)

    size = len(token)
    if size > thresholds.overlap_min_token_length:
        window = thresholds.window_length(size)
        for start in range(size - window + 1):
            piece = token[start:start + window]
            if piece in haystack:
                return MatchDetail(OVERLAP, piece)

    if size > thresholds.similarity_min_token_length:
        if words is None:
            words = haystack.split()
        for word in words:
            if len(word) <= thresholds.similarity_min_word_length:
                continue
            score = similarity(token, word)
            if score >= thresholds.similarity_threshold:
                return MatchDetail(SIMILARITY, word, score)

    return None


def match_product(
    product: Product,
    tokens: Sequence[str],
    thresholds: MatchThresholds = DECISION_THRESHOLDS,
    diagnostics: MatchThresholds = DIAGNOSTIC_THRESHOLDS,
) -> MatchResult:
    """
    A product matches when any token satisfies any layer under `thresholds`.
    `matched_tokens` lists every token satisfying `diagnostics` (or
    `thresholds`) and is only filled for matching products.
    """
    haystack = product.haystack
    words = haystack.split()

    decided = []
    for token in tokens:
        detail = token_matches(token, haystack, thresholds, words)
        decided.append(detail is not None)
        if detail is None:
            continue
        if detail.layer == SIMILARITY:
            logger.debug(f'Fuzzy match: "{token}" ~ "{detail.fragment}" ({detail.score:.2f}) in "{product.title}"')
            log_fuzzy_match(token, detail.fragment, detail.score, product.title)
        elif detail.layer == OVERLAP:
            logger.debug(f'Substring match: "{token}" -> "{detail.fragment}" in "{product.title}"')

    if not any(decided):
        return MatchResult(product=product, is_match=False)

    matched = tuple(
        token for token, hit in zip(tokens, decided)
        if hit or token_matches(token, haystack, diagnostics, words) is not None
    )
    logger.debug(f'Product "{product.title}" matches search word(s): {", ".join(matched)}')
    return MatchResult(product=product, is_match=True, matched_tokens=matched)
