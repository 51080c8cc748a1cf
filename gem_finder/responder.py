"""
Entry point combining normalize -> fetch -> filter -> format.

Usage from any front-end:
    from gem_finder.responder import build_response_text

    reply = build_response_text("8mm amethist beads")
"""
import logging
from functools import partial
from typing import Optional

from .cache import get_cache
from .catalog import CatalogSource, build_catalog_source
from .formatter import format_product_response
from .matcher import DECISION_THRESHOLDS, DIAGNOSTIC_THRESHOLDS, match_product
from .query import QueryNormalizer, build_normalizer
from .ranking import filter_with_matches
from .settings import Settings, settings

logger = logging.getLogger(__name__)


class Responder:
    """Holds the collaborators of one reply pipeline."""

    def __init__(
        self,
        normalizer: QueryNormalizer,
        catalog: CatalogSource,
        fuzzy_threshold: Optional[float] = None,
    ):
        self.normalizer = normalizer
        self.catalog = catalog
        self.matcher = match_product
        if fuzzy_threshold is not None:
            self.matcher = partial(
                match_product,
                thresholds=DECISION_THRESHOLDS.with_threshold(fuzzy_threshold),
                diagnostics=DIAGNOSTIC_THRESHOLDS.with_threshold(fuzzy_threshold),
            )

    def build_response_text(self, raw_text: str) -> str:
        """
        Reply text for one user message. CatalogError from the catalog
        source propagates to the caller.
        """
        tokens = self.normalizer.normalize(raw_text)
        products = self.catalog.fetch_catalog()

        results = filter_with_matches(products, tokens, self.matcher)
        for result in results[:5]:
            if result.matched_tokens:
                logger.info(f'Product "{result.product.title}" matches: {", ".join(result.matched_tokens)}')

        return format_product_response([r.product for r in results], tokens)


def create_responder(cfg: Settings = settings) -> Responder:
    """Responder wired from environment settings, sharing the global cache."""
    cache = get_cache()
    return Responder(
        normalizer=build_normalizer(cfg, cache),
        catalog=build_catalog_source(cfg, cache),
        fuzzy_threshold=cfg.FUZZY_THRESHOLD,
    )


# === Global Responder Instance ===
_responder: Optional[Responder] = None


def get_responder() -> Responder:
    global _responder
    if _responder is None:
        _responder = create_responder()
    return _responder


def set_responder(responder: Optional[Responder]) -> None:
    """Replace the global responder (None resets it)."""
    global _responder
    _responder = responder


def build_response_text(raw_text: str, responder: Optional[Responder] = None) -> str:
    return (responder or get_responder()).build_response_text(raw_text)
