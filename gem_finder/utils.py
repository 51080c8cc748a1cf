"""
Utility functions for text normalization and match logging.
"""
import json
import logging
import re
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

_WS_RE = re.compile(r"\s+")


def normalize_text(text) -> str:
    """Trim, collapse whitespace, lowercase. Non-strings -> ''."""
    if not isinstance(text, str):
        return ""
    return _WS_RE.sub(" ", text.strip().lower())


def cache_key_for_query(text) -> str:
    """Key used to cache typo corrections of a raw user query."""
    return f"query:{normalize_text(text)}"


def log_fuzzy_match(original_word: str, matched_word: str, similarity: float, product_title: str) -> dict:
    """
    Log a similarity-layer hit as a structured record for later tuning
    of the fuzzy threshold. Returns the record.
    """
    entry = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "originalWord": original_word,
        "matchedWord": matched_word,
        "similarity": f"{similarity:.3f}",
        "productTitle": product_title,
        "type": "fuzzy_match",
    }
    logger.info("FUZZY MATCH LOG: %s", json.dumps(entry, ensure_ascii=False))
    return entry
