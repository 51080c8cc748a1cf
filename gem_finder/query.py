"""
Query normalization: optional LLM typo correction, then tokenization.

The matcher relies on tokens being lowercase and longer than 2 chars;
tokenize() is the only place that guarantees it.
"""
import logging
from typing import Any, Optional

from openai import OpenAI, OpenAIError

from .cache import InMemoryCache, RedisCache
from .errors import QueryCorrectionError
from .settings import Settings
from .utils import cache_key_for_query

logger = logging.getLogger(__name__)

MIN_TOKEN_LENGTH = 3
NOT_RELATED = "not gemstone related"

CORRECTION_PROMPT = """You are a gemstone expert. Analyze this user query about gemstone beads and jewelry.

User query: "{text}"

Your task:
1. Identify if this is gemstone/jewelry related
2. If YES: Correct any typos in gemstone names, sizes, or jewelry terms
3. If NO: Return "not gemstone related"
4. Return ONLY the corrected keywords, no explanations or extra text

Examples:
- "amethist" → "amethyst"
- "labradoright" → "labradorite"
- "8mm amethist beads" → "8mm amethyst beads"
- "hello how are you" → "not gemstone related"

Return ONLY the corrected text or "not gemstone related"."""


def tokenize(text: Any) -> list[str]:
    """Lowercase, split on whitespace, keep tokens longer than 2 chars."""
    if not isinstance(text, str):
        return []
    return [word for word in text.lower().split() if len(word) >= MIN_TOKEN_LENGTH]


class QueryCorrector:
    """Fixes typos in gemstone names with a chat-completion call; results are cached per query."""

    def __init__(
        self,
        client: Optional[OpenAI] = None,
        api_key: Optional[str] = None,
        model: str = "gpt-4o-mini",
        cache: Optional[InMemoryCache | RedisCache] = None,
        ttl: float = 24 * 3600,
    ):
        self._client = client
        self._api_key = api_key
        self.model = model
        self.cache = cache
        self.ttl = ttl

    @property
    def enabled(self) -> bool:
        return self._client is not None or bool(self._api_key)

    def _get_client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(api_key=self._api_key)
        return self._client

    def _ask(self, text: str) -> str:
        try:
            resp = self._get_client().chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": CORRECTION_PROMPT.format(text=text)}],
                max_tokens=50,
                temperature=0.1,
            )
        except OpenAIError as e:
            raise QueryCorrectionError(f"Correction request failed: {e}") from e

        try:
            content = resp.choices[0].message.content
        except (AttributeError, IndexError) as e:
            raise QueryCorrectionError("Unexpected correction response structure") from e
        if not content or not content.strip():
            raise QueryCorrectionError("Empty correction response")
        return content.strip()

    def correct(self, text: str) -> str:
        """Corrected text, or `text` itself when the query is not gemstone related."""
        if not self.enabled:
            return text

        key = cache_key_for_query(text)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug(f"Using cached correction: {cached}")
                return cached

        corrected = self._ask(text)
        if NOT_RELATED in corrected.lower():
            logger.info("Query not gemstone related, using original text")
            corrected = text
        else:
            logger.info(f"Corrected query: {text!r} -> {corrected!r}")

        if self.cache is not None:
            self.cache.set(key, corrected, self.ttl)
        return corrected


class QueryNormalizer:
    """Raw user text -> search tokens. Correction failures fall back to the raw text."""

    def __init__(self, corrector: Optional[QueryCorrector] = None):
        self.corrector = corrector

    def normalize(self, raw_text: Any) -> list[str]:
        if not isinstance(raw_text, str) or not raw_text.strip():
            return []

        text = raw_text
        if self.corrector is not None:
            try:
                text = self.corrector.correct(raw_text)
            except QueryCorrectionError as e:
                logger.warning(f"Query correction failed, falling back to original text: {e}")
                text = raw_text

        tokens = tokenize(text)
        logger.info(f"Searching for words: {tokens}")
        return tokens


def build_normalizer(cfg: Settings, cache: Optional[InMemoryCache | RedisCache] = None) -> QueryNormalizer:
    if not cfg.QUERY_CORRECTION_ENABLED or not cfg.OPENAI_API_KEY:
        logger.info("Query correction disabled")
        return QueryNormalizer()
    corrector = QueryCorrector(
        api_key=cfg.OPENAI_API_KEY,
        model=cfg.QUERY_CORRECTION_MODEL,
        cache=cache,
        ttl=cfg.QUERY_CACHE_TTL_SECONDS,
    )
    return QueryNormalizer(corrector)
