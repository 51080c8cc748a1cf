"""
Shared fixtures: global state reset and small product builders.
"""
from pathlib import Path

import pytest

from gem_finder import cache, responder
from gem_finder.models import Product

SAMPLE_CATALOG = Path(__file__).resolve().parents[2] / "data" / "sample_catalog.json"


@pytest.fixture(autouse=True)
def reset_state(monkeypatch):
    """Reset global cache/responder and keep the environment offline."""
    monkeypatch.delenv("REDIS_URL", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    cache.set_cache(None)
    responder.set_responder(None)

    yield

    cache.set_cache(None)
    responder.set_responder(None)


def make_product(title: str, description: str = "", variants=None, **extra) -> Product:
    pid = extra.pop("id", title.lower().replace(" ", "-"))
    return Product(id=pid, title=title, description=description, variants=variants or [], **extra)


@pytest.fixture
def product_factory():
    return make_product


@pytest.fixture
def sample_catalog_path() -> Path:
    return SAMPLE_CATALOG
