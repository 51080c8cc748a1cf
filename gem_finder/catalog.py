"""
Catalog sources: where product snapshots come from.

Every source exposes fetch_catalog() -> list[Product]. CachedCatalog
wraps any source with a freshness window.
"""
import json
import logging
import os
from collections import defaultdict
from typing import Any, Optional, Protocol

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .cache import InMemoryCache, RedisCache
from .errors import CatalogError
from .models import Product, coerce_products
from .settings import Settings

logger = logging.getLogger(__name__)

CATALOG_CACHE_KEY = "catalog:all"

PRODUCTS_SQL = text(
    "SELECT p.id, p.title, p.description, p.tags, p.image_url, p.image_alt "
    "FROM products p ORDER BY p.title"
)
VARIANTS_SQL = text(
    "SELECT pv.product_id, pv.title, pv.price, pv.inventory_quantity, pv.available_for_sale "
    "FROM product_variants pv ORDER BY pv.product_id, pv.title"
)


class CatalogSource(Protocol):
    def fetch_catalog(self) -> list[Product]:
        ...


class JsonCatalogSource:
    """Catalog from a JSON file: a list of products or {"products": [...]}."""

    def __init__(self, path: str):
        self.path = path

    def fetch_catalog(self) -> list[Product]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogError(f"Cannot read catalog file {self.path}: {e}") from e

        rows = data.get("products", []) if isinstance(data, dict) else data
        if not isinstance(rows, list):
            raise CatalogError(f"Catalog file {self.path} has no product list")

        products = coerce_products(rows)
        logger.info(f"Loaded {len(products)} products from {self.path}")
        return products


class SqlCatalogSource:
    """Catalog from the synchronized products / product_variants tables."""

    def __init__(self, engine: Engine | str):
        self.engine = create_engine(engine, pool_pre_ping=True) if isinstance(engine, str) else engine

    def fetch_catalog(self) -> list[Product]:
        try:
            with self.engine.connect() as conn:
                product_rows = conn.execute(PRODUCTS_SQL).mappings().all()
                variant_rows = conn.execute(VARIANTS_SQL).mappings().all()
        except SQLAlchemyError as e:
            raise CatalogError(f"Catalog query failed: {e}") from e

        variants_by_product: dict[str, list[dict[str, Any]]] = defaultdict(list)
        for row in variant_rows:
            variants_by_product[str(row["product_id"])].append({
                "title": row["title"],
                "price": row["price"],
                "inventory_quantity": row["inventory_quantity"],
                "available_for_sale": row["available_for_sale"],
            })

        rows = [
            {
                "id": str(row["id"]),
                "title": row["title"],
                "description": row["description"],
                "tags": row["tags"],
                "image_url": row["image_url"],
                "image_alt": row["image_alt"],
                "variants": variants_by_product.get(str(row["id"]), []),
            }
            for row in product_rows
        ]
        products = coerce_products(rows)
        logger.info(f"Fetched {len(products)} products with variants from the database")
        return products


class CachedCatalog:
    """Serves a cached snapshot of `source` while it is younger than `ttl` seconds."""

    def __init__(self, source: CatalogSource, cache: InMemoryCache | RedisCache, ttl: float = 300):
        self.source = source
        self.cache = cache
        self.ttl = ttl

    def fetch_catalog(self) -> list[Product]:
        cached = self.cache.get(CATALOG_CACHE_KEY)
        if cached is not None:
            logger.debug("Using cached catalog")
            return coerce_products(cached)

        logger.info("Fetching fresh catalog")
        products = self.source.fetch_catalog()
        self.cache.set(CATALOG_CACHE_KEY, [p.model_dump(mode="json") for p in products], self.ttl)
        logger.info(f"Cached {len(products)} products for {self.ttl}s")
        return products

    def invalidate(self) -> None:
        self.cache.delete(CATALOG_CACHE_KEY)


def build_catalog_source(cfg: Settings, cache: Optional[InMemoryCache | RedisCache] = None) -> CatalogSource:
    """Source selected by CATALOG_SOURCE, wrapped in CachedCatalog when a cache is given."""
    cfg.validate()
    if cfg.CATALOG_SOURCE == "sql":
        source: CatalogSource = SqlCatalogSource(cfg.DATABASE_URL)
    else:
        source = JsonCatalogSource(os.path.abspath(cfg.CATALOG_PATH))
    if cache is None:
        return source
    return CachedCatalog(source, cache, ttl=cfg.CATALOG_CACHE_TTL_SECONDS)
