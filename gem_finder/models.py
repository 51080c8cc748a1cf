"""
Pydantic v2 models for catalog snapshots.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

DEFAULT_VARIANT_TITLE = "Standard"


class Variant(BaseModel):
    """A purchasable size/quality option of a product."""
    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    price: Optional[Decimal] = None  # None renders as "Price on request"
    inventory_quantity: int = 0
    available_for_sale: bool = True

    @field_validator("title", mode="before")
    @classmethod
    def _blank_title(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_price(cls, value: Any) -> Optional[Decimal]:
        if value is None or isinstance(value, bool):
            return None
        try:
            price = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
        return price if price.is_finite() else None

    @field_validator("inventory_quantity", mode="before")
    @classmethod
    def _coerce_quantity(cls, value: Any) -> int:
        try:
            quantity = int(value)
        except (TypeError, ValueError, OverflowError):
            try:
                quantity = int(float(value))
            except (TypeError, ValueError, OverflowError):
                return 0
        return max(quantity, 0)

    @field_validator("available_for_sale", mode="before")
    @classmethod
    def _default_available(cls, value: Any) -> Any:
        return True if value is None else value

    @property
    def display_title(self) -> str:
        return self.title or DEFAULT_VARIANT_TITLE


class Product(BaseModel):
    """Read-only product snapshot from the catalog store."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str = Field(min_length=1)
    description: str = ""
    tags: str = ""
    image: Optional[str] = Field(default=None, validation_alias=AliasChoices("image", "image_url"))
    image_alt: Optional[str] = Field(default=None, validation_alias=AliasChoices("image_alt", "imageAlt"))
    variants: tuple[Variant, ...] = ()

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _empty_description(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _join_tags(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            return ",".join(str(tag) for tag in value)
        return value

    @field_validator("image", "image_alt", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("variants", mode="before")
    @classmethod
    def _no_variants(cls, value: Any) -> Any:
        return () if value is None else value

    @property
    def haystack(self) -> str:
        """Lowercase title + description, the text tokens are matched against."""
        return f"{self.title.lower()} {self.description.lower()}"


@dataclass(frozen=True)
class MatchResult:
    """A product plus the tokens that caused it to match (diagnostics only)."""
    product: Product
    is_match: bool
    matched_tokens: tuple[str, ...] = ()


def coerce_products(rows: Iterable[Any]) -> list[Product]:
    """
    Build Products from the store's string-keyed rows.
    Rows that fail validation are logged and skipped.
    """
    products: list[Product] = []
    for row in rows:
        if isinstance(row, Product):
            products.append(row)
            continue
        try:
            products.append(Product.model_validate(row))
        except ValidationError as e:
            row_id = row.get("id") if isinstance(row, dict) else None
            logger.warning(f"Skipping malformed catalog row {row_id!r}: {e.error_count()} error(s)")
    return products
