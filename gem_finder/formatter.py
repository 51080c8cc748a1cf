"""
Renders a filtered product list into the chat reply text.
"""
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from .models import Product, coerce_products
from .ranking import DISPLAY_LIMIT

MAX_VARIANTS_SHOWN = 3
PRICE_ON_REQUEST = "Price on request"

NO_RESULTS_TEXT = (
    "I couldn't find any products matching \"{terms}\". Please try different keywords "
    "or ask me to show you our available gemstone beads and jewelry supplies."
)
CALL_TO_ACTION = (
    "Would you like more details about any of these products, "
    "or shall I help you with something else?"
)

_CENTS = Decimal("0.01")


def format_price(value: Any) -> str:
    """$X.XX, or 'Price on request' when the price is missing or not a number."""
    if value is None or isinstance(value, bool):
        return PRICE_ON_REQUEST
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return PRICE_ON_REQUEST
    if not amount.is_finite():
        return PRICE_ON_REQUEST
    return f"${amount.quantize(_CENTS, rounding=ROUND_HALF_UP)}"


def format_stock(quantity: int) -> str:
    # keyed on quantity only; available_for_sale is not consulted
    if quantity > 0:
        return f"(In Stock - {quantity} left)"
    return "(Out of Stock)"


def _search_terms(tokens: Any) -> str:
    if isinstance(tokens, (list, tuple)) and tokens:
        return ", ".join(str(t) for t in tokens)
    return "your search"


def _format_product(product: Product) -> str:
    lines = [f"💎 {product.title}\n"]
    if product.image:
        lines.append(f"🖼️ {product.image}\n")
    for variant in product.variants[:MAX_VARIANTS_SHOWN]:
        lines.append(
            f"   • {variant.display_title}: {format_price(variant.price)} "
            f"{format_stock(variant.inventory_quantity)}\n"
        )
    lines.append("\n")
    return "".join(lines)


def format_product_response(products: Any, tokens: Any) -> str:
    """
    Header with the full match count, up to DISPLAY_LIMIT products with at
    most MAX_VARIANTS_SHOWN variant lines each, the number of hidden
    matches, then the closing question.
    """
    if isinstance(products, (list, tuple)):
        products = coerce_products(products)
    if not isinstance(products, list) or not products:
        return NO_RESULTS_TEXT.format(terms=_search_terms(tokens))

    parts = [f"Found {len(products)} product(s) for you:\n\n"]
    parts.extend(_format_product(product) for product in products[:DISPLAY_LIMIT])

    hidden = len(products) - DISPLAY_LIMIT
    if hidden > 0:
        parts.append(f"... and {hidden} more products available!\n")

    parts.append(CALL_TO_ACTION)
    return "".join(parts)
