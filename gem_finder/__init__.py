"""
Fuzzy product search for conversational shop queries.
"""
from .formatter import format_product_response
from .matcher import match_product
from .ranking import filter_and_rank
from .similarity import similarity

__all__ = ["filter_and_rank", "format_product_response", "match_product", "similarity"]
