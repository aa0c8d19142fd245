"""Search and filter engine for products and blog posts."""

from .engine import (
    DEFAULT_SEARCH_KEYS,
    extract_categories,
    filter_items,
    item_names,
    normalize_text,
    rank_suggestions,
    sanitize_query,
)
from .session import SearchSession

__all__ = [
    "DEFAULT_SEARCH_KEYS",
    "SearchSession",
    "extract_categories",
    "filter_items",
    "item_names",
    "normalize_text",
    "rank_suggestions",
    "sanitize_query",
]
