"""Text helpers: slugs, truncation and template filters."""

from .filters import FILTERS, clean_content, format_authors, format_date, parse_tags
from .slug import product_slug, slugify, strip_diacritics, truncate_text

__all__ = [
    "FILTERS",
    "clean_content",
    "format_authors",
    "format_date",
    "parse_tags",
    "product_slug",
    "slugify",
    "strip_diacritics",
    "truncate_text",
]
