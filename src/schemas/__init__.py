"""Schema definitions for the Epropulse toolkit."""

from .item import Author, BlogCategory, BlogPost, BlogTag, Product, SearchableItem
from .lead import Lead
from .locale import LocaleInfo
from .seo import Indicator, PageMetadata, SEOStats, SEOThresholds
from .user import Session, User

__all__ = [
    "Author",
    "BlogCategory",
    "BlogPost",
    "BlogTag",
    "Indicator",
    "Lead",
    "LocaleInfo",
    "PageMetadata",
    "Product",
    "SEOStats",
    "SEOThresholds",
    "SearchableItem",
    "Session",
    "User",
]
