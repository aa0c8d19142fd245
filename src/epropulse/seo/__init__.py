"""SEO statistics, indicator grading and page metadata."""

from .analyzer import SEOAnalyzer, count_tags, count_words, reading_time
from .indicators import classify, statuses
from .metadata import (
    breadcrumbs,
    build_page_metadata,
    create_environment,
    metadata_for_post,
    render_head,
)

__all__ = [
    "SEOAnalyzer",
    "breadcrumbs",
    "build_page_metadata",
    "classify",
    "count_tags",
    "count_words",
    "create_environment",
    "metadata_for_post",
    "reading_time",
    "render_head",
    "statuses",
]
