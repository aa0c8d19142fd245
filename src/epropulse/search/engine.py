"""In-memory filtering and suggestion matching over store collections.

Every function here is pure: the source collection is never mutated and the
same inputs always give the same output. Items may be SearchableItem models
or raw row dicts.
"""

import re
import unicodedata
from typing import Any, Iterable, Sequence

DEFAULT_SEARCH_KEYS = ("name", "title", "description", "category", "brand")
SUGGESTION_LIMIT = 5
QUERY_MAX_LENGTH = 64

_MARKUP = re.compile(r"<[^>]*>")
_SUSPICIOUS = re.compile(r"[<>$`{};]")


def normalize_text(value: Any) -> str:
    """Case-fold and strip diacritics for comparison.

    Examples:
        >>> normalize_text("Éléphant")
        'elephant'
    """
    if value is None:
        return ""
    decomposed = unicodedata.normalize("NFD", str(value).casefold())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def sanitize_query(value: str | None) -> str:
    """Clean raw user input before it becomes a search term or category.

    Markup is dropped, characters used in injection payloads are removed and
    the result is trimmed and capped at 64 characters.

    Examples:
        >>> sanitize_query("  <b>ebook</b>; ")
        'ebook'
    """
    if not value:
        return ""
    clean = _MARKUP.sub("", value)
    clean = _SUSPICIOUS.sub("", clean)
    return clean.strip()[:QUERY_MAX_LENGTH]


def _as_collection(items: Any) -> Sequence:
    if isinstance(items, (list, tuple)):
        return items
    return ()


def _field(item: Any, key: str) -> str:
    if isinstance(item, dict):
        value = item.get(key)
        return "" if value is None else str(value)
    field_text = getattr(item, "field_text", None)
    if field_text is not None:
        return field_text(key)
    value = getattr(item, key, None)
    return "" if value is None else str(value)


def matches(item: Any, normalized_term: str, search_keys: Iterable[str]) -> bool:
    if not normalized_term:
        return True
    return any(normalized_term in normalize_text(_field(item, key)) for key in search_keys)


def filter_items(
    items: Any,
    term: str | None = "",
    category: str | None = None,
    search_keys: Iterable[str] = DEFAULT_SEARCH_KEYS,
) -> list:
    """Return the items matching term and category, in source order.

    Args:
        items: Collection to filter; anything but a list or tuple is empty
        term: Free text; empty matches everything
        category: Exact category; None or empty means no restriction
        search_keys: Fields searched for term

    Returns:
        New list holding the matching items
    """
    collection = _as_collection(items)
    normalized_term = normalize_text(term).strip()
    keys = tuple(search_keys)

    return [
        item
        for item in collection
        if matches(item, normalized_term, keys)
        and (not category or _field(item, "category") == category)
    ]


def extract_categories(items: Any) -> list[str]:
    """Distinct non-empty categories in order of first occurrence."""
    seen: dict[str, None] = {}
    for item in _as_collection(items):
        category = _field(item, "category")
        if category:
            seen.setdefault(category, None)
    return list(seen)


def item_names(items: Any) -> list[str]:
    """Display names of the items, skipping nameless ones."""
    names = []
    for item in _as_collection(items):
        name = _field(item, "name") or _field(item, "title")
        if name:
            names.append(name)
    return names


def rank_suggestions(
    query: str | None,
    suggestions: Iterable[str],
    names: Iterable[str] = (),
    limit: int = SUGGESTION_LIMIT,
) -> list[str]:
    """Pick up to limit entries containing the query, keeping input order.

    Free-form suggestions come first, then item names; duplicates are
    dropped. With an empty query the free-form suggestions are returned.
    """
    if not query:
        return list(suggestions)[:limit]

    normalized_query = normalize_text(query)
    candidates = dict.fromkeys([*suggestions, *names])
    ranked = [c for c in candidates if normalized_query in normalize_text(c)]
    return ranked[:limit]
