"""Slug generation and text shortening."""

import re
import time
import unicodedata

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def strip_diacritics(value: str) -> str:
    """Remove combining marks after canonical decomposition.

    Examples:
        >>> strip_diacritics("Éducation numérique")
        'Education numerique'
    """
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def slugify(value: str | None) -> str:
    """Build a URL slug from a title, name or tag.

    Examples:
        >>> slugify("Créer un site avec l'IA !")
        'creer-un-site-avec-l-ia'
    """
    if not value:
        return ""
    ascii_text = strip_diacritics(value.lower())
    return _NON_ALNUM.sub("-", ascii_text).strip("-")


def product_slug(name: str, now: float | None = None) -> str:
    """Slug for a new product, suffixed with the creation time in seconds.

    The suffix keeps two products with the same name from colliding.
    """
    timestamp = int(time.time() if now is None else now)
    return f"{slugify(name)}-{timestamp}"


def truncate_text(text: str | None, max_length: int = 100) -> str:
    """Cut text to max_length characters, ending with an ellipsis.

    Examples:
        >>> truncate_text("Bonjour tout le monde", 7)
        'Bonjour…'
    """
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[:max_length].rstrip() + "…"
