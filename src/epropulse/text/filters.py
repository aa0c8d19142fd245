"""Jinja2 filters for rendering store records into pages.

Registered on every template environment built by epropulse.seo.metadata.
The packaged head template uses none of them. They serve the blog page
templates that callers load with create_environment(templates_dir).
"""

import re
from datetime import datetime

from .slug import slugify, truncate_text

FRENCH_MONTHS = (
    "janvier",
    "février",
    "mars",
    "avril",
    "mai",
    "juin",
    "juillet",
    "août",
    "septembre",
    "octobre",
    "novembre",
    "décembre",
)


def format_date(date_string: str | None) -> str:
    """Format a store timestamp as a French calendar date.

    Args:
        date_string: ISO 8601 timestamp, e.g. "2026-01-15T14:00:00+00:00"

    Returns:
        Formatted date like "15 janvier 2026", or the input when unparseable

    Examples:
        >>> format_date("2026-01-05T06:51:50Z")
        '5 janvier 2026'
    """
    if not date_string:
        return ""
    try:
        dt = datetime.fromisoformat(date_string.replace("Z", "+00:00"))
    except ValueError:
        return date_string
    return f"{dt.day} {FRENCH_MONTHS[dt.month - 1]} {dt.year}"


def _name_of(entry) -> str:
    if isinstance(entry, dict):
        return entry.get("name", "") or ""
    return getattr(entry, "name", "") or ""


def format_authors(authors) -> str:
    """Join author names with commas, skipping nameless entries.

    Accepts a single author or a list, as dicts or objects with a name.

    Examples:
        >>> format_authors([{"name": "Awa"}, {"name": "Koffi"}])
        'Awa, Koffi'
    """
    if not authors:
        return ""
    if not isinstance(authors, (list, tuple)):
        authors = [authors]
    return ", ".join(name for name in map(_name_of, authors) if name)


def parse_tags(tags) -> list[str]:
    """Extract tag names from tag dicts or objects.

    Examples:
        >>> parse_tags([{"name": "IA"}, {"name": ""}, {"name": "SEO"}])
        ['IA', 'SEO']
    """
    if not tags:
        return []
    return [name for name in map(_name_of, tags) if name]


def clean_content(html: str | None) -> str:
    """Strip scripts, iframes, noscript blocks and inline event handlers.

    Used on authored content before it is rendered into a page. The editor
    drops the same elements on its own when it reads markup.

    Examples:
        >>> clean_content('<p onclick="x()">Salut</p><script>alert(1)</script>')
        '<p>Salut</p>'
    """
    if not html:
        return ""

    html = re.sub(r"<script[^>]*>.*?</script>", "", html, flags=re.DOTALL | re.IGNORECASE)

    html = re.sub(r"<iframe[^>]*>.*?</iframe>", "", html, flags=re.DOTALL | re.IGNORECASE)
    html = re.sub(r"<iframe[^>]*/?>", "", html, flags=re.IGNORECASE)

    html = re.sub(r"<noscript[^>]*>.*?</noscript>", "", html, flags=re.DOTALL | re.IGNORECASE)

    html = re.sub(
        r"\s+on[a-z]+\s*=\s*(\"[^\"]*\"|'[^']*'|[^\s>]+)", "", html, flags=re.IGNORECASE
    )

    return html.strip()


# Registry of all filters for registration with Jinja2
FILTERS = {
    "format_date": format_date,
    "format_authors": format_authors,
    "parse_tags": parse_tags,
    "clean_content": clean_content,
    "truncate_text": truncate_text,
    "slugify": slugify,
}
