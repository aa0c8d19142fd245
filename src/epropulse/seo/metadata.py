"""Page head metadata: title, robots, Open Graph, Twitter card, JSON-LD.

Pages describe themselves with a PageMetadata and render it through the
``head.html.j2`` Jinja2 template.
"""

import logging
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

from epropulse.text.filters import FILTERS
from epropulse.text.slug import truncate_text
from schemas.item import BlogPost
from schemas.seo import SITE_NAME, PageMetadata

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent.parent / "resources" / "templates"
HEAD_TEMPLATE = "head.html.j2"

SITE_URL = "https://www.epropulse.com"
DEFAULT_KEYWORDS = "IA, digital, formation, automatisation, marketing, Epropulse, Visual Arise"
DESCRIPTION_MAX_LENGTH = 160


def create_environment(templates_dir: Path | None = None) -> Environment:
    """Jinja2 environment with autoescaping and the text filters registered."""
    env = Environment(
        loader=FileSystemLoader(str(templates_dir or TEMPLATES_DIR)),
        autoescape=True,
    )
    for name, func in FILTERS.items():
        env.filters[name] = func
    return env


def build_page_metadata(**fields: Any) -> PageMetadata:
    """PageMetadata with defaults for every field not given (None skipped)."""
    return PageMetadata(**{k: v for k, v in fields.items() if v is not None})


def breadcrumbs(*trail: tuple[str, str]) -> dict[str, Any]:
    """BreadcrumbList JSON-LD from (name, url) pairs."""
    return {
        "@context": "https://schema.org",
        "@type": "BreadcrumbList",
        "itemListElement": [
            {"@type": "ListItem", "position": i, "name": name, "item": url}
            for i, (name, url) in enumerate(trail, start=1)
        ],
    }


def metadata_for_post(post: BlogPost, site_url: str = SITE_URL) -> PageMetadata:
    """Head metadata for a blog article page.

    SEO fields set by the author win over the title and excerpt.
    """
    canonical = f"{site_url}/blog/{post.slug}"
    title = post.seo_title or post.display_name
    description = post.seo_description or truncate_text(
        post.excerpt, DESCRIPTION_MAX_LENGTH
    )

    schema_data: dict[str, Any] = {
        "@context": "https://schema.org",
        "@type": "BlogPosting",
        "headline": post.display_name,
        "url": canonical,
        "publisher": {"@type": "Organization", "name": SITE_NAME},
    }
    if post.published_at:
        schema_data["datePublished"] = post.published_at
    if post.updated_at:
        schema_data["dateModified"] = post.updated_at
    if post.author:
        schema_data["author"] = {"@type": "Person", "name": post.author.name}
    if post.cover_image:
        schema_data["image"] = post.cover_image

    return build_page_metadata(
        title=title,
        description=description or None,
        canonical=canonical,
        image=post.cover_image,
        type="article",
        published_time=post.published_at,
        modified_time=post.updated_at,
        keywords=post.seo_keywords,
        no_index=not post.is_published,
        schema_data=schema_data,
    )


def render_head(meta: PageMetadata, env: Environment | None = None) -> str:
    """Render the head tags for a page."""
    env = env or create_environment()
    template = env.get_template(HEAD_TEMPLATE)
    rendered = template.render(
        meta=meta,
        site_name=SITE_NAME,
        default_keywords=DEFAULT_KEYWORDS,
    )
    logger.debug(f"Rendered head for {meta.canonical}")
    return rendered
