"""SEO analysis and page metadata schemas."""

from typing import Any, Literal

from pydantic import BaseModel, Field

SITE_NAME = "Epropulse"

IndicatorStatus = Literal["good", "warning", "bad", "neutral"]


class SEOStats(BaseModel):
    """Structural statistics of an authored document.

    Attributes:
        words: Whitespace-delimited tokens in the plain text
        reading_time: Minutes, ceil(words / 200)
        h1: Number of h1 elements
        h2: Number of h2 elements
        h3: Number of h3 elements
        links: Number of a elements
        images: Number of img elements
        videos: Number of video elements
    """

    words: int = Field(default=0, ge=0)
    reading_time: int = Field(default=0, ge=0)
    h1: int = Field(default=0, ge=0)
    h2: int = Field(default=0, ge=0)
    h3: int = Field(default=0, ge=0)
    links: int = Field(default=0, ge=0)
    images: int = Field(default=0, ge=0)
    videos: int = Field(default=0, ge=0)

    model_config = {"frozen": True}


class SEOThresholds(BaseModel):
    """Thresholds used to grade SEOStats on the indicator panel."""

    words_good: int = 300
    words_warning: int = 150
    h1_expected: int = 1
    h2_good: int = 2
    links_good: int = 1


class Indicator(BaseModel):
    """One graded metric of the indicator panel."""

    label: str
    value: int | str
    status: IndicatorStatus
    message: str | None = None


class PageMetadata(BaseModel):
    """Head metadata for a rendered page.

    Attributes:
        title: Page title, suffixed with the site name when missing
        description: Meta description
        canonical: Canonical URL
        image: Open Graph / Twitter image URL
        type: Open Graph type (website, article, product)
        published_time: ISO timestamp for article:published_time
        modified_time: ISO timestamp for article:modified_time
        no_index: Ask crawlers not to index or follow
        keywords: Comma-separated keywords
        schema_data: JSON-LD structured data
    """

    title: str = "Epropulse – IA & Digital accessibles à tous"
    description: str = (
        "Epropulse aide les créateurs, entrepreneurs et entreprises francophones "
        "à utiliser l’IA et le digital pour accélérer leur croissance, même sans "
        "compétences techniques."
    )
    canonical: str = "https://www.epropulse.com"
    image: str = "https://www.epropulse.com/og-default.jpg"
    type: str = "website"
    published_time: str | None = None
    modified_time: str | None = None
    no_index: bool = False
    keywords: str | None = None
    schema_data: dict[str, Any] | None = None

    @property
    def full_title(self) -> str:
        if SITE_NAME in self.title:
            return self.title
        return f"{self.title} | {SITE_NAME}"

    @property
    def robots(self) -> str:
        if self.no_index:
            return "noindex, nofollow"
        return "index, follow, max-snippet:-1, max-image-preview:large, max-video-preview:-1"
