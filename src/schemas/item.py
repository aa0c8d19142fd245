"""Content Store record schemas (products and blog posts)."""

from pydantic import BaseModel


class SearchableItem(BaseModel):
    """A record from the Content Store that can be searched and filtered.

    Known fields are typed; anything else the store returns is kept in the
    pydantic extra map so schema drift never breaks validation.
    """

    id: str | int
    name: str | None = None
    title: str | None = None
    category: str | None = None
    slug: str | None = None

    model_config = {"extra": "allow", "frozen": True}

    @property
    def display_name(self) -> str:
        return self.name or self.title or ""

    def field_text(self, key: str) -> str:
        """Return the string form of a known or extra field.

        Missing fields and None values yield an empty string.
        """
        if key in type(self).model_fields:
            value = getattr(self, key)
        else:
            value = (self.model_extra or {}).get(key)
        if value is None:
            return ""
        return str(value)


class Product(SearchableItem):
    """A digital product from the storefront table."""

    description: str | None = None
    brand: str | None = None
    price: float | None = None
    original_price: float | None = None
    image: str | None = None
    is_new: bool = False
    promo: bool = False
    instock: bool = True


class Author(BaseModel):
    """A blog author."""

    id: str
    name: str
    bio: str | None = None
    avatar: str | None = None
    role: str | None = None
    social_links: dict[str, str] | None = None


class BlogCategory(BaseModel):
    """A blog category."""

    id: int
    slug: str
    name: str
    description: str | None = None


class BlogTag(BaseModel):
    """A blog tag."""

    id: int
    slug: str
    name: str


class BlogPost(SearchableItem):
    """A blog post with its author, category and tags."""

    excerpt: str | None = None
    content: str | None = None
    cover_image: str | None = None
    published_at: str | None = None
    updated_at: str | None = None
    is_published: bool = False
    views: int = 0

    # SEO metadata
    seo_title: str | None = None
    seo_description: str | None = None
    seo_keywords: str | None = None

    # Relationships
    author: Author | None = None
    blog_category: BlogCategory | None = None
    tags: list[BlogTag] = []

