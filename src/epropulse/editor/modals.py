"""Insertion modals for links, images and videos.

Input is validated locally: an invalid form simply cannot be confirmed.
"""

import logging
from enum import Enum
from urllib.parse import urlsplit

from .commands import Command, InsertImage, InsertLink, InsertVideo

logger = logging.getLogger(__name__)


class ModalKind(str, Enum):
    LINK = "link"
    IMAGE = "image"
    VIDEO = "video"


MODAL_FIELDS = {
    ModalKind.LINK: ("url", "text"),
    ModalKind.IMAGE: ("url", "alt"),
    ModalKind.VIDEO: ("url",),
}

MODAL_TITLES = {
    ModalKind.LINK: "Insérer un lien",
    ModalKind.IMAGE: "Ajouter une image",
    ModalKind.VIDEO: "Insérer une vidéo",
}

WEB_SCHEMES = ("http", "https")
CONTACT_SCHEMES = ("mailto", "tel")


def is_valid_url(url: str | None, allow_contact: bool = False) -> bool:
    """Accept absolute http(s) URLs and site-relative paths.

    Args:
        url: Candidate URL
        allow_contact: Also accept mailto: and tel: URLs
    """
    url = (url or "").strip()
    if not url:
        return False
    if url.startswith("/") and not url.startswith("//"):
        return True
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    if parts.scheme in WEB_SCHEMES:
        return bool(parts.netloc)
    if allow_contact and parts.scheme in CONTACT_SCHEMES:
        return bool(parts.path)
    return False


class ModalForm:
    """Pending input of one open modal.

    Attributes:
        kind: Which modal this is
        fields: Current field values, keyed by field name
    """

    def __init__(self, kind: ModalKind | str):
        self.kind = ModalKind(kind)
        self.fields: dict[str, str] = {name: "" for name in MODAL_FIELDS[self.kind]}

    def __repr__(self) -> str:
        return f"ModalForm({self.kind.value})"

    @property
    def title(self) -> str:
        return MODAL_TITLES[self.kind]

    @property
    def url(self) -> str:
        return self.fields["url"].strip()

    def set_field(self, name: str, value: str | None) -> bool:
        """Set a field. Returns False for a field this modal does not have."""
        if name not in self.fields:
            logger.warning(f"{self.kind.value} modal has no field {name!r}")
            return False
        self.fields[name] = value or ""
        return True

    def can_confirm(self) -> bool:
        return is_valid_url(self.url, allow_contact=self.kind is ModalKind.LINK)

    def to_command(self) -> Command | None:
        """Insertion command for the current input, or None if invalid."""
        if not self.can_confirm():
            return None
        if self.kind is ModalKind.LINK:
            return InsertLink(self.url, text=self.fields["text"].strip() or None)
        if self.kind is ModalKind.IMAGE:
            return InsertImage(self.url, alt=self.fields["alt"].strip() or None)
        return InsertVideo(self.url)
