"""Command objects applied to an EditorDocument.

The toolbar and the modals only ever talk to the document through these
commands, so swapping the document engine does not touch them.
"""

import logging
from abc import ABC, abstractmethod
from functools import partial
from typing import Callable

from .document import Block, EditorDocument

logger = logging.getLogger(__name__)

DEFAULT_LINK_REL = "nofollow noopener noreferrer"
DEFAULT_LINK_TARGET = "_blank"
DEFAULT_IMAGE_ALT = "Image descriptive pour le référencement"


class Command(ABC):
    """Base class for editor commands."""

    @abstractmethod
    def apply(self, document: EditorDocument) -> bool:
        """Apply the command.

        Returns:
            True if the document content changed
        """
        pass

    def is_active(self, document: EditorDocument) -> bool:
        """Whether a button bound to this command shows as highlighted."""
        return False


class ToggleMark(Command):
    def __init__(self, mark: str):
        self.mark = mark

    def __repr__(self) -> str:
        return f"ToggleMark({self.mark!r})"

    def apply(self, document: EditorDocument) -> bool:
        return document.toggle_mark(self.mark)

    def is_active(self, document: EditorDocument) -> bool:
        return document.is_mark_active(self.mark)


class ToggleHeading(Command):
    def __init__(self, level: int = 1):
        if level not in (1, 2, 3):
            raise ValueError(f"Heading level must be 1, 2 or 3, got {level}")
        self.level = level

    def apply(self, document: EditorDocument) -> bool:
        return document.toggle_block("heading", level=self.level)

    def is_active(self, document: EditorDocument) -> bool:
        return document.is_block_active("heading", level=self.level)


class ToggleList(Command):
    def __init__(self, kind: str = "bullet"):
        if kind not in ("bullet", "ordered"):
            raise ValueError(f"List kind must be bullet or ordered, got {kind}")
        self.kind = kind

    def apply(self, document: EditorDocument) -> bool:
        return document.toggle_block("list_item", list_kind=self.kind)

    def is_active(self, document: EditorDocument) -> bool:
        return document.is_block_active("list_item", list_kind=self.kind)


class ToggleBlockquote(Command):
    def apply(self, document: EditorDocument) -> bool:
        return document.toggle_block("blockquote")

    def is_active(self, document: EditorDocument) -> bool:
        return document.is_block_active("blockquote")


class ToggleCodeBlock(Command):
    def apply(self, document: EditorDocument) -> bool:
        return document.toggle_block("code_block")

    def is_active(self, document: EditorDocument) -> bool:
        return document.is_block_active("code_block")


class SetColor(Command):
    def __init__(self, color: str | None):
        self.color = color

    def apply(self, document: EditorDocument) -> bool:
        return document.set_color(self.color)


class SetAlign(Command):
    def __init__(self, align: str = "left"):
        if align not in ("left", "center", "right"):
            raise ValueError(f"Unknown alignment: {align}")
        self.align = align

    def apply(self, document: EditorDocument) -> bool:
        return document.set_align(self.align)

    def is_active(self, document: EditorDocument) -> bool:
        return document.current_block is not None and document.alignment == self.align


class InsertLink(Command):
    """Link the selection or insert linked text.

    Links open in a new tab and pass no referrer or ranking signal unless
    the caller overrides rel and target.
    """

    def __init__(
        self,
        href: str,
        text: str | None = None,
        rel: str | None = DEFAULT_LINK_REL,
        target: str | None = DEFAULT_LINK_TARGET,
    ):
        self.href = (href or "").strip()
        self.text = text or None
        self.rel = rel
        self.target = target

    def apply(self, document: EditorDocument) -> bool:
        if not self.href:
            return False
        return document.set_link(self.href, rel=self.rel, target=self.target, text=self.text)


class InsertImage(Command):
    def __init__(self, src: str, alt: str | None = None, title: str | None = None):
        self.src = (src or "").strip()
        self.alt = alt or DEFAULT_IMAGE_ALT
        self.title = title or None

    def apply(self, document: EditorDocument) -> bool:
        if not self.src:
            return False
        return document.insert_media(
            Block(type="image", src=self.src, alt=self.alt, title=self.title)
        )


class InsertVideo(Command):
    def __init__(self, src: str):
        self.src = (src or "").strip()

    def apply(self, document: EditorDocument) -> bool:
        if not self.src:
            return False
        return document.insert_media(Block(type="video", src=self.src))


COMMANDS: dict[str, Callable[..., Command]] = {
    "bold": partial(ToggleMark, "bold"),
    "italic": partial(ToggleMark, "italic"),
    "underline": partial(ToggleMark, "underline"),
    "heading": ToggleHeading,
    "bullet_list": partial(ToggleList, "bullet"),
    "ordered_list": partial(ToggleList, "ordered"),
    "blockquote": ToggleBlockquote,
    "code_block": ToggleCodeBlock,
    "color": SetColor,
    "align": SetAlign,
    "link": InsertLink,
    "image": InsertImage,
    "video": InsertVideo,
}


def make_command(command_id: str, **params) -> Command:
    """Instantiate a registered command.

    Raises:
        KeyError: If command_id is not registered
        ValueError: If params are invalid for the command
    """
    try:
        factory = COMMANDS[command_id]
    except KeyError:
        raise KeyError(f"Unknown command: {command_id}") from None
    return factory(**params)


def dispatch(document: EditorDocument, command_id: str, **params) -> bool:
    """Apply a command by id. Unknown ids and invalid params are ignored.

    Returns:
        True if the document content changed
    """
    try:
        command = make_command(command_id, **params)
    except (KeyError, ValueError) as e:
        logger.warning(f"Ignoring command {command_id}: {e}")
        return False
    return command.apply(document)
