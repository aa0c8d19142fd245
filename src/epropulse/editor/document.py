"""In-memory rich-text document edited through toolbar commands.

A document is a flat list of blocks. Text blocks hold inline runs: stretches
of text sharing the same marks, color and link. Positions are character
offsets inside one block and the selection never spans blocks.

Markup goes in through from_html() and comes out through to_html(), built
with lxml the same way the other serializers in this package build trees.
"""

import logging
import re
from typing import Iterator, Literal

from lxml import etree
from lxml import html as lxml_html
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

BlockType = Literal[
    "paragraph", "heading", "list_item", "blockquote", "code_block", "image", "video"
]
ListKind = Literal["bullet", "ordered"]
Align = Literal["left", "center", "right"]

MARKS = ("bold", "italic", "underline")
MEDIA_BLOCKS = ("image", "video")

# Serialization order, innermost first.
MARK_ELEMENTS = (("bold", "strong"), ("italic", "em"), ("underline", "u"))
MARK_TAGS = {"strong": "bold", "b": "bold", "em": "italic", "i": "italic", "u": "underline"}
HEADING_TAGS = {"h1": 1, "h2": 2, "h3": 3, "h4": 3, "h5": 3, "h6": 3}
LIST_TAGS = {"ul": "bullet", "ol": "ordered"}
BLOCK_TAGS = {
    "p", "div", "section", "article", "blockquote", "pre", "ul", "ol", "img", "video",
    *HEADING_TAGS,
}

# Dropped with their content when reading markup.
SKIPPED_TAGS = {"script", "style", "noscript", "template"}

# Characters lxml refuses in text and attribute values.
INVALID_CHARS = re.compile(r"[\x00-\x08\x0e-\x1f\ud800-\udfff\ufffe\uffff]")
LINE_BREAKS = str.maketrans({"\x0b": "\n", "\x0c": "\n"})

VIDEO_FALLBACK = "Votre navigateur ne supporte pas les vidéos HTML5."


class Link(BaseModel):
    """Link attributes carried by a run."""

    href: str
    rel: str | None = None
    target: str | None = None

    model_config = {"frozen": True}


class Run(BaseModel):
    """A stretch of text with uniform formatting."""

    text: str = ""
    marks: frozenset[str] = frozenset()
    color: str | None = None
    link: Link | None = None

    def same_style(self, other: "Run") -> bool:
        return (self.marks, self.color, self.link) == (other.marks, other.color, other.link)

    def with_text(self, text: str) -> "Run":
        return self.model_copy(update={"text": text})


class Block(BaseModel):
    """One block of the document.

    Attributes:
        type: Block kind
        level: Heading level 1-3, headings only
        list_kind: bullet or ordered, list items only
        align: Text alignment; None means the default (left)
        runs: Inline content of text blocks
        src: Media URL, image and video blocks only
        alt: Alternative text, image blocks only
        title: Tooltip, image blocks only
    """

    type: BlockType = "paragraph"
    level: int | None = None
    list_kind: ListKind | None = None
    align: Align | None = None
    runs: list[Run] = Field(default_factory=list)
    src: str | None = None
    alt: str | None = None
    title: str | None = None

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)

    @property
    def is_media(self) -> bool:
        return self.type in MEDIA_BLOCKS


class Selection(BaseModel):
    """Character range [start, end) inside one block."""

    block: int = 0
    start: int = 0
    end: int = 0

    model_config = {"frozen": True}

    @property
    def empty(self) -> bool:
        return self.start == self.end


def _style_properties(element) -> dict[str, str]:
    properties = {}
    for declaration in (element.get("style") or "").split(";"):
        name, sep, value = declaration.partition(":")
        if sep:
            properties[name.strip().lower()] = value.strip()
    return properties


def _align_of(element) -> Align | None:
    align = _style_properties(element).get("text-align") or element.get("align")
    if align in ("center", "right"):
        return align
    return None


def clean_text(text: str) -> str:
    """Make typed or pasted text safe to serialize.

    Vertical tabs and form feeds, which word processors use as line breaks,
    become newlines. Other control characters are dropped.
    """
    return INVALID_CHARS.sub("", text.translate(LINE_BREAKS))


def _merge_runs(runs: list[Run]) -> list[Run]:
    merged: list[Run] = []
    for run in runs:
        if not run.text:
            continue
        if merged and merged[-1].same_style(run):
            merged[-1] = merged[-1].with_text(merged[-1].text + run.text)
        else:
            merged.append(run)
    return merged


def _inline_style(element, style: Run) -> Run:
    update: dict = {}
    tag = element.tag
    if tag in MARK_TAGS:
        update["marks"] = style.marks | {MARK_TAGS[tag]}
    color = _style_properties(element).get("color")
    if color:
        update["color"] = color
    if tag == "a" and element.get("href"):
        update["link"] = Link(
            href=element.get("href"),
            rel=element.get("rel"),
            target=element.get("target"),
        )
    return style.model_copy(update=update) if update else style


def _read_inline(element, style: Run) -> list[Run]:
    """Runs for an inline element and its descendants (tail excluded)."""
    if element.tag == "br":
        return [style.with_text("\n")]
    style = _inline_style(element, style)
    runs = []
    if element.text:
        runs.append(style.with_text(element.text))
    for child in element:
        if isinstance(child.tag, str) and child.tag not in SKIPPED_TAGS:
            runs.extend(_read_inline(child, style))
        if child.tail:
            runs.append(style.with_text(child.tail))
    return runs


def _styled_node(run: Run, text: str):
    """Element tree for one run, or None for unformatted text."""
    node = None
    for mark, tag in MARK_ELEMENTS:
        if mark in run.marks:
            wrapper = etree.Element(tag)
            if node is None:
                wrapper.text = text
            else:
                wrapper.append(node)
            node = wrapper
    if run.color:
        wrapper = etree.Element("span", style=f"color: {run.color}")
        if node is None:
            wrapper.text = text
        else:
            wrapper.append(node)
        node = wrapper
    if run.link:
        attrs = {"href": run.link.href}
        if run.link.rel:
            attrs["rel"] = run.link.rel
        if run.link.target:
            attrs["target"] = run.link.target
        wrapper = etree.Element("a", attrs)
        if node is None:
            wrapper.text = text
        else:
            wrapper.append(node)
        node = wrapper
    return node


def _append_text(parent, text: str) -> None:
    if len(parent):
        last = parent[-1]
        last.tail = (last.tail or "") + text
    else:
        parent.text = (parent.text or "") + text


def _write_runs(parent, runs: list[Run]) -> None:
    for run in runs:
        for i, line in enumerate(run.text.split("\n")):
            if i:
                etree.SubElement(parent, "br")
            if not line:
                continue
            node = _styled_node(run, line)
            if node is None:
                _append_text(parent, line)
            else:
                parent.append(node)


def _set_align(element, align: Align | None) -> None:
    if align and align != "left":
        element.set("style", f"text-align: {align}")


class EditorDocument:
    """The rich-text document being authored.

    Mutating methods return True when the document content changed. Marks
    or a color toggled on a collapsed selection are stored and apply to the
    next inserted text, which leaves the content itself untouched.

    Attributes:
        blocks: Document content, in order
        selection: Current selection
    """

    def __init__(self, blocks: list[Block] | None = None):
        self.blocks: list[Block] = list(blocks) if blocks else []
        self.selection = Selection()
        self._stored_style: Run | None = None

    def __repr__(self) -> str:
        return f"EditorDocument({len(self.blocks)} blocks)"

    # -- parsing -----------------------------------------------------------

    @classmethod
    def from_html(cls, markup: str | None) -> "EditorDocument":
        """Build a document from HTML.

        Markup that cannot be parsed yields an empty document.
        """
        document = cls()
        if not markup or not markup.strip():
            return document
        try:
            root = lxml_html.document_fromstring(markup)
        except (etree.ParserError, ValueError) as e:
            logger.warning(f"Could not parse initial content, starting empty: {e}")
            return document
        body = root.find("body")
        document._read_container(body if body is not None else root, {}, keep_empty=False)
        return document

    def _read_container(self, container, attrs: dict, keep_empty: bool = True) -> None:
        """Append the blocks found in container.

        Inline content between block elements becomes blocks carrying attrs;
        whitespace-only inline content is dropped.
        """
        before = len(self.blocks)
        base = Run()
        inline: list[Run] = []

        def flush():
            runs = _merge_runs(inline)
            inline.clear()
            if "".join(run.text for run in runs).strip():
                self.blocks.append(Block(runs=runs, **attrs))

        if container.text:
            inline.append(base.with_text(container.text))
        for child in container:
            if not isinstance(child.tag, str) or child.tag in SKIPPED_TAGS:
                pass
            elif child.tag in BLOCK_TAGS:
                flush()
                self._read_block(child, attrs)
            else:
                inline.extend(_read_inline(child, base))
            if child.tail:
                inline.append(base.with_text(child.tail))
        flush()

        if keep_empty and len(self.blocks) == before:
            self.blocks.append(Block(**attrs))

    def _read_block(self, element, attrs: dict) -> None:
        tag = element.tag
        align = _align_of(element) or attrs.get("align")
        if tag in HEADING_TAGS:
            self._read_container(
                element, {"type": "heading", "level": HEADING_TAGS[tag], "align": align}
            )
        elif tag in LIST_TAGS:
            for item in element:
                if item.tag == "li":
                    self._read_container(
                        item,
                        {
                            "type": "list_item",
                            "list_kind": LIST_TAGS[tag],
                            "align": _align_of(item),
                        },
                    )
        elif tag == "blockquote":
            self._read_container(element, {"type": "blockquote", "align": align})
        elif tag == "pre":
            text = element.text_content()
            runs = [Run(text=text)] if text else []
            self.blocks.append(Block(type="code_block", runs=runs))
        elif tag == "img":
            self.blocks.append(
                Block(
                    type="image",
                    src=element.get("src"),
                    alt=element.get("alt"),
                    title=element.get("title"),
                    align=align,
                )
            )
        elif tag == "video":
            src = element.get("src")
            if not src:
                source = element.find("source")
                src = source.get("src") if source is not None else None
            self.blocks.append(Block(type="video", src=src, align=align))
        else:
            self._read_container(element, {**attrs, "align": align})

    # -- serialization -----------------------------------------------------

    def to_html(self) -> str:
        """Serialize to HTML. Consecutive list items share one list."""
        # Built inside an HTML document so text is written unescaped.
        container = lxml_html.fragment_fromstring("<div></div>")
        current_list = None
        for block in self.blocks:
            if block.type == "list_item":
                tag = "ol" if block.list_kind == "ordered" else "ul"
                if current_list is None or current_list.tag != tag:
                    current_list = etree.SubElement(container, tag)
                item = etree.SubElement(current_list, "li")
                _set_align(item, block.align)
                _write_runs(etree.SubElement(item, "p"), block.runs)
                continue
            current_list = None
            container.append(self._render_block(block))
        return "".join(
            etree.tostring(element, encoding="unicode", method="html")
            for element in container
        )

    def _render_block(self, block: Block):
        if block.type == "heading":
            element = etree.Element(f"h{block.level or 1}")
            _write_runs(element, block.runs)
        elif block.type == "blockquote":
            element = etree.Element("blockquote")
            _write_runs(etree.SubElement(element, "p"), block.runs)
        elif block.type == "code_block":
            element = etree.Element("pre")
            etree.SubElement(element, "code").text = block.text
        elif block.type == "image":
            element = etree.Element("img", src=block.src or "")
            if block.alt:
                element.set("alt", block.alt)
            if block.title:
                element.set("title", block.title)
        elif block.type == "video":
            element = etree.Element(
                "video", src=block.src or "", controls="controls", preload="metadata"
            )
            element.text = VIDEO_FALLBACK
        else:
            element = etree.Element("p")
            _write_runs(element, block.runs)
        _set_align(element, block.align)
        return element

    def get_text(self) -> str:
        """Plain-text projection: text blocks joined by a blank line."""
        return "\n\n".join(block.text for block in self.blocks if not block.is_media)

    @property
    def is_empty(self) -> bool:
        return not any(block.text.strip() or block.is_media for block in self.blocks)

    # -- selection and queries ---------------------------------------------

    @property
    def current_block(self) -> Block | None:
        if not self.blocks:
            return None
        return self.blocks[self.selection.block]

    def set_selection(self, block: int, start: int, end: int | None = None) -> Selection:
        """Move the selection, clamped to the document."""
        self._stored_style = None
        if not self.blocks:
            self.selection = Selection()
            return self.selection
        block = min(max(block, 0), len(self.blocks) - 1)
        length = len(self.blocks[block].text)
        start = min(max(start, 0), length)
        end = start if end is None else min(max(end, 0), length)
        if end < start:
            start, end = end, start
        self.selection = Selection(block=block, start=start, end=end)
        return self.selection

    def select_block(self, block: int) -> Selection:
        """Select the whole text of a block."""
        return self.set_selection(block, 0, len(self.blocks[block].text) if self.blocks else 0)

    def move_to_end(self) -> Selection:
        if not self.blocks:
            return self.set_selection(0, 0)
        last = len(self.blocks) - 1
        return self.set_selection(last, len(self.blocks[last].text))

    def _runs_in(self, block: Block, start: int, end: int) -> Iterator[Run]:
        position = 0
        for run in block.runs:
            run_end = position + len(run.text)
            if run_end > start and position < end:
                yield run
            position = run_end

    def _style_at(self, block: Block, offset: int) -> Run:
        """Formatting of the character before offset; links never extend."""
        position = 0
        found = None
        for run in block.runs:
            if not run.text:
                continue
            found = run
            position += len(run.text)
            if position >= offset:
                break
        if found is None:
            return Run()
        return Run(marks=found.marks, color=found.color)

    def _typing_style(self, block: Block) -> Run:
        if block.type == "code_block":
            return Run()
        if self._stored_style is not None:
            return self._stored_style
        return self._style_at(block, self.selection.start)

    def _text_block(self) -> Block | None:
        block = self.current_block
        if block is None or block.is_media:
            return None
        return block

    def is_mark_active(self, mark: str) -> bool:
        """Whether mark applies at the caret or over the whole selection."""
        block = self._text_block()
        if block is None:
            return False
        selection = self.selection
        if selection.empty:
            return mark in self._typing_style(block).marks
        runs = list(self._runs_in(block, selection.start, selection.end))
        return bool(runs) and all(mark in run.marks for run in runs)

    def is_block_active(self, block_type: str, **attrs) -> bool:
        """Whether the selected block has block_type and the given attributes.

        Example:
            document.is_block_active("heading", level=2)
        """
        block = self.current_block
        if block is None or block.type != block_type:
            return False
        return all(getattr(block, name) == value for name, value in attrs.items())

    @property
    def alignment(self) -> Align:
        block = self.current_block
        return (block.align if block else None) or "left"

    # -- mutations ---------------------------------------------------------

    def _split(self, block: Block, offset: int) -> int:
        """Split the run containing offset; return the index of the run starting there."""
        position = 0
        for i, run in enumerate(block.runs):
            if offset == position:
                return i
            run_end = position + len(run.text)
            if offset < run_end:
                cut = offset - position
                block.runs[i : i + 1] = [
                    run.with_text(run.text[:cut]),
                    run.with_text(run.text[cut:]),
                ]
                return i + 1
            position = run_end
        return len(block.runs)

    def _restyle_selection(self, block: Block, **update) -> None:
        start = self._split(block, self.selection.start)
        end = self._split(block, self.selection.end)
        for i in range(start, end):
            block.runs[i] = block.runs[i].model_copy(update=update)
        block.runs = _merge_runs(block.runs)

    def _ensure_text_block(self) -> Block:
        """Block that receives typed text, creating a paragraph if needed."""
        if not self.blocks:
            self.blocks.append(Block())
            self.selection = Selection()
        block = self.blocks[self.selection.block]
        if block.is_media:
            index = self.selection.block + 1
            self.blocks.insert(index, Block())
            self.selection = Selection(block=index)
            block = self.blocks[index]
        return block

    def insert_text(self, text: str, style: Run | None = None) -> bool:
        """Replace the selection with text and put the caret after it."""
        text = clean_text(text or "")
        if not text:
            return False
        block = self._ensure_text_block()
        if style is None:
            style = self._typing_style(block)
        start = self._split(block, self.selection.start)
        end = self._split(block, self.selection.end)
        block.runs[start:end] = [style.with_text(text)]
        block.runs = _merge_runs(block.runs)
        caret = self.selection.start + len(text)
        self.set_selection(self.selection.block, caret)
        return True

    def toggle_mark(self, mark: str) -> bool:
        if mark not in MARKS:
            raise ValueError(f"Unknown mark: {mark}")
        block = self._text_block()
        if block is None or block.type == "code_block":
            return False
        active = self.is_mark_active(mark)
        if self.selection.empty:
            style = self._typing_style(block)
            marks = style.marks - {mark} if active else style.marks | {mark}
            self._stored_style = style.model_copy(update={"marks": frozenset(marks)})
            return False
        start = self._split(block, self.selection.start)
        end = self._split(block, self.selection.end)
        for i in range(start, end):
            run = block.runs[i]
            marks = run.marks - {mark} if active else run.marks | {mark}
            block.runs[i] = run.model_copy(update={"marks": frozenset(marks)})
        block.runs = _merge_runs(block.runs)
        return True

    def set_color(self, color: str | None) -> bool:
        """Color the selection; None removes the color."""
        block = self._text_block()
        if block is None or block.type == "code_block":
            return False
        if self.selection.empty:
            style = self._typing_style(block)
            self._stored_style = style.model_copy(update={"color": color})
            return False
        self._restyle_selection(block, color=color)
        return True

    def set_link(
        self,
        href: str,
        rel: str | None = None,
        target: str | None = None,
        text: str | None = None,
    ) -> bool:
        """Link the selection, or insert linked text at the caret.

        With a collapsed selection and no text, the URL itself is inserted
        as the link text.
        """
        href = clean_text(href or "").strip()
        if not href:
            return False
        link = Link(
            href=href,
            rel=clean_text(rel) if rel else None,
            target=clean_text(target) if target else None,
        )
        if text or self.selection.empty or self._text_block() is None:
            block = self._ensure_text_block()
            style = self._typing_style(block).model_copy(update={"link": link})
            return self.insert_text(text or href, style)
        self._restyle_selection(self._text_block(), link=link)
        return True

    def toggle_block(self, block_type: str, **attrs) -> bool:
        """Turn the selected block into block_type, or back into a paragraph."""
        block = self._text_block()
        if block is None:
            return False
        if self.is_block_active(block_type, **attrs):
            block.type, block.level, block.list_kind = "paragraph", None, None
            return True
        block.type = block_type
        block.level = attrs.get("level") if block_type == "heading" else None
        block.list_kind = attrs.get("list_kind") if block_type == "list_item" else None
        if block_type == "code_block":
            block.runs = [Run(text=block.text)] if block.text else []
        return True

    def set_align(self, align: Align) -> bool:
        if align not in ("left", "center", "right"):
            raise ValueError(f"Unknown alignment: {align}")
        block = self.current_block
        if block is None:
            return False
        value = None if align == "left" else align
        if block.align == value:
            return False
        block.align = value
        return True

    def insert_media(self, media: Block) -> bool:
        """Insert an image or video block at the selection.

        An empty text block at the caret is replaced; otherwise the media
        goes after the selected block. The caret moves onto the media block.
        """
        if not media.is_media or not media.src:
            return False
        if not self.blocks:
            self.blocks.append(media)
            index = 0
        else:
            index = self.selection.block
            current = self.blocks[index]
            if current.is_media or current.text:
                index += 1
                self.blocks.insert(index, media)
            else:
                self.blocks[index] = media
        self._stored_style = None
        self.selection = Selection(block=index)
        return True
