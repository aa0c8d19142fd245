"""Rich-text editing surface: document model, commands, toolbar and modals."""

from .commands import (
    COMMANDS,
    Command,
    InsertImage,
    InsertLink,
    InsertVideo,
    SetAlign,
    SetColor,
    ToggleBlockquote,
    ToggleCodeBlock,
    ToggleHeading,
    ToggleList,
    ToggleMark,
    dispatch,
    make_command,
)
from .document import Block, EditorDocument, Link, Run, Selection
from .modals import ModalForm, ModalKind, is_valid_url
from .persistence import StorePersistence
from .surface import EditingSurface, SurfaceState
from .toolbar import BUTTON_GROUPS, COLOR_PALETTE, ToolbarButtonSpec, ToolbarGroup, button_title

__all__ = [
    "BUTTON_GROUPS",
    "COLOR_PALETTE",
    "COMMANDS",
    "Block",
    "Command",
    "EditingSurface",
    "EditorDocument",
    "InsertImage",
    "InsertLink",
    "InsertVideo",
    "Link",
    "ModalForm",
    "ModalKind",
    "Run",
    "Selection",
    "SetAlign",
    "SetColor",
    "StorePersistence",
    "SurfaceState",
    "ToggleBlockquote",
    "ToggleCodeBlock",
    "ToggleHeading",
    "ToggleList",
    "ToggleMark",
    "ToolbarButtonSpec",
    "ToolbarGroup",
    "button_title",
    "dispatch",
    "is_valid_url",
    "make_command",
]
