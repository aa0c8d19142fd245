"""Toolbar layout: button groups, labels, shortcuts and the color palette.

Buttons know which command or modal they trigger. Highlighting is computed
from the document through the command's is_active(); it never decides
whether a button can be pressed.
"""

from pydantic import BaseModel

from .commands import make_command
from .document import EditorDocument
from .modals import ModalKind

COLOR_PALETTE = ("#000000", "#3b82f6", "#ef4444", "#22c55e", "#f59e0b", "#a855f7")


class ToolbarButtonSpec(BaseModel):
    """One toolbar button.

    Attributes:
        id: Stable identifier used by EditingSurface.press()
        label: French label, also the accessible name
        icon: Icon name
        shortcut: Keyboard shortcut shown in the title
        command: Command id applied on press
        params: Parameters for the command
        modal: Modal opened on press instead of a command
    """

    id: str
    label: str
    icon: str
    shortcut: str | None = None
    command: str | None = None
    params: dict = {}
    modal: ModalKind | None = None

    model_config = {"frozen": True}

    @property
    def title(self) -> str:
        return button_title(self)

    def is_active(self, document: EditorDocument | None) -> bool:
        if document is None or self.command is None:
            return False
        return make_command(self.command, **self.params).is_active(document)


class ToolbarGroup(BaseModel):
    name: str
    buttons: tuple[ToolbarButtonSpec, ...]

    model_config = {"frozen": True}


def button_title(button: ToolbarButtonSpec) -> str:
    """Tooltip text: the label, followed by the shortcut when there is one."""
    if button.shortcut:
        return f"{button.label} ({button.shortcut})"
    return button.label


def color_title(color: str) -> str:
    return f"Couleur {color}"


BUTTON_GROUPS: tuple[ToolbarGroup, ...] = (
    ToolbarGroup(
        name="format",
        buttons=(
            ToolbarButtonSpec(id="bold", label="Gras", icon="bold", shortcut="Ctrl+B", command="bold"),
            ToolbarButtonSpec(
                id="italic", label="Italique", icon="italic", shortcut="Ctrl+I", command="italic"
            ),
            ToolbarButtonSpec(
                id="underline",
                label="Souligné",
                icon="underline",
                shortcut="Ctrl+U",
                command="underline",
            ),
        ),
    ),
    ToolbarGroup(
        name="headings",
        buttons=tuple(
            ToolbarButtonSpec(
                id=f"heading{level}",
                label=f"Titre H{level}",
                icon=f"heading-{level}",
                command="heading",
                params={"level": level},
            )
            for level in (1, 2, 3)
        ),
    ),
    ToolbarGroup(
        name="blocks",
        buttons=(
            ToolbarButtonSpec(
                id="bullet_list", label="Liste à puces", icon="list", command="bullet_list"
            ),
            ToolbarButtonSpec(
                id="ordered_list",
                label="Liste numérotée",
                icon="list-ordered",
                command="ordered_list",
            ),
            ToolbarButtonSpec(id="blockquote", label="Citation", icon="quote", command="blockquote"),
            ToolbarButtonSpec(
                id="code_block", label="Bloc de code", icon="code", command="code_block"
            ),
        ),
    ),
    ToolbarGroup(
        name="align",
        buttons=(
            ToolbarButtonSpec(
                id="align_left",
                label="Aligner à gauche",
                icon="align-left",
                command="align",
                params={"align": "left"},
            ),
            ToolbarButtonSpec(
                id="align_center",
                label="Centrer",
                icon="align-center",
                command="align",
                params={"align": "center"},
            ),
            ToolbarButtonSpec(
                id="align_right",
                label="Aligner à droite",
                icon="align-right",
                command="align",
                params={"align": "right"},
            ),
        ),
    ),
    ToolbarGroup(
        name="media",
        buttons=(
            ToolbarButtonSpec(id="link", label="Insérer un lien", icon="link", modal=ModalKind.LINK),
            ToolbarButtonSpec(
                id="image", label="Insérer une image", icon="image", modal=ModalKind.IMAGE
            ),
            ToolbarButtonSpec(
                id="video", label="Insérer une vidéo", icon="video", modal=ModalKind.VIDEO
            ),
        ),
    ),
)


def all_buttons() -> list[ToolbarButtonSpec]:
    return [button for group in BUTTON_GROUPS for button in group.buttons]


def find_button(button_id: str) -> ToolbarButtonSpec | None:
    for button in all_buttons():
        if button.id == button_id:
            return button
    return None
