"""Editing surface: the state machine around one EditorDocument.

    UNINITIALIZED --initialize()--> READY --open_modal()--> MODAL_OPEN
                                      ^                         |
                                      +--confirm() / cancel()---+

Every document mutation serializes the document once and feeds two
independent debouncers: a fast one calling on_change(markup) for
persistence, and a slower one handing the markup to the SEO analyzer.
"""

import logging
import threading
from enum import Enum
from typing import Callable

from epropulse.scheduling import DebounceScope, TimerFactory
from epropulse.seo.analyzer import EMPTY_STATS, SEOAnalyzer
from epropulse.seo.indicators import classify
from schemas.seo import Indicator, SEOStats, SEOThresholds

from .commands import dispatch
from .document import EditorDocument
from .modals import ModalForm, ModalKind
from .toolbar import COLOR_PALETTE, all_buttons, find_button

logger = logging.getLogger(__name__)

CHANGE_DELAY_MS = 300
SEO_DELAY_MS = 500


class SurfaceState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    MODAL_OPEN = "modal_open"


class EditingSurface:
    """Rich-text editing surface with toolbar, modals and live SEO stats.

    Commands issued before initialize() or after close() are no-ops, as
    are toolbar commands while a modal covers the toolbar.

    Attributes:
        document: The document, None until initialized
        modal: The open modal form, if any
        stats: Latest SEO statistics
        on_change: Called with the serialized markup after edits settle
        on_stats: Called with fresh SEOStats after analysis
    """

    def __init__(
        self,
        on_change: Callable[[str], None] | None = None,
        on_stats: Callable[[SEOStats], None] | None = None,
        change_delay_ms: float = CHANGE_DELAY_MS,
        seo_delay_ms: float = SEO_DELAY_MS,
        thresholds: SEOThresholds | None = None,
        timer_factory: TimerFactory = threading.Timer,
    ):
        self.on_change = on_change
        self.on_stats = on_stats
        self.thresholds = thresholds
        self.document: EditorDocument | None = None
        self.modal: ModalForm | None = None
        self.stats: SEOStats = EMPTY_STATS
        self._scope = DebounceScope(timer_factory)
        self._notify_change = self._scope.debounce(self._emit_change, change_delay_ms)
        self.analyzer = SEOAnalyzer(delay_ms=seo_delay_ms, timer_factory=timer_factory)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    @property
    def state(self) -> SurfaceState:
        if self.document is None:
            return SurfaceState.UNINITIALIZED
        if self.modal is not None:
            return SurfaceState.MODAL_OPEN
        return SurfaceState.READY

    @property
    def closed(self) -> bool:
        return self._scope.closed

    @property
    def indicators(self) -> list[Indicator]:
        return classify(self.stats, self.thresholds)

    def initialize(self, initial_content: str | None = "") -> bool:
        """Create the document from initial markup and schedule its analysis."""
        if self.closed:
            return False
        if self.document is not None:
            logger.warning("Editing surface already initialized")
            return False
        self.document = EditorDocument.from_html(initial_content)
        self.document.move_to_end()
        self.analyzer.analyze_later(
            self.document.to_html(), self.document.get_text(), self._receive_stats
        )
        return True

    def _accepts_edits(self) -> bool:
        return self.document is not None and not self.closed

    def invoke_command(self, command_id: str, **params) -> bool:
        """Apply a toolbar command to the document.

        Returns:
            True if the document content changed
        """
        if not self._accepts_edits():
            logger.debug(f"Ignoring {command_id}: no document")
            return False
        if self.modal is not None:
            logger.debug(f"Ignoring {command_id}: {self.modal.kind.value} modal is open")
            return False
        changed = dispatch(self.document, command_id, **params)
        if changed:
            self._changed()
        return changed

    def apply_color(self, color: str) -> bool:
        if color not in COLOR_PALETTE:
            logger.warning(f"Color {color} is not in the palette")
        return self.invoke_command("color", color=color)

    def press(self, button_id: str) -> bool:
        """Handle a click on a toolbar button."""
        button = find_button(button_id)
        if button is None:
            logger.warning(f"Unknown toolbar button: {button_id}")
            return False
        if button.modal is not None:
            return self.open_modal(button.modal) is not None
        return self.invoke_command(button.command, **button.params)

    def type_text(self, text: str) -> bool:
        """Insert typed text at the selection."""
        if not self._accepts_edits() or self.modal is not None:
            return False
        changed = self.document.insert_text(text)
        if changed:
            self._changed()
        return changed

    def select(self, block: int, start: int, end: int | None = None) -> None:
        if self._accepts_edits():
            self.document.set_selection(block, start, end)

    def toolbar_state(self) -> dict[str, bool]:
        """Highlight flag of every toolbar button, keyed by button id."""
        return {button.id: button.is_active(self.document) for button in all_buttons()}

    # -- modals ------------------------------------------------------------

    def open_modal(self, kind: ModalKind | str) -> ModalForm | None:
        """Open an insertion modal, discarding any other open one."""
        if not self._accepts_edits():
            return None
        if self.modal is not None:
            logger.debug(f"Replacing open {self.modal.kind.value} modal")
        self.modal = ModalForm(kind)
        return self.modal

    def set_field(self, name: str, value: str) -> bool:
        if self.modal is None:
            return False
        return self.modal.set_field(name, value)

    def can_confirm(self) -> bool:
        return self.modal is not None and self.modal.can_confirm()

    def confirm(self) -> bool:
        """Insert the modal's content and close it.

        An invalid form keeps the modal open and leaves the document alone.
        """
        if self.modal is None or not self._accepts_edits():
            return False
        command = self.modal.to_command()
        if command is None:
            return False
        self.modal = None
        if command.apply(self.document):
            self._changed()
        return True

    def cancel(self) -> None:
        """Close the modal, discarding its input."""
        self.modal = None

    def handle_key(self, key: str) -> bool:
        if key == "Escape" and self.modal is not None:
            self.cancel()
            return True
        return False

    def click_outside(self) -> None:
        self.cancel()

    # -- change propagation ------------------------------------------------

    def flush(self) -> None:
        """Run pending change and analysis callbacks now."""
        self._notify_change.flush()
        self.analyzer.flush()

    def close(self) -> None:
        """Tear the surface down, dropping every pending callback."""
        self._scope.close()
        self.analyzer.close()
        self.modal = None

    def _changed(self) -> None:
        markup = self.document.to_html()
        self._notify_change(markup)
        self.analyzer.analyze_later(markup, self.document.get_text(), self._receive_stats)

    def _emit_change(self, markup: str) -> None:
        if self.on_change is not None and not self.closed:
            self.on_change(markup)

    def _receive_stats(self, stats: SEOStats) -> None:
        if self.closed:
            return
        self.stats = stats
        if self.on_stats is not None:
            self.on_stats(stats)
