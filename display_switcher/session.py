"""
Mode-selection session: the transient window plus its two timers.

A session is opened when a probe finds an external display. While it is
open the user can hover a button (highlight only), click one (apply it
now) or press the hotkey repeatedly to cycle through the modes; the last
cycled mode is applied automatically once the hotkey stops being pressed.
Without any interaction the session closes on its own and nothing is
applied.

All handlers run on the main loop, so no locking is needed, but every
handler checks that the session is still open since a timer or a file
event may arrive after another path already closed it.
"""
import logging
from enum import Enum
from typing import Any, Callable, Optional, Protocol

from .modes import MODE_CYCLE, Mode
from .scale import WindowLayout

INACTIVITY_SECONDS = 5
AUTO_APPLY_SECONDS = 2

logger = logging.getLogger(__name__)


class Scheduler(Protocol):
    def call_later(self, seconds: int, callback: Callable[[], None]) -> Any: ...

    def cancel(self, handle: Any) -> None: ...


class SessionView(Protocol):
    def show(self) -> None: ...

    def highlight(self, mode: Mode) -> None: ...

    def destroy(self) -> None: ...


# (layout, on_hover, on_click, on_dismiss) -> view
ViewFactory = Callable[
    [WindowLayout, Callable[[Mode], None], Callable[[Mode], None], Callable[[], None]],
    SessionView,
]


class SessionState(Enum):
    CLOSED = "closed"
    OPEN_NO_SELECTION = "open-no-selection"
    OPEN_SELECTED = "open-selected"


class Session:
    def __init__(
        self,
        scheduler: Scheduler,
        view_factory: ViewFactory,
        dispatch: Callable[[Mode], None],
        inactivity_seconds: int = INACTIVITY_SECONDS,
        auto_apply_seconds: int = AUTO_APPLY_SECONDS,
    ):
        self._scheduler = scheduler
        self._view_factory = view_factory
        self._dispatch = dispatch
        self.inactivity_seconds = inactivity_seconds
        self.auto_apply_seconds = auto_apply_seconds

        self._view: Optional[SessionView] = None
        self._first_open = True
        self._highlighted: Optional[Mode] = None
        self.selected_index: Optional[int] = None
        self.armed_mode: Optional[Mode] = None
        self._inactivity_handle = None
        self._auto_apply_handle = None

    @property
    def is_open(self) -> bool:
        return self._view is not None

    @property
    def state(self) -> SessionState:
        if not self.is_open:
            return SessionState.CLOSED
        if self._highlighted is None:
            return SessionState.OPEN_NO_SELECTION
        return SessionState.OPEN_SELECTED

    @property
    def highlighted(self) -> Optional[Mode]:
        return self._highlighted

    @property
    def inactivity_pending(self) -> bool:
        return self._inactivity_handle is not None

    @property
    def auto_apply_pending(self) -> bool:
        return self._auto_apply_handle is not None

    def open(self, layout: WindowLayout) -> bool:
        """Show the mode window. Returns False if a session is already open."""
        if self._view is not None or not self._first_open:
            logger.debug("Session already open, ignoring")
            return False

        logger.info(
            "Monitor width: %d, height: %d", layout.monitor_width, layout.monitor_height
        )
        view = self._view_factory(layout, self.hover, self.click, self.close)
        try:
            view.show()
        except Exception:
            view.destroy()
            raise
        self._view = view
        self._first_open = False
        self._reset_inactivity()
        return True

    def hover(self, mode: Mode):
        if not self.is_open:
            return
        self._reset_inactivity()
        self._highlight(mode)
        # Pointer interaction takes over from a queued keyboard selection
        if self._cancel_auto_apply():
            logger.info("[AUTO] Keyboard selection cancelled by pointer interaction")

    def cycle(self):
        """Advance the keyboard selection and arm it for auto-apply."""
        if not self.is_open:
            return
        self._cancel_auto_apply()

        if self.selected_index is None:
            self.selected_index = 0
        else:
            self.selected_index = (self.selected_index + 1) % len(MODE_CYCLE)
        mode = MODE_CYCLE[self.selected_index]
        self.armed_mode = mode
        self._highlight(mode)
        self._reset_inactivity()

        self._auto_apply_handle = self._scheduler.call_later(
            self.auto_apply_seconds, lambda: self._on_auto_apply(mode)
        )
        logger.debug("Armed %s for auto-apply in %ds", mode.value, self.auto_apply_seconds)

    def click(self, mode: Mode):
        if not self.is_open:
            return
        logger.info("Button clicked: %s", mode.value)
        self._cancel_auto_apply()
        self._dispatch(mode)
        self.close()

    def close(self):
        """Tear the session down. Safe to call on a closed session."""
        self._cancel_inactivity()
        self._cancel_auto_apply()

        view, self._view = self._view, None
        if view is not None:
            view.destroy()
            logger.debug("Session closed")

        self._highlighted = None
        self.selected_index = None
        self.armed_mode = None
        self._first_open = True

    def _highlight(self, mode: Mode):
        self._highlighted = mode
        self._view.highlight(mode)

    def _on_auto_apply(self, mode: Mode):
        self._auto_apply_handle = None
        if self.is_open and self.armed_mode == mode:
            logger.info("[AUTO] Mode %s applied automatically", mode.value)
            self._dispatch(mode)
            self.close()

    def _on_inactivity(self):
        self._inactivity_handle = None
        if not self.is_open:
            return
        logger.info("No interaction for %ds, closing", self.inactivity_seconds)
        self.close()

    def _reset_inactivity(self):
        self._cancel_inactivity()
        self._inactivity_handle = self._scheduler.call_later(
            self.inactivity_seconds, self._on_inactivity
        )

    def _cancel_inactivity(self) -> bool:
        handle, self._inactivity_handle = self._inactivity_handle, None
        if handle is None:
            return False
        self._scheduler.cancel(handle)
        return True

    def _cancel_auto_apply(self) -> bool:
        handle, self._auto_apply_handle = self._auto_apply_handle, None
        if handle is None:
            return False
        self._scheduler.cancel(handle)
        return True
