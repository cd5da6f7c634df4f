import logging
from typing import Callable, Optional, Protocol, Tuple

from .prober import ConnectorProber
from .scale import layout_for
from .session import Session

logger = logging.getLogger(__name__)

NOT_CONNECTED_TITLE = "HDMI not connected."
NOT_CONNECTED_BODY = "You must have HDMI connected."
NOT_CONNECTED_ICON = "dialog-information"


class Watch(Protocol):
    def watch(self, path: str, on_change: Callable[[], None]) -> bool: ...

    def destroy(self) -> None: ...


class DisplaySwitcherController:
    """
    Ties the prober, the event-file watch and the session together.

    ``enable()`` starts watching the event file, ``disable()`` undoes
    everything; the hotkey and file events come in through ``on_hotkey()``
    and ``on_file_change()``.
    """

    def __init__(
        self,
        prober: ConnectorProber,
        session: Session,
        watch_factory: Callable[[], Watch],
        event_path: str,
        is_locked: Callable[[], bool],
        notify: Callable[[str, str, str], None],
        display_size: Callable[[], Tuple[int, int]],
    ):
        self.prober = prober
        self.session = session
        self.event_path = event_path
        self._watch_factory = watch_factory
        self._is_locked = is_locked
        self._notify = notify
        self._display_size = display_size
        self._watch: Optional[Watch] = None

    def enable(self):
        if self._watch is not None:
            return
        self._watch = self._watch_factory()
        try:
            self._watch.watch(self.event_path, self.on_file_change)
        except Exception as e:
            logger.error("Error watching %s: %s", self.event_path, e)

    def disable(self):
        self.session.close()
        if self._watch is not None:
            self._watch.destroy()
            self._watch = None

    def on_hotkey(self):
        if self.session.is_open:
            self.session.cycle()
            return
        self.check_connection()
        # The press that opened the window also selects the first mode
        if self.session.is_open:
            self.session.cycle()

    def on_file_change(self):
        if self._is_locked():
            logger.info("[Monitor] Ignoring event - screen locked")
            return
        self.check_connection()

    def check_connection(self) -> bool:
        connected = self.prober.probe()
        self.on_probe_result(connected)
        return connected

    def on_probe_result(self, connected: bool):
        if connected:
            width, height = self._display_size()
            try:
                self.session.open(layout_for(width, height))
            except Exception as e:
                logger.error("Could not show the mode window: %s", e)
            return

        self.session.close()
        logger.info("HDMI not connected")
        try:
            self._notify(NOT_CONNECTED_TITLE, NOT_CONNECTED_BODY, NOT_CONNECTED_ICON)
        except Exception as e:
            logger.warning("Notification failed: %s", e)
