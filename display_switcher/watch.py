import logging
import os
from typing import Callable, Optional

import gi

gi.require_version("Gio", "2.0")
from gi.repository import Gio

logger = logging.getLogger(__name__)


class FileWatch:
    """
    Calls back once per burst of writes to a file.

    A path missing at ``watch()`` time leaves the watch inactive; it is
    not polled for later, so an event file created after startup needs a
    service restart.
    """

    def __init__(self):
        self._monitor: Optional[Gio.FileMonitor] = None
        self._handler_id = 0
        self._callback: Optional[Callable[[], None]] = None

    @property
    def active(self) -> bool:
        return self._monitor is not None

    def watch(self, path: str, on_change: Callable[[], None]) -> bool:
        self.destroy()
        file = Gio.File.new_for_path(path)
        if not file.query_exists(None):
            logger.warning("[Monitor] File not found: %s", path)
            return False

        self._callback = on_change
        self._monitor = file.monitor(Gio.FileMonitorFlags.NONE, None)
        self._handler_id = self._monitor.connect("changed", self._on_changed)
        logger.info("[Monitor] Watching %s", os.path.abspath(path))
        return True

    def _on_changed(self, monitor, file, other_file, event_type):
        # One CHANGES_DONE_HINT closes each series of CHANGED events
        if event_type != Gio.FileMonitorEvent.CHANGES_DONE_HINT:
            return
        logger.info("[Monitor] Change detected in: %s", file.get_path() if file else "?")
        if self._callback is not None:
            self._callback()

    def destroy(self):
        monitor, self._monitor = self._monitor, None
        if monitor is not None:
            if self._handler_id:
                monitor.disconnect(self._handler_id)
            monitor.cancel()
        self._handler_id = 0
        self._callback = None
