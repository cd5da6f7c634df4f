"""
GLib main-loop and session-bus adapters used by the service.
"""
import logging
from typing import Any, Callable, List, Optional, Tuple

import gi

gi.require_version("Gio", "2.0")
from gi.repository import Gio, GLib

from .display_state import FALLBACK_SIZE, detect_mode, primary_monitor_size

logger = logging.getLogger(__name__)

DISPLAY_CONFIG_BUS_NAME = "org.gnome.Mutter.DisplayConfig"
DISPLAY_CONFIG_PATH = "/org/gnome/Mutter/DisplayConfig"
SCREENSAVER_BUS_NAME = "org.gnome.ScreenSaver"
SCREENSAVER_PATH = "/org/gnome/ScreenSaver"
NOTIFICATIONS_BUS_NAME = "org.freedesktop.Notifications"
NOTIFICATIONS_PATH = "/org/freedesktop/Notifications"


def session_proxy(name: str, path: str, interface: Optional[str] = None) -> Gio.DBusProxy:
    return Gio.DBusProxy.new_for_bus_sync(
        Gio.BusType.SESSION,
        Gio.DBusProxyFlags.DO_NOT_LOAD_PROPERTIES | Gio.DBusProxyFlags.DO_NOT_CONNECT_SIGNALS,
        None,
        name,
        path,
        interface or name,
        None,
    )


class _Timeout:
    __slots__ = ("source_id", "done")

    def __init__(self):
        self.source_id = 0
        self.done = False


class GLibScheduler:
    """One-shot second timers on the default main context."""

    def call_later(self, seconds: int, callback: Callable[[], None]) -> _Timeout:
        handle = _Timeout()

        def fire():
            handle.done = True
            callback()
            return GLib.SOURCE_REMOVE

        handle.source_id = GLib.timeout_add_seconds(GLib.PRIORITY_DEFAULT, seconds, fire)
        return handle

    def cancel(self, handle: _Timeout):
        if handle.done or not handle.source_id:
            return
        handle.done = True
        GLib.source_remove(handle.source_id)


def spawn_mutator(argv: List[str]):
    """Start the mutator detached; GLib reaps the child."""
    logger.debug("Spawning: %s", " ".join(argv))
    GLib.spawn_async(argv, flags=GLib.SpawnFlags.SEARCH_PATH)


class ScreenSaver:
    def __init__(self):
        self.proxy: Optional[Gio.DBusProxy] = None
        try:
            self.proxy = session_proxy(SCREENSAVER_BUS_NAME, SCREENSAVER_PATH)
        except GLib.Error as e:
            logger.warning("Screensaver unavailable, lock state unknown: %s", e.message)

    def is_locked(self) -> bool:
        if self.proxy is None:
            return False
        try:
            res = self.proxy.call_sync("GetActive", None, Gio.DBusCallFlags.NONE, -1, None)
            return bool(res.unpack()[0])
        except GLib.Error as e:
            logger.warning("Error calling GetActive: %s", e.message)
            return False


class DesktopNotifier:
    def __init__(self, app_name: str = "Display Switcher"):
        self.app_name = app_name
        self.proxy: Optional[Gio.DBusProxy] = None
        try:
            self.proxy = session_proxy(NOTIFICATIONS_BUS_NAME, NOTIFICATIONS_PATH)
        except GLib.Error as e:
            logger.warning("Notification service unavailable: %s", e.message)

    def notify(self, summary: str, body: str, icon: str = ""):
        if self.proxy is None:
            logger.info("%s %s", summary, body)
            return
        params = GLib.Variant(
            "(susssasa{sv}i)", (self.app_name, 0, icon, summary, body, [], {}, -1)
        )
        # Reply is not needed
        self.proxy.call("Notify", params, Gio.DBusCallFlags.NONE, -1, None, None, None)


class DisplayConfig:
    """Read-only view of Mutter's current monitor configuration."""

    def __init__(self):
        self.proxy: Optional[Gio.DBusProxy] = None
        try:
            self.proxy = session_proxy(DISPLAY_CONFIG_BUS_NAME, DISPLAY_CONFIG_PATH)
        except GLib.Error as e:
            logger.warning("Mutter DisplayConfig unavailable: %s", e.message)

    def _get_current_state(self) -> Optional[Any]:
        if self.proxy is None:
            return None
        try:
            res = self.proxy.call_sync(
                "GetCurrentState", None, Gio.DBusCallFlags.NONE, -1, None
            )
            return res.unpack()
        except GLib.Error as e:
            logger.warning("Error calling GetCurrentState: %s", e.message)
            return None

    def current_mode(self) -> str:
        return detect_mode(self._get_current_state())

    def primary_size(self) -> Tuple[int, int]:
        size = primary_monitor_size(self._get_current_state())
        if size is None:
            logger.info("Primary monitor size unknown, assuming %dx%d", *FALLBACK_SIZE)
            return FALLBACK_SIZE
        return size
