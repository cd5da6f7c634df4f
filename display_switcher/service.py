#!/usr/bin/env python3
"""
Display switcher service.

Usage:
  display-switcher            # watch the event file and wait for the hotkey
  display-switcher --now      # probe the connectors once and exit
  display-switcher --status   # print connector states and the current mode
  display-switcher --hotkey   # send the hotkey to the running service
  display-switcher --apply join  # run the mutator for one mode and exit
  display-switcher --debug    # verbose logging
"""
import argparse
import logging
import sys
from typing import Optional

import gi

gi.require_version("Gio", "2.0")
from gi.repository import Gio, GLib

from .controller import DisplaySwitcherController
from .desktop import DesktopNotifier, DisplayConfig, GLibScheduler, ScreenSaver, session_proxy, spawn_mutator
from .dispatcher import ModeDispatcher, mutator_argv
from .log import setup_logging
from .modes import Mode
from .prober import ConnectorProber
from .session import Session
from .settings import Settings, SettingsFile
from .view import ModeWindow
from .watch import FileWatch

BUS_NAME = "io.github.DisplaySwitcher"
OBJECT_PATH = "/io/github/DisplaySwitcher"
INTERFACE_NAME = "io.github.DisplaySwitcher"

INTROSPECTION_XML = f"""
<node>
  <interface name="{INTERFACE_NAME}">
    <method name="Hotkey"/>
    <method name="Close"/>
  </interface>
</node>
"""

logger = logging.getLogger(__name__)


class DisplaySwitcherService:
    def __init__(self, settings: Settings):
        self.settings = settings
        self.prober = ConnectorProber(settings.drm_path)
        self.display_config = DisplayConfig()
        self.screensaver = ScreenSaver()
        self.notifier = DesktopNotifier()

        self.dispatcher = ModeDispatcher(self._invoke_mutator)
        self.session = Session(GLibScheduler(), ModeWindow, self.dispatcher.dispatch)
        self.dispatcher.on_dispatched = self.session.close
        self.controller = DisplaySwitcherController(
            prober=self.prober,
            session=self.session,
            watch_factory=FileWatch,
            event_path=settings.event_path,
            is_locked=self.screensaver.is_locked,
            notify=self.notifier.notify,
            display_size=self.display_config.primary_size,
        )

        self.loop: Optional[GLib.MainLoop] = None
        self._owner_id = 0
        self._registration_id = 0
        self._node_info = Gio.DBusNodeInfo.new_for_xml(INTROSPECTION_XML)

    def _invoke_mutator(self, mode: Mode):
        spawn_mutator(mutator_argv(self.settings.mutator_command, mode))

    def _on_bus_acquired(self, connection: Gio.DBusConnection, name: str):
        self._registration_id = connection.register_object(
            OBJECT_PATH,
            self._node_info.interfaces[0],
            self._on_method_call,
            None,
            None,
        )

    def _on_name_lost(self, connection, name):
        logger.error("Could not own %s - is another instance running?", name)
        if self.loop is not None:
            self.loop.quit()

    def _on_method_call(self, connection, sender, object_path, interface_name,
                        method_name, parameters, invocation):
        if method_name == "Hotkey":
            self.controller.on_hotkey()
        elif method_name == "Close":
            self.session.close()
        invocation.return_value(None)

    def start_monitoring(self):
        try:
            connection = Gio.bus_get_sync(Gio.BusType.SESSION, None)
        except GLib.Error as e:
            logger.error("ERROR: cannot connect to the session bus: %s", e.message)
            sys.exit(1)

        self.controller.enable()
        self._owner_id = Gio.bus_own_name_on_connection(
            connection,
            BUS_NAME,
            Gio.BusNameOwnerFlags.NONE,
            None,
            self._on_name_lost,
        )
        self._on_bus_acquired(connection, BUS_NAME)
        logger.info("Monitoring started. Press Ctrl+C to stop.")

        self.loop = GLib.MainLoop()
        try:
            self.loop.run()
        except KeyboardInterrupt:
            logger.info("Shutting down...")
        finally:
            self.stop(connection)

    def stop(self, connection: Optional[Gio.DBusConnection] = None):
        self.controller.disable()
        if connection is not None and self._registration_id:
            connection.unregister_object(self._registration_id)
            self._registration_id = 0
        if self._owner_id:
            Gio.bus_unown_name(self._owner_id)
            self._owner_id = 0
        if self.loop is not None and self.loop.is_running():
            self.loop.quit()

    def check_once(self) -> bool:
        connected = self.prober.probe()
        print("True" if connected else "False")
        return connected

    def print_status(self):
        connectors = self.prober.list_connectors()
        if not connectors:
            print(f"No HDMI/DisplayPort connectors under {self.settings.drm_path}")
        for connector in connectors:
            state = "connected" if connector.connected else "disconnected"
            print(f"{connector.name:<16} {connector.kind.value:<12} {state}")
        print(f"Current mode: {self.display_config.current_mode()}")


def send_hotkey() -> int:
    try:
        proxy = session_proxy(BUS_NAME, OBJECT_PATH, INTERFACE_NAME)
        proxy.call_sync("Hotkey", None, Gio.DBusCallFlags.NO_AUTO_START, -1, None)
    except GLib.Error as e:
        print(f"Display switcher service is not running: {e.message}", file=sys.stderr)
        return 1
    return 0


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="HDMI/DP display mode switcher")
    group = p.add_mutually_exclusive_group()
    group.add_argument("--now", action="store_true", help="Probe the connectors once and exit")
    group.add_argument("--status", action="store_true", help="Show connector states and the current mode")
    group.add_argument("--hotkey", action="store_true", help="Send the hotkey to the running service")
    group.add_argument("--apply", type=Mode.from_argument, metavar="MODE",
                       help="Apply internal, external, join or mirror and exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    if args.hotkey:
        sys.exit(send_hotkey())

    settings = SettingsFile().load()
    setup_logging(debug=args.debug, log_file=settings.log_file)
    service = DisplaySwitcherService(settings)

    if args.now:
        service.check_once()
        sys.exit(0)
    elif args.apply is not None:
        service.dispatcher.dispatch(args.apply)
        sys.exit(0)
    elif args.status:
        service.print_status()
        sys.exit(0)
    else:
        service.start_monitoring()


if __name__ == "__main__":
    main()
