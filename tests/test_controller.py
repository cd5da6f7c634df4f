import pytest

from display_switcher.controller import (
    NOT_CONNECTED_BODY,
    NOT_CONNECTED_TITLE,
    DisplaySwitcherController,
)
from display_switcher.modes import Mode
from display_switcher.session import AUTO_APPLY_SECONDS, INACTIVITY_SECONDS


class ProberStub:
    def __init__(self, connected: bool = True) -> None:
        self.connected = connected
        self.calls = 0

    def probe(self) -> bool:
        self.calls += 1
        return self.connected


class WatchStub:
    def __init__(self) -> None:
        self.path = None
        self.callback = None
        self.destroyed = 0

    def watch(self, path, on_change) -> bool:
        self.path = path
        self.callback = on_change
        return True

    def destroy(self) -> None:
        self.destroyed += 1


class Harness:
    def __init__(self, session, connected=True, locked=False) -> None:
        self.prober = ProberStub(connected)
        self.locked = locked
        self.notifications = []
        self.watches = []
        self.controller = DisplaySwitcherController(
            prober=self.prober,
            session=session,
            watch_factory=self._new_watch,
            event_path="/opt/hdmi-events",
            is_locked=lambda: self.locked,
            notify=lambda *args: self.notifications.append(args),
            display_size=lambda: (1920, 1200),
        )

    def _new_watch(self) -> WatchStub:
        watch = WatchStub()
        self.watches.append(watch)
        return watch


@pytest.fixture
def harness(session) -> Harness:
    return Harness(session)


def test_enable_watches_event_path_and_disable_tears_down(harness, session) -> None:
    harness.controller.enable()
    harness.controller.enable()
    assert len(harness.watches) == 1
    watch = harness.watches[0]
    assert watch.path == "/opt/hdmi-events"

    harness.controller.on_probe_result(True)
    harness.controller.disable()
    harness.controller.disable()

    assert watch.destroyed == 1
    assert session.is_open is False


def test_first_hotkey_opens_and_arms_internal(harness, session, scheduler, views) -> None:
    harness.controller.on_hotkey()

    assert session.is_open
    assert views.last.layout.monitor_height == 1200
    assert session.selected_index == 0
    assert session.armed_mode is Mode.INTERNAL
    assert session.auto_apply_pending


def test_second_hotkey_supersedes_first(harness, session, scheduler, mutator_calls) -> None:
    harness.controller.on_hotkey()
    scheduler.advance(1)
    harness.controller.on_hotkey()

    assert harness.prober.calls == 1
    assert session.armed_mode is Mode.EXTERNAL

    scheduler.advance(AUTO_APPLY_SECONDS)
    assert mutator_calls == [Mode.EXTERNAL]
    assert not session.is_open


def test_hotkey_without_display_notifies(harness, session, views) -> None:
    harness.prober.connected = False
    harness.controller.on_hotkey()

    assert views.views == []
    assert harness.notifications == [(NOT_CONNECTED_TITLE, NOT_CONNECTED_BODY, "dialog-information")]


def test_file_change_opens_session_without_selection(harness, session) -> None:
    harness.controller.enable()
    harness.watches[0].callback()

    assert session.is_open
    assert session.selected_index is None
    assert not session.auto_apply_pending


def test_file_change_while_locked_is_dropped(harness, session) -> None:
    harness.locked = True
    harness.controller.enable()
    harness.watches[0].callback()

    assert harness.prober.calls == 0
    assert not session.is_open


def test_repeated_positive_probes_keep_one_session(harness, session, scheduler, views) -> None:
    harness.controller.on_file_change()
    scheduler.advance(3)
    harness.controller.on_file_change()

    assert len(views.views) == 1
    # no refresh of the inactivity timer by the second probe
    scheduler.advance(INACTIVITY_SECONDS - 3)
    assert not session.is_open


def test_disconnect_closes_open_session(harness, session, scheduler, views, mutator_calls) -> None:
    harness.controller.on_hotkey()
    harness.prober.connected = False
    harness.controller.on_file_change()

    assert not session.is_open
    assert views.last.destroyed
    assert scheduler.pending() == []
    assert len(harness.notifications) == 1
    scheduler.advance(10)
    assert mutator_calls == []


def test_notification_failure_is_not_fatal(session) -> None:
    harness = Harness(session, connected=False)

    def broken(*args):
        raise RuntimeError("bus gone")

    harness.controller._notify = broken
    assert harness.controller.check_connection() is False


def test_window_failure_is_logged_and_next_probe_recovers(harness, session, views, caplog) -> None:
    working = session._view_factory

    def broken(*args):
        raise RuntimeError("cannot open display")

    session._view_factory = broken
    harness.controller.on_file_change()
    assert not session.is_open
    assert "Could not show the mode window" in caplog.text

    session._view_factory = working
    harness.controller.on_file_change()
    assert session.is_open
