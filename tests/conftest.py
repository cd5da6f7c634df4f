import pytest

from display_switcher.dispatcher import ModeDispatcher
from display_switcher.session import Session


class FakeScheduler:
    """Virtual clock: callbacks run when advance() passes their deadline."""

    def __init__(self) -> None:
        self.now = 0
        self.scheduled: list[list] = []
        self.cancelled: list[int] = []
        self._next = 0

    def call_later(self, seconds: int, callback) -> int:
        self._next += 1
        self.scheduled.append([self._next, self.now + seconds, callback])
        return self._next

    def cancel(self, handle: int) -> None:
        self.cancelled.append(handle)
        self.scheduled = [entry for entry in self.scheduled if entry[0] != handle]

    def pending(self) -> list[tuple[int, int]]:
        return [(handle, due) for handle, due, _cb in self.scheduled]

    def advance(self, seconds: int) -> None:
        target = self.now + seconds
        while True:
            due = [entry for entry in self.scheduled if entry[1] <= target]
            if not due:
                break
            entry = min(due, key=lambda e: (e[1], e[0]))
            self.scheduled.remove(entry)
            self.now = entry[1]
            entry[2]()
        self.now = target


class FakeView:
    def __init__(self, layout, on_hover, on_click, on_dismiss) -> None:
        self.layout = layout
        self.on_hover = on_hover
        self.on_click = on_click
        self.on_dismiss = on_dismiss
        self.shown = False
        self.destroyed = False
        self.highlights: list = []

    def show(self) -> None:
        self.shown = True

    def highlight(self, mode) -> None:
        self.highlights.append(mode)

    def destroy(self) -> None:
        self.destroyed = True


class ViewRecorder:
    def __init__(self) -> None:
        self.views: list[FakeView] = []

    def __call__(self, layout, on_hover, on_click, on_dismiss) -> FakeView:
        view = FakeView(layout, on_hover, on_click, on_dismiss)
        self.views.append(view)
        return view

    @property
    def last(self) -> FakeView:
        return self.views[-1]


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def views() -> ViewRecorder:
    return ViewRecorder()


@pytest.fixture
def mutator_calls() -> list:
    return []


@pytest.fixture
def dispatcher(mutator_calls) -> ModeDispatcher:
    return ModeDispatcher(mutator_calls.append)


@pytest.fixture
def session(scheduler, views, dispatcher) -> Session:
    session = Session(scheduler, views, dispatcher.dispatch)
    dispatcher.on_dispatched = session.close
    return session


@pytest.fixture
def drm_tree(tmp_path):
    """Build a fake /sys/class/drm: drm_tree({"card0-HDMI-A-1": "connected"})."""

    def build(entries: dict, root_name: str = "drm"):
        root = tmp_path / root_name
        root.mkdir(exist_ok=True)
        for name, status in entries.items():
            entry = root / name
            entry.mkdir()
            if status is not None:
                (entry / "status").write_text(status)
        return root

    return build
