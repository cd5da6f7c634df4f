from enum import Enum


class InvalidModeError(ValueError):
    """Raised for a display mode name outside internal/external/join/mirror."""


class Mode(Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"
    JOIN = "join"
    MIRROR = "mirror"

    @property
    def argument(self) -> str:
        """Argument handed to the mutator command."""
        return self.value

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def icon_name(self) -> str:
        return _ICONS[self]

    @property
    def index(self) -> int:
        return MODE_CYCLE.index(self)

    def __lt__(self, other):
        if not isinstance(other, Mode):
            return NotImplemented
        return self.index < other.index

    @classmethod
    def from_argument(cls, text: str) -> "Mode":
        try:
            return cls(text.strip().lower())
        except ValueError:
            raise InvalidModeError(
                f"unknown display mode {text!r} (expected one of: "
                f"{', '.join(m.value for m in MODE_CYCLE)})"
            ) from None


# Order of the buttons and of the hotkey cycle
MODE_CYCLE = (Mode.INTERNAL, Mode.EXTERNAL, Mode.JOIN, Mode.MIRROR)

_LABELS = {
    Mode.INTERNAL: "Internal only",
    Mode.EXTERNAL: "External only",
    Mode.JOIN: "Extended",
    Mode.MIRROR: "Mirror",
}

_ICONS = {
    Mode.INTERNAL: "video-single-display-symbolic",
    Mode.EXTERNAL: "computer-symbolic",
    Mode.JOIN: "video-joined-displays-symbolic",
    Mode.MIRROR: "view-mirror-symbolic",
}
