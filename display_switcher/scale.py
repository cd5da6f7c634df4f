import math
from typing import NamedTuple

# Reference layouts: 864x486 is the smallest supported screen, 1920x1200 the largest
REF_LOW_RES = {"height": 486, "margin_top": 50, "icon_size": 25, "font_size": 15}
REF_HIGH_RES = {"height": 1200, "margin_top": 150, "icon_size": 55, "font_size": 30}


class ScaledMetrics(NamedTuple):
    margin_top: int
    icon_size: int
    font_size: int

    def css(self) -> dict:
        return {
            "margin-top": f"{self.margin_top}px",
            "icon-size": f"{self.icon_size}px",
            "font-size": f"{self.font_size}px",
        }


class WindowLayout(NamedTuple):
    monitor_width: int
    monitor_height: int
    metrics: ScaledMetrics


def _round_half_up(value: float) -> int:
    # Math.round semantics, Python's round() is half-to-even
    return int(math.floor(value + 0.5))


def _lerp(key: str, t: float) -> int:
    low = REF_LOW_RES[key]
    high = REF_HIGH_RES[key]
    return _round_half_up(low + (high - low) * t)


def scale(height: float) -> ScaledMetrics:
    """Proportional button metrics for a monitor of the given height."""
    low, high = REF_LOW_RES["height"], REF_HIGH_RES["height"]
    clamped = min(max(height, low), high)
    t = (clamped - low) / (high - low)
    return ScaledMetrics(
        margin_top=_lerp("margin_top", t),
        icon_size=_lerp("icon_size", t),
        font_size=_lerp("font_size", t),
    )


def layout_for(width: int, height: int) -> WindowLayout:
    return WindowLayout(width, height, scale(height))
