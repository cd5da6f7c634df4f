"""
Decoding of org.gnome.Mutter.DisplayConfig.GetCurrentState results.

GetCurrentState returns (serial, monitors, logical_monitors, properties):

* monitors: [((connector, vendor, product, serial), modes, props)], each
  mode being (id, width, height, refresh, preferred_scale, scales, props)
* logical_monitors: [(x, y, scale, transform, primary, monitors, props)]
"""
from typing import Any, Optional, Tuple

EXTERNAL_CONNECTORS = ("HDMI", "DP", "DVI", "USB")
FALLBACK_SIZE = (1920, 1080)


def _logical_monitors_of(logical_monitor) -> list:
    return logical_monitor[5] if len(logical_monitor) > 5 else logical_monitor[-1]


def _classify_connectors(monitors) -> Tuple[set, set]:
    builtin, external = set(), set()
    for monitor_spec, modes, props in monitors:
        connector = monitor_spec[0]
        if props.get("is-builtin", False) or "eDP" in connector:
            builtin.add(connector)
        elif any(x in connector for x in EXTERNAL_CONNECTORS):
            external.add(connector)
    return builtin, external


def _connectors_of(logical_monitor) -> set:
    return {spec[0] for spec in _logical_monitors_of(logical_monitor)}


def _overlapping(logical_monitors, builtin: set, external: set) -> bool:
    """True if a builtin and an external output show the same area."""
    areas = {}
    for lm in logical_monitors:
        areas.setdefault((lm[0], lm[1]), set()).update(_connectors_of(lm))
    return any(shown & builtin and shown & external for shown in areas.values())


def detect_mode(state: Any) -> str:
    """Return internal, external, join, mirror or unknown."""
    if not state:
        return "unknown"

    serial, monitors, logical_monitors, properties = state
    if not logical_monitors:
        return "unknown"

    builtin, external = _classify_connectors(monitors)
    active = set()
    for lm in logical_monitors:
        active |= _connectors_of(lm)

    match (bool(active & builtin), bool(active & external)):
        case (True, True):
            return "mirror" if _overlapping(logical_monitors, builtin, external) else "join"
        case (True, False):
            return "internal"
        case (False, True):
            return "external"
    return "unknown"


def primary_monitor_size(state: Any) -> Optional[Tuple[int, int]]:
    """Logical size of the primary monitor, or None if it cannot be found."""
    if not state:
        return None

    serial, monitors, logical_monitors, properties = state
    primary = next((lm for lm in logical_monitors if lm[4]), None)
    if primary is None and logical_monitors:
        primary = logical_monitors[0]
    if primary is None:
        return None

    connectors = _connectors_of(primary)
    scale = primary[2] or 1.0

    for monitor_spec, modes, props in monitors:
        if monitor_spec[0] not in connectors:
            continue
        for mode in modes:
            mode_props = mode[6] if len(mode) > 6 else {}
            if mode_props.get("is-current", False):
                width, height = mode[1], mode[2]
                # Only the logical layout mode (1) shrinks by the scale factor
                if properties.get("layout-mode", 2) == 1:
                    return int(round(width / scale)), int(round(height / scale))
                return width, height
    return None
