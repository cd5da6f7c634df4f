"""React to HDMI/DisplayPort hotplug and let the user pick a display mode."""

__version__ = "1.0.0"
