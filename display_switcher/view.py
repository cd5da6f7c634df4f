import logging
from typing import Callable, Dict

import gi

gi.require_version("Gtk", "3.0")
gi.require_version("Gdk", "3.0")
from gi.repository import Gdk, Gtk

from .modes import MODE_CYCLE, Mode
from .scale import WindowLayout

logger = logging.getLogger(__name__)

WINDOW_WIDTH = 500
ACTIVE_CLASS = "hdmi-button-active"

CSS_TEMPLATE = """
.hdmi-panel {{
    background-color: rgba(24, 24, 24, 0.92);
    padding: 24px;
}}
.hdmi-title {{
    color: #ffffff;
    font-size: {font_size};
    font-weight: bold;
}}
.hdmi-button {{
    margin-top: {margin_top};
    font-size: {font_size};
    color: #ffffff;
    background: transparent;
    border: none;
}}
.hdmi-button-active {{
    background: #3584e4;
}}
"""


class ModeWindow:
    """Side panel with one button per display mode."""

    def __init__(
        self,
        layout: WindowLayout,
        on_hover: Callable[[Mode], None],
        on_click: Callable[[Mode], None],
        on_dismiss: Callable[[], None],
    ):
        self._on_hover = on_hover
        self._on_click = on_click
        self._on_dismiss = on_dismiss
        self._buttons: Dict[Mode, Gtk.Button] = {}
        css = layout.metrics.css()

        provider = Gtk.CssProvider()
        provider.load_from_data(
            CSS_TEMPLATE.format(
                font_size=css["font-size"], margin_top=css["margin-top"]
            ).encode("utf-8")
        )

        self._window = Gtk.Window(title="HDMI Display Mode")
        self._window.set_decorated(False)
        self._window.set_keep_above(True)
        self._window.set_skip_taskbar_hint(True)
        self._window.set_skip_pager_hint(True)
        self._window.set_type_hint(Gdk.WindowTypeHint.DIALOG)
        self._window.set_default_size(WINDOW_WIDTH, layout.monitor_height)
        self._window.move(max(0, layout.monitor_width - WINDOW_WIDTH), 0)

        box = Gtk.Box(orientation=Gtk.Orientation.VERTICAL)
        self._style(box, provider, "hdmi-panel")

        title = Gtk.Label(label="HDMI Display Mode")
        self._style(title, provider, "hdmi-title")
        box.pack_start(title, False, False, 0)

        for mode in MODE_CYCLE:
            button = self._create_button(mode, layout.metrics.icon_size, provider)
            self._buttons[mode] = button
            box.pack_start(button, False, False, 0)

        self._window.add(box)
        self._window.connect("delete-event", self._on_delete)

    @staticmethod
    def _style(widget, provider, class_name):
        context = widget.get_style_context()
        context.add_provider(provider, Gtk.STYLE_PROVIDER_PRIORITY_APPLICATION)
        context.add_class(class_name)

    def _create_button(self, mode: Mode, icon_size: int, provider) -> Gtk.Button:
        icon = Gtk.Image.new_from_icon_name(mode.icon_name, Gtk.IconSize.DIALOG)
        icon.set_pixel_size(icon_size)
        label = Gtk.Label(label=mode.label)
        self._style(label, provider, "hdmi-button-label")

        inner = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=12)
        inner.pack_start(icon, False, False, 0)
        inner.pack_start(label, False, False, 0)

        button = Gtk.Button()
        button.add(inner)
        button.set_can_focus(True)
        self._style(button, provider, "hdmi-button")
        button.connect("enter-notify-event", self._on_enter, mode)
        button.connect("clicked", self._on_clicked, mode)
        return button

    def _on_enter(self, button, event, mode):
        self._on_hover(mode)
        return False

    def _on_delete(self, window, event):
        # Closed by the window manager (Alt+F4): end the session instead
        self._on_dismiss()
        return True

    def _on_clicked(self, button, mode):
        self._on_click(mode)

    def show(self):
        self._window.show_all()
        self._window.present()

    def highlight(self, mode: Mode):
        for candidate, button in self._buttons.items():
            context = button.get_style_context()
            if candidate is mode:
                context.add_class(ACTIVE_CLASS)
            else:
                context.remove_class(ACTIVE_CLASS)

    def destroy(self):
        window, self._window = self._window, None
        if window is not None:
            window.destroy()
        self._buttons = {}
