import json
import logging
import os
from dataclasses import dataclass, field
from typing import List

from .prober import DRM_PATH

SETTINGS_FILE = os.path.expanduser("~/.config/display-switcher/settings.json")
LOG_FILE = os.path.expanduser("~/.local/share/display-switcher/log.txt")
EVENT_PATH = "/opt/hdmi-events"
MUTATOR_COMMAND = ["hdmi-switch"]

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    drm_path: str = DRM_PATH
    event_path: str = EVENT_PATH
    mutator_command: List[str] = field(default_factory=lambda: list(MUTATOR_COMMAND))
    log_file: str = LOG_FILE

    def to_dict(self) -> dict:
        return {
            "drm-path": self.drm_path,
            "event-path": self.event_path,
            "mutator-command": list(self.mutator_command),
            "log-file": self.log_file,
        }


def settings_path() -> str:
    return os.environ.get("DISPLAY_SWITCHER_SETTINGS") or SETTINGS_FILE


class SettingsFile:
    def __init__(self, path: str = None):
        self.path = path or settings_path()
        # write defaults on first run so the file can be edited
        if not os.path.exists(self.path):
            self._write(Settings().to_dict())

    def _read(self) -> dict:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Cannot read settings from %s, using defaults: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring settings in %s: not a JSON object", self.path)
            return {}
        return data

    def _write(self, data: dict):
        try:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
        except OSError as e:
            logger.warning("Failed to write settings to %s: %s", self.path, e)

    def load(self) -> Settings:
        data = self._read()
        defaults = Settings()

        def text(key, default):
            value = data.get(key, default)
            if not isinstance(value, str) or not value:
                if key in data:
                    logger.warning("Invalid value for %r, using %r", key, default)
                return default
            return os.path.expanduser(value)

        command = data.get("mutator-command", defaults.mutator_command)
        if isinstance(command, str):
            command = command.split()
        if not isinstance(command, list) or not command or not all(
            isinstance(part, str) for part in command
        ):
            logger.warning("Invalid value for 'mutator-command', using %r", defaults.mutator_command)
            command = defaults.mutator_command

        return Settings(
            drm_path=text("drm-path", defaults.drm_path),
            event_path=text("event-path", defaults.event_path),
            mutator_command=[os.path.expanduser(part) for part in command],
            log_file=text("log-file", defaults.log_file),
        )
