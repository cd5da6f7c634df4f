"""
Connector probing over the DRM sysfs tree.

Each connector is a directory (e.g. ``HDMI-A-1``, ``DP-1``) holding a
``status`` file whose trimmed content is ``connected`` when a display is
plugged in.
"""
import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import List

DRM_PATH = "/sys/class/drm"

logger = logging.getLogger(__name__)


class ConnectorKind(Enum):
    HDMI = "HDMI"
    DISPLAY_PORT = "DisplayPort"
    OTHER = "Other"

    @classmethod
    def from_name(cls, name: str) -> "ConnectorKind":
        if "HDMI" in name:
            return cls.HDMI
        if name.startswith("DP"):
            return cls.DISPLAY_PORT
        return cls.OTHER


@dataclass(frozen=True)
class ConnectorStatus:
    name: str
    kind: ConnectorKind
    connected: bool


class ConnectorProber:
    def __init__(self, drm_path: str = DRM_PATH):
        self.drm_path = drm_path

    def list_connectors(self) -> List[ConnectorStatus]:
        """
        Return the HDMI and DisplayPort connectors found under drm_path.

        An unreadable tree yields an empty list; entries without a status
        file are skipped.
        """
        try:
            with os.scandir(self.drm_path) as it:
                entries = [(e.name, e.is_dir()) for e in it]
        except OSError as e:
            logger.warning("Cannot enumerate %s: %s", self.drm_path, e)
            return []

        connectors = []
        for name, is_dir in sorted(entries):
            kind = ConnectorKind.from_name(name)
            if not is_dir or kind is ConnectorKind.OTHER:
                continue

            status_path = os.path.join(self.drm_path, name, "status")
            if not os.path.exists(status_path):
                logger.info("Status file not found: %s", status_path)
                continue

            try:
                with open(status_path, "rb") as f:
                    raw = f.read()
            except OSError as e:
                logger.warning("Cannot read %s: %s", status_path, e)
                continue

            status = raw.decode("utf-8", errors="replace").strip()
            logger.debug("Connector: %s, Status: %s", name, status)
            connectors.append(ConnectorStatus(name, kind, status == "connected"))
        return connectors

    def probe(self) -> bool:
        hdmi_connected = False
        dp_connected = False
        for connector in self.list_connectors():
            if not connector.connected:
                continue
            if connector.kind is ConnectorKind.HDMI:
                hdmi_connected = True
            elif connector.kind is ConnectorKind.DISPLAY_PORT:
                dp_connected = True
        return hdmi_connected or dp_connected
