"""Resume positions and last-played timestamps, kept in QSettings."""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Optional

from PySide6.QtCore import QSettings

from ..core.identity import VideoIdentity

logger = logging.getLogger(__name__)

POSITIONS_GROUP = "positions"
LAST_PLAYED_GROUP = "last_played"


class PositionStore:
    """Wrapper around QSettings keyed by ``VideoIdentity.key``."""

    def __init__(self, settings: Optional[QSettings] = None):
        self._settings = settings if settings is not None else QSettings()

    # ---------------------------------------------------- Positions

    def get_position(self, video: VideoIdentity) -> Optional[float]:
        """Get the saved resume position in seconds (None if never saved)."""
        return self._read_float(f"{POSITIONS_GROUP}/{video.key}")

    def save_position(self, video: VideoIdentity, seconds: float) -> None:
        self._settings.setValue(f"{POSITIONS_GROUP}/{video.key}", float(seconds))

    def clear_position(self, video: VideoIdentity) -> None:
        self._settings.remove(f"{POSITIONS_GROUP}/{video.key}")

    # ---------------------------------------------------- Last played

    def get_last_played(self, video: VideoIdentity) -> Optional[datetime]:
        stamp = self._read_float(f"{LAST_PLAYED_GROUP}/{video.key}")
        return datetime.fromtimestamp(stamp) if stamp is not None else None

    def update_last_played(
        self, video: VideoIdentity, when: Optional[datetime] = None
    ) -> None:
        stamp = when.timestamp() if when is not None else time.time()
        self._settings.setValue(f"{LAST_PLAYED_GROUP}/{video.key}", stamp)

    def purge(self, video: VideoIdentity) -> None:
        """Drop every record of ``video``; used when its file is deleted."""
        self.clear_position(video)
        self._settings.remove(f"{LAST_PLAYED_GROUP}/{video.key}")

    def sync(self) -> None:
        self._settings.sync()

    def _read_float(self, key: str) -> Optional[float]:
        raw = self._settings.value(key)
        if raw is None:
            return None
        try:
            return float(raw)
        except (TypeError, ValueError):
            logger.warning("Ignoring corrupt value %r for %s", raw, key)
            return None


__all__ = ["PositionStore"]
