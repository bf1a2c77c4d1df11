"""Settings manager for player preferences."""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QSettings

from ..core import config
from ..core.config import PlayerConfig

logger = logging.getLogger(__name__)


class SettingsManager:
    """Wrapper around QSettings for type-safe preference management."""

    def __init__(self, settings: Optional[QSettings] = None):
        self._settings = settings if settings is not None else QSettings()

    # ---------------------------------------------------- Playback

    def get_seek_step_index(self) -> int:
        """Get the index into the seek step options (default: 1, i.e. 5s)."""
        index = self._settings.value(
            "playback/seek_step_index", config.DEFAULT_SEEK_STEP_INDEX, int
        )
        if not 0 <= index < len(config.SEEK_STEP_OPTIONS):
            return config.DEFAULT_SEEK_STEP_INDEX
        return index

    def set_seek_step_index(self, index: int) -> None:
        self._settings.setValue("playback/seek_step_index", index)

    def get_sample_interval(self) -> float:
        """Get the player clock sampling interval in seconds (default: 0.1)."""
        return self._settings.value(
            "playback/sample_interval", config.SAMPLE_INTERVAL, float
        )

    # ---------------------------------------------------- Loop

    def get_loop_seconds(self) -> float:
        """Get how long a segment loops before advancing (default: 30)."""
        return self._settings.value("loop/seconds", config.DEFAULT_LOOP_SECONDS, float)

    def set_loop_seconds(self, seconds: float) -> None:
        self._settings.setValue("loop/seconds", seconds)

    def get_boundary_debounce(self) -> float:
        return self._settings.value(
            "loop/boundary_debounce", config.BOUNDARY_DEBOUNCE, float
        )

    # ---------------------------------------------------- Marks

    def get_mark_proximity(self) -> float:
        return self._settings.value("marks/proximity", config.MARK_PROXIMITY, float)

    def get_pause_at_mark_tolerance(self) -> float:
        return self._settings.value(
            "marks/pause_tolerance", config.PAUSE_AT_MARK_TOLERANCE, float
        )

    def get_finetune_step(self) -> float:
        """Get the mark fine-tune step in seconds (default: 0.25)."""
        return self._settings.value("marks/finetune_step", config.FINETUNE_STEP, float)

    def set_finetune_step(self, seconds: float) -> None:
        self._settings.setValue("marks/finetune_step", seconds)

    # ---------------------------------------------------- Derived

    def player_config(self) -> PlayerConfig:
        """Build a PlayerConfig, falling back to defaults on invalid values."""
        try:
            return PlayerConfig(
                loop_seconds=self.get_loop_seconds(),
                seek_step_index=self.get_seek_step_index(),
                mark_proximity=self.get_mark_proximity(),
                pause_at_mark_tolerance=self.get_pause_at_mark_tolerance(),
                finetune_step=self.get_finetune_step(),
                boundary_debounce=self.get_boundary_debounce(),
                sample_interval=self.get_sample_interval(),
            )
        except ValueError:
            logger.warning("Invalid player settings, using defaults", exc_info=True)
            return PlayerConfig()

    def sync(self) -> None:
        self._settings.sync()


__all__ = ["SettingsManager"]
