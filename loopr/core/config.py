"""Player tuning constants and the immutable config handed to the controller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

DEFAULT_LOOP_SECONDS = 30.0

SEEK_STEP_OPTIONS: Tuple[float, ...] = (0.5, 5.0, 30.0)
DEFAULT_SEEK_STEP_INDEX = 1  # 5.0s

# Coarse: used when toggling or fine-tuning a mark by hand.
MARK_PROXIMITY = 0.5
# Tight, forward-only: used to auto-pause when playback just passed a mark.
PAUSE_AT_MARK_TOLERANCE = 0.2
# Next/previous mark must be at least this far from the current position.
JUMP_TOLERANCE = 0.1

FINETUNE_STEP = 0.25
BOUNDARY_DEBOUNCE = 1.0
SAMPLE_INTERVAL = 0.1

# Saved positions this close to the end are not restored.
RESUME_MIN_TIME_FROM_END = 10.0
BACK_DOUBLE_PRESS = 1.0


@dataclass(frozen=True)
class PlayerConfig:
    loop_seconds: float = DEFAULT_LOOP_SECONDS
    seek_step_options: Tuple[float, ...] = SEEK_STEP_OPTIONS
    seek_step_index: int = DEFAULT_SEEK_STEP_INDEX
    mark_proximity: float = MARK_PROXIMITY
    pause_at_mark_tolerance: float = PAUSE_AT_MARK_TOLERANCE
    jump_tolerance: float = JUMP_TOLERANCE
    finetune_step: float = FINETUNE_STEP
    boundary_debounce: float = BOUNDARY_DEBOUNCE
    sample_interval: float = SAMPLE_INTERVAL
    resume_min_time_from_end: float = RESUME_MIN_TIME_FROM_END
    back_double_press: float = BACK_DOUBLE_PRESS

    def __post_init__(self):
        if self.loop_seconds <= 0:
            raise ValueError("loop_seconds must be positive")
        if not self.seek_step_options:
            raise ValueError("seek_step_options must not be empty")
        if any(step <= 0 for step in self.seek_step_options):
            raise ValueError("seek steps must be positive")
        if not 0 <= self.seek_step_index < len(self.seek_step_options):
            raise ValueError("seek_step_index out of range")
        for name in (
            "mark_proximity",
            "pause_at_mark_tolerance",
            "jump_tolerance",
            "finetune_step",
            "sample_interval",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.boundary_debounce < 0:
            raise ValueError("boundary_debounce must not be negative")


__all__ = [
    "PlayerConfig",
    "DEFAULT_LOOP_SECONDS",
    "SEEK_STEP_OPTIONS",
    "DEFAULT_SEEK_STEP_INDEX",
    "MARK_PROXIMITY",
    "PAUSE_AT_MARK_TOLERANCE",
    "JUMP_TOLERANCE",
    "FINETUNE_STEP",
    "BOUNDARY_DEBOUNCE",
    "SAMPLE_INTERVAL",
    "RESUME_MIN_TIME_FROM_END",
    "BACK_DOUBLE_PRESS",
]
