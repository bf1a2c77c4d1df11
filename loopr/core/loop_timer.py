"""Countdown that advances the looped segment.

The timer has no clock of its own: the periodic sampler feeds it elapsed
seconds through ``tick`` so player time stays the single source of truth.
"""

from __future__ import annotations

from .config import DEFAULT_LOOP_SECONDS


class LoopTimer:
    def __init__(self, duration: float = DEFAULT_LOOP_SECONDS):
        self.duration = duration
        self.active = False
        self.remaining = duration

    def reset(self, activate: bool = True) -> None:
        if activate:
            self.active = True
        self.remaining = self.duration

    def disable(self) -> None:
        # Remaining time is kept so the overlay can still show where it stopped.
        self.active = False

    def tick(self, delta: float, playing: bool) -> bool:
        """Count down by ``delta`` seconds.

        Returns ``True`` when the countdown expired on this tick; the timer is
        already reset for the next segment by then.
        """
        if not (self.active and playing) or delta <= 0:
            return False
        self.remaining -= delta
        if self.remaining <= 0:
            self.reset()
            return True
        return False


__all__ = ["LoopTimer"]
