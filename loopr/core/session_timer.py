"""Practice stopwatch shown as an overlay, independent of loop mode."""

from __future__ import annotations

import time
from typing import Callable, Optional


class SessionTimer:
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._started_at: Optional[float] = None
        self.seconds = 0
        self.running = False

    def start(self) -> None:
        """Start from zero; calling again restarts the count."""
        self._started_at = self._clock()
        self.seconds = 0
        self.running = True

    def stop(self) -> None:
        self.update()
        self.running = False

    def update(self) -> bool:
        """Refresh whole elapsed seconds. Returns True if the value changed."""
        if not self.running or self._started_at is None:
            return False
        seconds = int(self._clock() - self._started_at)
        if seconds == self.seconds:
            return False
        self.seconds = seconds
        return True


__all__ = ["SessionTimer"]
