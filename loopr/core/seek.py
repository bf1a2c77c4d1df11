"""Seek serialization against an external media player.

The media player is the only asynchronous collaborator: ``seek`` suspends until
the player acknowledges with a ``SeekResult``. ``SeekCoordinator`` guarantees at
most one seek is in flight. A request made while another is outstanding is
rejected (``seek_to`` returns ``None``) rather than queued, so the user never
sees a stale jump land later.

Completion ordering: the optional ``complete`` callback runs after the player
acknowledges but before the in-flight flag clears. Callers commit their own
state there, on the same serial context, and nothing else can observe the
half-finished seek.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Callable, Optional, Protocol

from PySide6.QtCore import QObject, Signal

from .segments import clamp_time

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeekResult:
    finished: bool
    target: float = 0.0


class MediaPlayer(Protocol):
    def play(self) -> None: ...

    def pause(self) -> None: ...

    def current_playback_time(self) -> float: ...

    def duration(self) -> float: ...

    async def seek(self, seconds: float) -> SeekResult: ...


class SeekCoordinator(QObject):
    seekStarted = Signal(float)
    seekFinished = Signal(float, bool)  # target, finished

    def __init__(self, player: MediaPlayer, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._player = player
        self._duration = 0.0
        self._in_flight = False

    @property
    def in_progress(self) -> bool:
        return self._in_flight

    @property
    def duration(self) -> float:
        return self._duration

    @duration.setter
    def duration(self, value: float):
        self._duration = value if math.isfinite(value) and value > 0 else 0.0

    async def seek_to(
        self,
        target: float,
        complete: Optional[Callable[[SeekResult], None]] = None,
    ) -> Optional[SeekResult]:
        if self._in_flight:
            logger.debug("Seek to %.3f rejected: another seek is in flight", target)
            return None
        bounded = clamp_time(target, self._duration)
        self._in_flight = True
        self.seekStarted.emit(bounded)
        logger.debug("Seeking to %.3f", bounded)
        try:
            try:
                acknowledged = await self._player.seek(bounded)
                result = replace(acknowledged, target=bounded)
            except Exception:
                logger.warning("Media player failed seeking to %.3f", bounded, exc_info=True)
                result = SeekResult(finished=False, target=bounded)
            if not result.finished:
                logger.info("Seek to %.3f did not finish", bounded)
            if complete is not None:
                complete(result)
        finally:
            self._in_flight = False
        self.seekFinished.emit(result.target, result.finished)
        return result


__all__ = ["SeekResult", "MediaPlayer", "SeekCoordinator"]
