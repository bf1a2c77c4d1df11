"""Player session bootstrap around one PlaybackController.

A session is one video being watched. ``open`` reads the duration, seeds default
marks, restores the saved position and records the video as played; a QTimer
then samples the player clock into ``PlaybackController.on_tick``. ``close``
saves the position again. Backends with an ``ended`` signal have it forwarded
to ``PlaybackController.on_player_ended``. The marks themselves are owned by
the controller and its mark store.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Optional, Set

from PySide6.QtCore import QObject, QTimer, Signal

from .core.config import PlayerConfig
from .core.controller import PlaybackController
from .core.identity import VideoIdentity
from .core.seek import MediaPlayer
from .services.mark_store import MarkStore
from .services.position_store import PositionStore
from .services.settings_manager import SettingsManager
from .utils.timefmt import format_time

logger = logging.getLogger(__name__)


class PlayerSession(QObject):
    exitRequested = Signal()

    def __init__(
        self,
        video: VideoIdentity,
        player: MediaPlayer,
        mark_store: MarkStore,
        positions: PositionStore,
        settings: Optional[SettingsManager] = None,
        parent: Optional[QObject] = None,
        *,
        config: Optional[PlayerConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(parent)
        self.video = video
        self.player = player
        self.positions = positions
        self._settings = settings
        if config is None:
            config = settings.player_config() if settings is not None else PlayerConfig()
        self._clock = clock
        self._last_back_press: Optional[float] = None
        self._last_sample: Optional[float] = None
        self._pending: Optional[asyncio.Future] = None
        self._tasks: Set[asyncio.Future] = set()
        self.controller = PlaybackController(
            player, video, mark_store, config, self, clock=clock
        )
        self.controller.stepSizeChanged.connect(self._onStepSizeChanged)
        self._sampler = QTimer(self)
        self._sampler.setInterval(int(config.sample_interval * 1000))
        self._sampler.timeout.connect(self._onSample)
        # Only some backends report running off the end of the media.
        ended = getattr(player, "ended", None)
        if ended is not None:
            ended.connect(self._onPlayerEnded)

    @property
    def is_open(self) -> bool:
        return self._sampler.isActive()

    async def open(self, autoplay: bool = True):
        controller = self.controller
        controller.set_duration(self.player.duration())
        duration = controller.duration
        if duration > 0:
            controller.seed_marks([0.0, duration])
            await self._restore_position(duration)
        self.positions.update_last_played(self.video)
        if autoplay:
            controller.play()
        self._last_sample = None
        self._sampler.start()
        logger.info("Opened %s (%s)", self.video, format_time(duration))

    async def sample(self):
        """Feed one sample of the player clock to the controller."""
        now = self._clock()
        delta = None if self._last_sample is None else now - self._last_sample
        self._last_sample = now
        await self.controller.on_tick(self.player.current_playback_time(), delta)

    def close(self):
        self._sampler.stop()
        self.controller.pause()
        self.player.pause()
        position = self.controller.current_time
        if position > 0:
            self.positions.save_position(self.video, position)
        self.positions.sync()
        logger.info("Closed %s at %s", self.video, format_time(position))

    def handle_back(self) -> bool:
        """Back/menu press. Returns True when the player should be left.

        In loop mode the first press only leaves loop mode; a second press
        within the double-press window exits.
        """
        controller = self.controller
        now = self._clock()
        if controller.is_looping:
            window = controller.config.back_double_press
            if self._last_back_press is not None and now - self._last_back_press < window:
                self._last_back_press = None
                self._request_exit()
                return True
            controller.stop_looping()
            self._last_back_press = now
            return False
        self._request_exit()
        return True

    def _request_exit(self):
        if self.controller.current_time > 0:
            self.positions.save_position(self.video, self.controller.current_time)
        self.exitRequested.emit()

    async def _restore_position(self, duration: float):
        saved = self.positions.get_position(self.video)
        guard = self.controller.config.resume_min_time_from_end
        if saved is None or not 0 < saved < duration - guard:
            return
        await self.controller.seek_to(saved)
        logger.info("Restored position to %s", format_time(saved))

    def _onSample(self):
        if self._pending is not None and not self._pending.done():
            return
        self._pending = asyncio.ensure_future(self.sample())

    def _onPlayerEnded(self):
        task = asyncio.ensure_future(self.controller.on_player_ended())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _onStepSizeChanged(self, _step: float):
        if self._settings is not None:
            self._settings.set_seek_step_index(self.controller.seek_step_index)


def forget_video(
    video: VideoIdentity, mark_store: MarkStore, positions: PositionStore
) -> None:
    """Purge marks, resume position and last-played together for a deleted video."""
    mark_store.clear(video)
    positions.purge(video)
    logger.info("Forgot %s", video)


__all__ = ["PlayerSession", "forget_video"]
