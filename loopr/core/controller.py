"""Segment-loop playback controller.

Goals:
- Own playback position, the ordered mark list, the looped segment and the loop
  countdown for one player session (one video being watched).
- Keep all of that consistent under rapid user input while the only truly
  asynchronous operation, a media player seek, is outstanding.

Design:
PlaybackController wraps a media player (see ``loopr.core.seek.MediaPlayer``) and
exposes the user-facing operations:
    toggle_play_pause()
    seek_to(t) / seek_backward() / seek_forward() / toggle_seek_step_size()
    toggle_mark() / clear_marks()
    toggle_loop() / next_segment() / previous_segment()
    jump_to_next_mark() / jump_to_previous_mark()
    finetune_mark_left(step) / finetune_mark_right(step)
    start_timer()
    on_tick(player_time, delta)   # fed by the periodic sampler
    on_player_ended()             # the player stopped at the end of the media
Operations that can seek are coroutines and return once the seek completed (or
was rejected). Everything else runs synchronously to completion.

Signals:
    positionChanged(float)   # current_time after every committed change
    stateChanged(str)        # 'playing'|'paused'
    marksChanged(object)     # tuple of mark timestamps
    loopChanged(bool)
    segmentChanged(int)
    loopTimeChanged(float)   # loop countdown seconds remaining
    seekingChanged(bool)
    stepSizeChanged(float)
    timerChanged(int)        # practice stopwatch seconds

Seek policy: every mutating operation is a silent no-op while a seek is in
flight. A seek always pauses first. On completion the position is committed
only if the player reports ``finished``; playback resumes only when it was
playing before and loop mode is on. Outside loop mode an explicit seek or mark
jump leaves the player paused.

Marks are a working copy of the persisted list. They are kept ascending with no
two entries closer than ``PlayerConfig.mark_proximity`` and flushed to the mark
store after every mutation.
"""

from __future__ import annotations

import logging
import math
import time
from bisect import insort
from dataclasses import dataclass
from functools import partial
from typing import Callable, List, Optional, Sequence, Tuple

from PySide6.QtCore import QObject, Signal

from . import segments
from .config import PlayerConfig
from .identity import VideoIdentity
from .loop_timer import LoopTimer
from .seek import MediaPlayer, SeekCoordinator, SeekResult
from .session_timer import SessionTimer

logger = logging.getLogger(__name__)


@dataclass
class PlaybackState:
    current_time: float = 0.0
    duration: float = 0.0
    playing: bool = False


@dataclass
class LoopState:
    looping: bool = False
    segment_index: int = 0


class PlaybackController(QObject):
    positionChanged = Signal(float)
    stateChanged = Signal(str)
    marksChanged = Signal(object)
    loopChanged = Signal(bool)
    segmentChanged = Signal(int)
    loopTimeChanged = Signal(float)
    seekingChanged = Signal(bool)
    stepSizeChanged = Signal(float)
    timerChanged = Signal(int)

    def __init__(
        self,
        player: MediaPlayer,
        video: Optional[VideoIdentity] = None,
        mark_store=None,
        config: Optional[PlayerConfig] = None,
        parent: Optional[QObject] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(parent)
        self._player = player
        self._video = video
        self._store = mark_store
        self._config = config or PlayerConfig()
        self._clock = clock
        self._state = PlaybackState()
        self._loop = LoopState()
        self._loop_timer = LoopTimer(self._config.loop_seconds)
        self._session_timer = SessionTimer(clock)
        self._step_index = self._config.seek_step_index
        self._last_boundary_seek: Optional[float] = None
        self._seeker = SeekCoordinator(player, self)
        self._seeker.seekStarted.connect(self._onSeekStarted)
        self._seeker.seekFinished.connect(self._onSeekFinished)
        self._marks: List[float] = []
        if video is not None and mark_store is not None:
            self._marks = segments.normalize_marks(
                mark_store.load(video), self._config.mark_proximity
            )

    # State accessors
    @property
    def config(self) -> PlayerConfig:
        return self._config

    @property
    def video(self) -> Optional[VideoIdentity]:
        return self._video

    @property
    def current_time(self) -> float:
        return self._state.current_time

    @property
    def duration(self) -> float:
        return self._state.duration

    @property
    def is_playing(self) -> bool:
        return self._state.playing

    @property
    def is_seek_in_progress(self) -> bool:
        return self._seeker.in_progress

    @property
    def marks(self) -> Tuple[float, ...]:
        return tuple(self._marks)

    @property
    def segment_count(self) -> int:
        return segments.segment_count(self._marks)

    @property
    def current_segment_index(self) -> int:
        return self._loop.segment_index

    @property
    def segment_start(self) -> float:
        return segments.segment_start(self._marks, self._loop.segment_index)

    @property
    def segment_end(self) -> float:
        return segments.segment_end(
            self._marks, self._loop.segment_index, self._state.duration
        )

    @property
    def is_looping(self) -> bool:
        return self._loop.looping

    @property
    def loop_timer_active(self) -> bool:
        return self._loop_timer.active

    @property
    def loop_time_remaining(self) -> float:
        return self._loop_timer.remaining

    @property
    def seek_step_index(self) -> int:
        return self._step_index

    @property
    def seek_step_size(self) -> float:
        return self._config.seek_step_options[self._step_index]

    @property
    def timer_seconds(self) -> int:
        return self._session_timer.seconds

    @property
    def is_timer_running(self) -> bool:
        return self._session_timer.running

    # Session bootstrap
    def set_duration(self, value: float):
        duration = self._finite(value, "duration")
        if duration < 0:
            logger.warning("Invalid duration %r treated as 0", value)
            duration = 0.0
        self._state.duration = duration
        self._seeker.duration = duration
        self._set_current_time(self._state.current_time)
        if duration <= 0 and self._loop.looping:
            self.stop_looping()

    def seed_marks(self, marks: Sequence[float]):
        """Replace an empty working mark list without persisting it."""
        if self._marks:
            return
        self._marks = segments.normalize_marks(marks, self._config.mark_proximity)
        self._set_segment_index(segments.locate(self._marks, self._state.current_time))
        self.marksChanged.emit(self.marks)

    def play(self):
        if self.is_seek_in_progress:
            return
        self._set_playing(True)

    def pause(self):
        if self.is_seek_in_progress:
            return
        self._set_playing(False)

    # Playback
    def toggle_play_pause(self):
        if self.is_seek_in_progress:
            return
        self._set_playing(not self._state.playing)

    async def seek_to(self, seconds: float):
        if self.is_seek_in_progress:
            return
        target = self._finite(seconds, "seek target")
        await self._seek(target, self._state.playing)

    async def seek_backward(self):
        if self.is_seek_in_progress:
            return
        target = segments.clamp_time(
            self._state.current_time - self.seek_step_size, self._state.duration
        )
        await self._seek(target, self._state.playing)

    async def seek_forward(self):
        if self.is_seek_in_progress:
            return
        target = segments.clamp_time(
            self._state.current_time + self.seek_step_size, self._state.duration
        )
        await self._seek(target, self._state.playing)

    def toggle_seek_step_size(self):
        self._step_index = (self._step_index + 1) % len(self._config.seek_step_options)
        self.stepSizeChanged.emit(self.seek_step_size)

    # Marks
    def toggle_mark(self):
        if self.is_seek_in_progress:
            return
        self._set_playing(False)
        now = self._state.current_time
        index = segments.find_within_tolerance(
            self._marks, now, self._config.mark_proximity
        )
        if index is not None:
            removed = self._marks.pop(index)
            logger.info("Removed mark at %.3f", removed)
        else:
            insort(self._marks, now)
            logger.info("Added mark at %.3f", now)
        self._marks_mutated(relocate=True)

    def clear_marks(self):
        if self.is_seek_in_progress:
            return
        self._set_playing(False)
        self._marks = []
        self._set_looping(False)
        self._loop_timer.disable()
        self._set_segment_index(0)
        if self._store is not None and self._video is not None:
            self._store.clear(self._video)
        self.marksChanged.emit(self.marks)

    async def finetune_mark_left(self, step: Optional[float] = None):
        await self._finetune_mark(-(step if step is not None else self._config.finetune_step))

    async def finetune_mark_right(self, step: Optional[float] = None):
        await self._finetune_mark(step if step is not None else self._config.finetune_step)

    # Loop mode
    async def toggle_loop(self):
        if self.is_seek_in_progress:
            return
        if self._loop.looping:
            self.stop_looping()
            return
        if len(self._marks) < 2:
            self._set_looping(False)
            return
        if self._state.duration <= 0:
            logger.warning("Loop mode unavailable: no valid duration")
            return
        now = self._state.current_time
        self._set_looping(True)
        self._set_segment_index(segments.locate(self._marks, now))
        self._reset_loop_timer()
        start, end = self.segment_start, self.segment_end
        if not start <= now < end:
            await self._seek(start, self._state.playing)

    def stop_looping(self):
        self._set_looping(False)
        self._loop_timer.disable()

    async def next_segment(self):
        await self._step_segment(1)

    async def previous_segment(self):
        await self._step_segment(-1)

    async def jump_to_next_mark(self):
        if self.is_seek_in_progress:
            return
        if self._loop.looping:
            await self.next_segment()
            return
        target = segments.next_mark(
            self._marks, self._state.current_time, self._config.jump_tolerance
        )
        if target is not None:
            await self._seek(target, self._state.playing)

    async def jump_to_previous_mark(self):
        if self.is_seek_in_progress:
            return
        if self._loop.looping:
            await self.previous_segment()
            return
        target = segments.previous_mark(
            self._marks, self._state.current_time, self._config.jump_tolerance
        )
        if target is not None:
            await self._seek(target, self._state.playing)

    # Practice stopwatch
    def start_timer(self):
        self._session_timer.start()
        self.timerChanged.emit(self._session_timer.seconds)

    # Periodic sampler
    async def on_tick(self, player_time: float, delta: Optional[float] = None):
        """Apply one sample of the player clock.

        ``delta`` is the wall time since the previous sample and defaults to the
        configured sampler interval. Samples arriving while a seek is in flight
        are dropped: they describe the pre-seek position.
        """
        if self._session_timer.update():
            self.timerChanged.emit(self._session_timer.seconds)
        if self.is_seek_in_progress:
            return
        previous = self._state.current_time
        self._set_current_time(self._finite(player_time, "player time"))
        if not self._state.playing:
            return
        if delta is None:
            delta = self._config.sample_interval
        if self._loop.looping:
            await self._follow_loop(delta)
        else:
            await self._pause_at_passed_mark(previous)

    async def on_player_ended(self):
        """The player ran off the end of the media and stopped itself.

        In loop mode this rewinds to the segment start unless a sample already
        did; otherwise playback is left paused at the end.
        """
        if self.is_seek_in_progress:
            return
        self._set_current_time(
            self._finite(self._player.current_playback_time(), "player time")
        )
        if not self._state.playing:
            return
        if not self._loop.looping:
            self._set_playing(False)
            return
        start, end = self.segment_start, self.segment_end
        if start <= self._state.current_time < end:
            return
        # No debounce here: nothing else restarts a player that has stopped.
        self._last_boundary_seek = self._clock()
        await self._seek(start, True)

    # Internal
    async def _seek(self, target: float, was_playing: bool):
        if self.is_seek_in_progress:
            return
        self._set_playing(False)
        await self._seeker.seek_to(target, partial(self._finish_seek, resume=was_playing))

    def _finish_seek(self, result: SeekResult, resume: bool):
        if not result.finished:
            return
        self._set_current_time(result.target)
        if resume and self._loop.looping:
            self._set_playing(True)

    async def _step_segment(self, step: int):
        if self.is_seek_in_progress:
            return
        count = self.segment_count
        if count < 1:
            return
        was_playing = self._state.playing
        self._set_playing(False)
        self._set_segment_index((self._loop.segment_index + step) % count)
        # Outside loop mode the countdown restarts but stays inactive.
        self._reset_loop_timer(activate=self._loop.looping)
        await self._seek(self.segment_start, was_playing)

    async def _finetune_mark(self, delta: float):
        if self.is_seek_in_progress:
            return
        proximity = self._config.mark_proximity
        index = segments.find_within_tolerance(
            self._marks, self._state.current_time, proximity
        )
        if index is None:
            return
        old = self._marks[index]
        moved = segments.clamp_time(old + delta, self._state.duration)
        if moved == old:
            return
        others = self._marks[:index] + self._marks[index + 1 :]
        if segments.find_within_tolerance(others, moved, proximity) is not None:
            logger.warning(
                "Mark %.3f not moved to %.3f: too close to another mark", old, moved
            )
            return
        was_playing = self._state.playing
        self._set_playing(False)
        insort(others, moved)
        self._marks = others
        logger.info("Moved mark %.3f -> %.3f", old, moved)
        # The looped segment stays selected even though its bounds moved.
        self._marks_mutated(relocate=False)
        await self._seek(moved, was_playing)

    async def _follow_loop(self, delta: float):
        if self._loop_timer.tick(delta, self._state.playing):
            index = (self._loop.segment_index + 1) % max(1, self.segment_count)
            logger.info("Loop timer expired, advancing to segment %d", index)
            self.loopTimeChanged.emit(self._loop_timer.remaining)
            self._set_segment_index(index)
            await self._seek(self.segment_start, True)
            return
        self.loopTimeChanged.emit(self._loop_timer.remaining)
        start, end = self.segment_start, self.segment_end
        if start <= self._state.current_time < end:
            return
        # Only timer expiry changes the segment; overshoot just rewinds.
        stamp = self._clock()
        if (
            self._last_boundary_seek is not None
            and stamp - self._last_boundary_seek < self._config.boundary_debounce
        ):
            return
        self._last_boundary_seek = stamp
        await self._seek(start, True)

    async def _pause_at_passed_mark(self, previous: float):
        now = self._state.current_time
        tolerance = self._config.pause_at_mark_tolerance
        for mark in self._marks:
            # Forward-only: the mark was crossed since the previous sample.
            if previous < mark < now and now - mark < tolerance:
                logger.debug("Pausing at mark %.3f", mark)
                await self._seek(mark, False)
                return

    def _marks_mutated(self, relocate: bool):
        if len(self._marks) < 2 and self._loop.looping:
            self.stop_looping()
        if relocate:
            self._set_segment_index(
                segments.locate(self._marks, self._state.current_time)
            )
        else:
            self._set_segment_index(self._loop.segment_index)
        if self._store is not None and self._video is not None:
            if self._marks:
                self._store.save(self._video, self._marks)
            else:
                self._store.clear(self._video)
        self.marksChanged.emit(self.marks)

    def _reset_loop_timer(self, activate: bool = True):
        self._loop_timer.reset(activate)
        self._last_boundary_seek = None
        self.loopTimeChanged.emit(self._loop_timer.remaining)

    def _set_current_time(self, seconds: float):
        bounded = segments.clamp_time(seconds, self._state.duration)
        if bounded != self._state.current_time:
            self._state.current_time = bounded
            self.positionChanged.emit(bounded)

    def _set_playing(self, playing: bool):
        if playing:
            self._player.play()
        else:
            self._player.pause()
        if playing != self._state.playing:
            self._state.playing = playing
            self.stateChanged.emit("playing" if playing else "paused")

    def _set_looping(self, looping: bool):
        if looping != self._loop.looping:
            self._loop.looping = looping
            self.loopChanged.emit(looping)

    def _set_segment_index(self, index: int):
        if len(self._marks) < 2:
            index = 0
        else:
            index = min(max(index, 0), len(self._marks) - 2)
        if index != self._loop.segment_index:
            self._loop.segment_index = index
            self.segmentChanged.emit(index)

    def _onSeekStarted(self, _target: float):
        self.seekingChanged.emit(True)

    def _onSeekFinished(self, _target: float, _finished: bool):
        self.seekingChanged.emit(False)

    @staticmethod
    def _finite(value, what: str) -> float:
        try:
            number = float(value)
        except (TypeError, ValueError):
            number = math.nan
        if not math.isfinite(number):
            logger.warning("Invalid %s %r treated as 0", what, value)
            return 0.0
        return number


__all__ = ["PlaybackController", "PlaybackState", "LoopState"]
