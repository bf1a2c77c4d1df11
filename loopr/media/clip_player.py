"""MoviePy-backed media player used by the desktop shell.

Implements the media player contract the playback controller consumes
(``play``/``pause``/``current_playback_time``/``duration``/``seek``) on top of a
MoviePy clip. Frames are decoded on the GUI thread from a precise QTimer whose
interval is derived from the clip fps; wall clock elapsed time is used to skip
frames when decoding falls behind.

Seeks complete on the next event loop turn. A seek that is overtaken by a later
one before it completes reports ``finished=False``, the same contract hardware
players give for superseded seeks. The reported position after a seek is the
exact target, not the start of the frame that contains it. Running off the end
of the clip pauses the player at ``duration`` and emits ``ended``.

Signals:
    frameReady(np.ndarray, float)   # frame array + timestamp seconds
    stateChanged(str)               # 'stopped'|'playing'|'paused'
    clipLoaded(float)               # duration
    ended()                         # playback reached the end of the clip
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from time import perf_counter
from typing import Optional

from moviepy import VideoFileClip
from PySide6.QtCore import QMutex, QMutexLocker, QObject, Qt, QTimer, Signal

from ..core.seek import SeekResult

logger = logging.getLogger(__name__)

DEFAULT_FPS = 24.0


@dataclass
class FrameClock:
    current_frame: int = 0
    total_frames: int = 0
    fps: float = DEFAULT_FPS
    # Exact playback position; may sit inside ``current_frame`` after a seek.
    position: float = 0.0


class ClipMediaPlayer(QObject):
    frameReady = Signal(object, float)
    stateChanged = Signal(str)
    clipLoaded = Signal(float)
    ended = Signal()

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._clip = None
        self._mutex = QMutex()
        self._clock = FrameClock()
        self._playing = False
        self._play_start_time: Optional[float] = None
        self._seek_generation = 0
        self._timer = QTimer(self)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.timeout.connect(self._tick)

    def load(self, source):
        """Load a file path or an already constructed MoviePy clip."""
        if isinstance(source, str):
            try:
                clip = VideoFileClip(source)
            except OSError as e:
                raise RuntimeError(f"Cannot open video {source}: {e}") from e
        else:
            clip = source
        self.pause()
        self._clip = clip
        fps = float(getattr(clip, "fps", None) or DEFAULT_FPS)
        duration = self.duration()
        total_frames = int(round(fps * duration)) if duration > 0 else 0
        self._clock = FrameClock(current_frame=0, total_frames=total_frames, fps=fps)
        logger.info("Loaded clip: %.3fs at %.2f fps", duration, fps)
        self.clipLoaded.emit(duration)
        self.stateChanged.emit("stopped")
        self._emit_current_frame()

    def close(self):
        self.pause()
        if self._clip is not None:
            self._clip.close()
            self._clip = None

    @property
    def is_playing(self) -> bool:
        return self._playing

    # Media player contract
    def play(self):
        if self._clip is None:
            return
        if self._clock.position >= self.duration():
            self._clock.current_frame = 0
            self._clock.position = 0.0
        if not self._timer.isActive():
            self._play_start_time = perf_counter() - self._clock.position
            self._timer.start(int(1000 / self._clock.fps))
        self._playing = True
        self.stateChanged.emit("playing")

    def pause(self):
        if self._timer.isActive():
            self._timer.stop()
        self._playing = False
        self.stateChanged.emit("paused")

    def current_playback_time(self) -> float:
        if self._clip is None or self._clock.total_frames <= 0:
            return 0.0
        return self._clock.position

    def duration(self) -> float:
        if self._clip is None:
            return 0.0
        return float(getattr(self._clip, "duration", None) or 0.0)

    async def seek(self, seconds: float) -> SeekResult:
        self._seek_generation += 1
        generation = self._seek_generation
        # Let the event loop run once so overlapping requests can supersede us.
        await asyncio.sleep(0)
        if generation != self._seek_generation or self._clip is None:
            return SeekResult(finished=False, target=seconds)
        position = max(0.0, min(float(seconds), self.duration()))
        last_frame = max(0, self._clock.total_frames - 1)
        self._clock.current_frame = min(int(position * self._clock.fps), last_frame)
        self._clock.position = position
        if self._playing:
            self._play_start_time = perf_counter() - position
        self._emit_current_frame()
        return SeekResult(finished=True, target=seconds)

    # Internal
    def _emit_current_frame(self):
        if self._clip is None:
            return
        frame_time = self._clock.current_frame / self._clock.fps
        with QMutexLocker(self._mutex):
            frame = self._clip.get_frame(frame_time)
        self.frameReady.emit(frame, self.current_playback_time())

    def _tick(self):
        if self._clip is None:
            self._timer.stop()
            return
        target_index = self._clock.current_frame + 1
        if self._play_start_time is not None:
            desired = int((perf_counter() - self._play_start_time) * self._clock.fps)
            # Jump ahead instead of queueing up late frames.
            if desired > target_index:
                target_index = desired
        if target_index >= self._clock.total_frames:
            self.pause()
            self._clock.current_frame = max(0, self._clock.total_frames - 1)
            self._clock.position = self.duration()
            logger.debug("Reached end of clip at %.3f", self._clock.position)
            self.ended.emit()
            return
        self._clock.current_frame = target_index
        self._clock.position = target_index / self._clock.fps
        self._emit_current_frame()


__all__ = ["ClipMediaPlayer", "FrameClock"]
