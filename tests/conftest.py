import asyncio
import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtCore import QSettings  # noqa: E402
from PySide6.QtWidgets import QApplication  # noqa: E402

from loopr.core.identity import VideoIdentity  # noqa: E402
from loopr.core.seek import SeekResult  # noqa: E402
from loopr.services.mark_store import FileMarkStore  # noqa: E402

_app = None


def _ensure_app():
    global _app
    if _app is None:
        _app = QApplication.instance() or QApplication([])
    return _app


class FakePlayer:
    """Media player double with controllable seek completion.

    With ``hold`` set, ``seek`` suspends until ``complete()`` is called.
    """

    def __init__(self, duration=90.0):
        self.playing = False
        self.time = 0.0
        self.seeks = []
        self.hold = False
        self.finished = True
        self.fail = False
        self._duration = duration
        self._pending = None

    def play(self):
        self.playing = True

    def pause(self):
        self.playing = False

    def current_playback_time(self):
        return self.time

    def duration(self):
        return self._duration

    async def seek(self, seconds):
        self.seeks.append(seconds)
        if self.fail:
            raise RuntimeError("decoder went away")
        if self.hold:
            self._pending = asyncio.get_running_loop().create_future()
            finished = await self._pending
        else:
            await asyncio.sleep(0)
            finished = self.finished
        if finished:
            self.time = seconds
        return SeekResult(finished=finished)

    def complete(self, finished=True):
        self._pending.set_result(finished)


class ManualClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture(autouse=True)
def qt_app():
    return _ensure_app()


@pytest.fixture
def player():
    return FakePlayer()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def video(tmp_path):
    return VideoIdentity.from_location(tmp_path / "clip.mp4")


@pytest.fixture
def mark_store(tmp_path):
    return FileMarkStore(tmp_path / "marks")


@pytest.fixture
def qsettings(tmp_path):
    return QSettings(str(tmp_path / "loopr.ini"), QSettings.Format.IniFormat)
