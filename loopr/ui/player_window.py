"""Player window: preview, status line and keyboard bindings for one session."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import QLabel, QMainWindow, QVBoxLayout, QWidget

from ..session import PlayerSession
from ..utils.timefmt import (
    format_countdown,
    format_segment,
    format_step,
    format_stopwatch,
    format_time,
)
from .preview import VideoPreviewWidget

logger = logging.getLogger(__name__)


class PlayerWindow(QMainWindow):
    def __init__(self, session: PlayerSession, title: str = "Loopr", frame_source=None):
        super().__init__()
        self.session = session
        self.controller = session.controller
        self.setWindowTitle(title)
        self.resize(960, 600)
        self._createLayout()
        self._tasks = set()
        self._createShortcuts()
        if frame_source is not None:
            frame_source.frameReady.connect(self.preview.showFrame)
        c = self.controller
        for signal in (
            c.positionChanged,
            c.stateChanged,
            c.marksChanged,
            c.loopChanged,
            c.segmentChanged,
            c.loopTimeChanged,
            c.stepSizeChanged,
            c.timerChanged,
        ):
            signal.connect(self.refresh)
        session.exitRequested.connect(self.close)
        self.refresh()

    def _createLayout(self):
        central = QWidget()
        layout = QVBoxLayout(central)
        self.preview = VideoPreviewWidget()
        layout.addWidget(self.preview, 1)
        self.position_label = QLabel()
        self.marks_label = QLabel()
        self.loop_label = QLabel()
        for label in (self.position_label, self.marks_label, self.loop_label):
            layout.addWidget(label)
        self.setCentralWidget(central)

    def _createShortcuts(self):
        c = self.controller
        bindings = {
            "Space": c.toggle_play_pause,
            "Left": c.seek_backward,
            "Right": c.seek_forward,
            "S": c.toggle_seek_step_size,
            "M": c.toggle_mark,
            "C": c.clear_marks,
            "L": c.toggle_loop,
            "[": c.previous_segment,
            "]": c.next_segment,
            "Shift+Left": c.jump_to_previous_mark,
            "Shift+Right": c.jump_to_next_mark,
            "Alt+Left": c.finetune_mark_left,
            "Alt+Right": c.finetune_mark_right,
            "T": c.start_timer,
            "Escape": self.session.handle_back,
        }
        self._shortcuts = []
        for key, action in bindings.items():
            shortcut = QShortcut(QKeySequence(key), self)
            shortcut.activated.connect(lambda action=action: self._dispatch(action))
            self._shortcuts.append(shortcut)

    def _dispatch(self, action):
        result = action()
        if asyncio.iscoroutine(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._onTaskDone)

    def _onTaskDone(self, task):
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Player action failed", exc_info=task.exception())

    def refresh(self, *_args):
        c = self.controller
        state = "Playing" if c.is_playing else "Paused"
        self.position_label.setText(
            f"{state}  {format_time(c.current_time)} / {format_time(c.duration)}"
            f"  step {format_step(c.seek_step_size)}"
        )
        marks = ", ".join(format_time(m) for m in c.marks) or "none"
        self.marks_label.setText(f"Marks: {marks}")
        parts = [format_segment(c.current_segment_index, c.segment_count)]
        if c.is_looping:
            parts.append(f"looping {format_countdown(c.loop_time_remaining)}")
        if c.is_timer_running:
            parts.append(f"timer {format_stopwatch(c.timer_seconds)}")
        self.loop_label.setText("  ".join(parts))

    def closeEvent(self, event):  # noqa: D401 - Qt override
        if self.session.is_open:
            self.session.close()
        super().closeEvent(event)


__all__ = ["PlayerWindow"]
