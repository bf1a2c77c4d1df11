"""QLabel-based frame preview fed by ``ClipMediaPlayer.frameReady``."""

from __future__ import annotations

import numpy as np
from PySide6.QtCore import QSize, Qt
from PySide6.QtGui import QImage, QPixmap
from PySide6.QtWidgets import QLabel, QSizePolicy


class VideoPreviewWidget(QLabel):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setAlignment(Qt.AlignCenter)
        self.setStyleSheet("background:#000;color:#fff;font-size:24px;")
        # Last raw frame, rescaled on resize without waiting for a new decode.
        self._last_frame = None
        # Ignored policy lets layouts shrink the label below the last pixmap size.
        self.setSizePolicy(QSizePolicy.Ignored, QSizePolicy.Ignored)

    def sizeHint(self):  # type: ignore[override]
        return QSize(320, 180)

    def showFrame(self, frame, t: float):
        if frame is None:
            return
        self._last_frame = np.ascontiguousarray(frame, dtype=np.uint8)
        self._renderFrame()

    def _renderFrame(self):
        frame = self._last_frame
        if frame is None or self.width() <= 0 or self.height() <= 0:
            return
        if frame.ndim == 2:
            frame = np.ascontiguousarray(np.stack([frame] * 3, axis=-1))
        h, w = frame.shape[0], frame.shape[1]
        qimg = QImage(frame.data, w, h, w * 3, QImage.Format.Format_RGB888)
        scaled = qimg.scaled(
            self.width(), self.height(), Qt.KeepAspectRatio, Qt.FastTransformation
        )
        self.setPixmap(QPixmap.fromImage(scaled))

    def resizeEvent(self, event):  # noqa: D401 - Qt override
        self._renderFrame()
        super().resizeEvent(event)


__all__ = ["VideoPreviewWidget"]
