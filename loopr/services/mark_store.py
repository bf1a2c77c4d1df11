"""Durable per-video mark lists.

``FileMarkStore`` keeps one ``<identity key>.marks`` file per video inside a
store directory, one float per line. Reads never fail (missing or unreadable
data is an empty list) and writes replace the file atomically. Durability is
best effort: errors are logged and the player keeps working from memory.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List, Protocol, Sequence, Tuple, Union

from ..core.identity import VideoIdentity

logger = logging.getLogger(__name__)

MARKS_SUFFIX = ".marks"


class MarkStore(Protocol):
    def load(self, video: VideoIdentity) -> List[float]: ...

    def save(self, video: VideoIdentity, marks: Sequence[float]) -> None: ...

    def clear(self, video: VideoIdentity) -> None: ...


class FileMarkStore:
    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def path_for(self, video: VideoIdentity) -> Path:
        return self.directory / f"{video.key}{MARKS_SUFFIX}"

    def load(self, video: VideoIdentity) -> List[float]:
        path = self.path_for(video)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except (OSError, UnicodeDecodeError):
            logger.warning("Could not read marks from %s", path, exc_info=True)
            return []
        marks = []
        for line in text.splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                marks.append(float(line))
            except ValueError:
                logger.warning("Skipping corrupt mark %r in %s", line, path)
        return sorted(marks)

    def save(self, video: VideoIdentity, marks: Sequence[float]) -> None:
        path = self.path_for(video)
        tmp = path.with_suffix(MARKS_SUFFIX + ".tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp.write_text("\n".join(repr(float(m)) for m in marks), encoding="utf-8")
            os.replace(tmp, path)
        except OSError:
            logger.warning("Could not save marks to %s", path, exc_info=True)

    def clear(self, video: VideoIdentity) -> None:
        path = self.path_for(video)
        try:
            path.unlink(missing_ok=True)
        except OSError:
            logger.warning("Could not remove %s", path, exc_info=True)


class MemoryMarkStore:
    """Non-durable store for sessions without a marks directory."""

    def __init__(self):
        self._marks: Dict[str, Tuple[float, ...]] = {}

    def load(self, video: VideoIdentity) -> List[float]:
        return sorted(self._marks.get(video.key, ()))

    def save(self, video: VideoIdentity, marks: Sequence[float]) -> None:
        self._marks[video.key] = tuple(marks)

    def clear(self, video: VideoIdentity) -> None:
        self._marks.pop(video.key, None)


__all__ = ["MarkStore", "FileMarkStore", "MemoryMarkStore", "MARKS_SUFFIX"]
