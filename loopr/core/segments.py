"""Pure segment math over an ascending list of mark timestamps.

Segment ``i`` is the half-open interval ``[marks[i], marks[i + 1])``. Nothing
here mutates its inputs; the controller relies on these for mark toggling,
segment navigation and loop boundary checks.
"""

from __future__ import annotations

import math
from bisect import bisect_right
from typing import Iterable, List, Optional, Sequence

__all__ = [
    "segment_count",
    "segment_start",
    "segment_end",
    "locate",
    "find_nearest",
    "find_within_tolerance",
    "next_mark",
    "previous_mark",
    "clamp_time",
    "normalize_marks",
]


def segment_count(marks: Sequence[float]) -> int:
    return max(0, len(marks) - 1)


def segment_start(marks: Sequence[float], index: int) -> float:
    if 0 <= index < len(marks) - 1:
        return marks[index]
    return 0.0


def segment_end(marks: Sequence[float], index: int, duration: float) -> float:
    if 0 <= index < len(marks) - 1:
        return marks[index + 1]
    return duration


def locate(marks: Sequence[float], time: float) -> int:
    """Index of the segment containing ``time``.

    Times before the first mark map to segment 0, times at or past the last
    mark map to the last segment.
    """
    if len(marks) < 2:
        return 0
    index = bisect_right(marks, time) - 1
    return min(max(index, 0), len(marks) - 2)


def find_nearest(marks: Sequence[float], time: float) -> Optional[int]:
    if not marks:
        return None
    return min(range(len(marks)), key=lambda i: abs(marks[i] - time))


def find_within_tolerance(
    marks: Sequence[float], time: float, tolerance: float
) -> Optional[int]:
    for i, mark in enumerate(marks):
        if abs(mark - time) < tolerance:
            return i
    return None


def next_mark(marks: Sequence[float], time: float, tolerance: float) -> Optional[float]:
    """First mark after ``time + tolerance``, wrapping to the earliest mark."""
    if not marks:
        return None
    for mark in marks:
        if mark > time + tolerance:
            return mark
    return min(marks)


def previous_mark(
    marks: Sequence[float], time: float, tolerance: float
) -> Optional[float]:
    """Last mark before ``time - tolerance``, wrapping to the latest mark."""
    if not marks:
        return None
    for mark in reversed(marks):
        if mark < time - tolerance:
            return mark
    return max(marks)


def clamp_time(time: float, duration: float) -> float:
    if not math.isfinite(duration) or duration < 0:
        duration = 0.0
    if not math.isfinite(time):
        return 0.0
    return min(max(time, 0.0), duration)


def normalize_marks(values: Iterable[float], tolerance: float) -> List[float]:
    """Sort, drop non-finite/negative values and near-duplicates."""
    result: List[float] = []
    for value in sorted(v for v in values if math.isfinite(v) and v >= 0):
        if result and value - result[-1] < tolerance:
            continue
        result.append(value)
    return result
