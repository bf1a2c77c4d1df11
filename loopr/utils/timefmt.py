"""Time formatting utilities for player labels and overlays.

- ``format_time``: playback position as MM:SS, or H:MM:SS past an hour.
- ``format_step``: seek step size, "5s" or "0.5s".
- ``format_countdown``: loop countdown, "30s".
- ``format_segment``: current segment, "[2/3]".
- ``format_stopwatch``: practice timer, "1:10".
"""

from __future__ import annotations

import math

__all__ = [
    "format_time",
    "format_step",
    "format_countdown",
    "format_segment",
    "format_stopwatch",
]


def format_time(seconds: float) -> str:
    """Return MM:SS (or H:MM:SS) for a position in seconds.

    NaN, infinite and negative values display as 00:00. Fractions are
    truncated, matching what a running clock shows.
    """
    if not math.isfinite(seconds) or seconds < 0:
        return "00:00"
    total = int(seconds)
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def format_step(step: float) -> str:
    if float(step).is_integer():
        return f"{int(step)}s"
    return f"{step:.1f}s"


def format_countdown(remaining: float) -> str:
    return f"{max(0, int(remaining))}s"


def format_segment(index: int, count: int) -> str:
    return f"[{index + 1}/{max(1, count)}]"


def format_stopwatch(seconds: int) -> str:
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes}:{secs:02d}"
