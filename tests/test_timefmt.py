import math

from loopr.utils.timefmt import (
    format_countdown,
    format_segment,
    format_step,
    format_stopwatch,
    format_time,
)


def test_format_time_edge_cases():
    assert format_time(-1.0) == "00:00"
    assert format_time(math.nan) == "00:00"
    assert format_time(math.inf) == "00:00"
    assert format_time(0.0) == "00:00"
    assert format_time(59.9) == "00:59"
    assert format_time(61.0) == "01:01"
    assert format_time(3600 + 62.5) == "1:01:02"


def test_overlay_formats():
    assert format_step(5.0) == "5s"
    assert format_step(0.5) == "0.5s"
    assert format_countdown(29.6) == "29s"
    assert format_countdown(-0.5) == "0s"
    assert format_segment(0, 2) == "[1/2]"
    assert format_segment(0, 0) == "[1/1]"
    assert format_stopwatch(70) == "1:10"
