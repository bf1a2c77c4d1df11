import math

from loopr.core import segments

MARKS = [10.0, 40.0, 70.0]


def test_segment_count():
    assert segments.segment_count([]) == 0
    assert segments.segment_count([5.0]) == 0
    assert segments.segment_count(MARKS) == 2


def test_segment_bounds():
    assert segments.segment_start(MARKS, 1) == 40.0
    assert segments.segment_end(MARKS, 1, 90.0) == 70.0
    # Out of range falls back to the whole video.
    assert segments.segment_start(MARKS, 2) == 0.0
    assert segments.segment_end(MARKS, 2, 90.0) == 90.0
    assert segments.segment_start([5.0], 0) == 0.0


def test_locate_inside_segments():
    for time in (10.0, 25.0, 39.999, 40.0, 55.0, 69.9):
        i = segments.locate(MARKS, time)
        assert MARKS[i] <= time < MARKS[i + 1]


def test_locate_edges():
    assert segments.locate(MARKS, 70.0) == 1
    assert segments.locate(MARKS, 85.0) == 1
    assert segments.locate(MARKS, 3.0) == 0
    assert segments.locate([12.0], 50.0) == 0
    assert segments.locate([], 50.0) == 0


def test_find_nearest():
    assert segments.find_nearest([], 3.0) is None
    assert segments.find_nearest(MARKS, 52.0) == 1
    assert segments.find_nearest(MARKS, 56.0) == 2


def test_find_within_tolerance():
    assert segments.find_within_tolerance(MARKS, 40.3, 0.5) == 1
    assert segments.find_within_tolerance(MARKS, 40.6, 0.5) is None
    assert segments.find_within_tolerance([], 1.0, 0.5) is None


def test_next_and_previous_mark_wrap():
    assert segments.next_mark(MARKS, 20.0, 0.1) == 40.0
    assert segments.next_mark(MARKS, 75.0, 0.1) == 10.0
    # A mark right at the position does not count as "next".
    assert segments.next_mark(MARKS, 40.05, 0.1) == 70.0
    assert segments.previous_mark(MARKS, 50.0, 0.1) == 40.0
    assert segments.previous_mark(MARKS, 5.0, 0.1) == 70.0
    assert segments.next_mark([], 5.0, 0.1) is None
    assert segments.previous_mark([], 5.0, 0.1) is None


def test_clamp_time():
    assert segments.clamp_time(-3.0, 90.0) == 0.0
    assert segments.clamp_time(120.0, 90.0) == 90.0
    assert segments.clamp_time(math.nan, 90.0) == 0.0
    assert segments.clamp_time(12.0, math.inf) == 0.0


def test_normalize_marks():
    values = [40.0, 10.0, 10.2, -1.0, math.nan, 70.0, 40.0]
    assert segments.normalize_marks(values, 0.5) == [10.0, 40.0, 70.0]
