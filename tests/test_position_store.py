from datetime import datetime

from loopr.services.position_store import PositionStore


def test_position_round_trip(qsettings, video):
    store = PositionStore(qsettings)
    assert store.get_position(video) is None
    store.save_position(video, 42.5)
    assert store.get_position(video) == 42.5
    store.clear_position(video)
    assert store.get_position(video) is None


def test_last_played(qsettings, video):
    store = PositionStore(qsettings)
    assert store.get_last_played(video) is None
    when = datetime(2024, 5, 1, 12, 30)
    store.update_last_played(video, when)
    assert store.get_last_played(video) == when


def test_purge_removes_everything(qsettings, video):
    store = PositionStore(qsettings)
    store.save_position(video, 10.0)
    store.update_last_played(video)
    store.purge(video)
    assert store.get_position(video) is None
    assert store.get_last_played(video) is None


def test_corrupt_value_reads_as_none(qsettings, video):
    qsettings.setValue(f"positions/{video.key}", "garbage")
    assert PositionStore(qsettings).get_position(video) is None
