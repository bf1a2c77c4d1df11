import asyncio

from loopr.core.seek import SeekCoordinator


def _coordinator(player, duration=90.0):
    seeker = SeekCoordinator(player)
    seeker.duration = duration
    return seeker


def test_seek_clamps_target(player):
    seeker = _coordinator(player)
    result = asyncio.run(seeker.seek_to(120.0))
    assert result.finished and result.target == 90.0
    assert player.seeks == [90.0]
    result = asyncio.run(seeker.seek_to(-4.0))
    assert result.target == 0.0


def test_overlapping_seek_is_rejected(player):
    player.hold = True
    seeker = _coordinator(player)
    events = []
    seeker.seekStarted.connect(lambda t: events.append(("started", t)))
    seeker.seekFinished.connect(lambda t, ok: events.append(("finished", t, ok)))

    async def scenario():
        first = asyncio.ensure_future(seeker.seek_to(10.0))
        await asyncio.sleep(0)
        assert seeker.in_progress
        assert await seeker.seek_to(20.0) is None
        player.complete(True)
        return await first

    result = asyncio.run(scenario())
    assert result.finished and result.target == 10.0
    assert player.seeks == [10.0]
    assert not seeker.in_progress
    assert events == [("started", 10.0), ("finished", 10.0, True)]


def test_completion_runs_before_flag_clears(player):
    seeker = _coordinator(player)
    seen = []
    asyncio.run(seeker.seek_to(5.0, lambda result: seen.append(seeker.in_progress)))
    assert seen == [True]


def test_player_error_is_an_unfinished_seek(player):
    player.fail = True
    seeker = _coordinator(player)
    results = []
    result = asyncio.run(seeker.seek_to(5.0, results.append))
    assert not result.finished
    assert results == [result]
    assert not seeker.in_progress


def test_invalid_duration_clamps_to_zero(player):
    seeker = _coordinator(player, duration=float("nan"))
    assert seeker.duration == 0.0
    assert asyncio.run(seeker.seek_to(30.0)).target == 0.0
