from loopr.core.loop_timer import LoopTimer
from loopr.core.session_timer import SessionTimer


def test_loop_timer_counts_only_while_active_and_playing():
    timer = LoopTimer(30.0)
    assert not timer.tick(1.0, playing=True)
    assert timer.remaining == 30.0
    timer.reset()
    assert not timer.tick(1.0, playing=False)
    assert timer.remaining == 30.0
    assert not timer.tick(1.5, playing=True)
    assert timer.remaining == 28.5


def test_loop_timer_fires_and_resets():
    timer = LoopTimer(2.0)
    timer.reset()
    assert not timer.tick(1.0, playing=True)
    assert timer.tick(1.0, playing=True)
    assert timer.active
    assert timer.remaining == 2.0


def test_disable_keeps_remaining():
    timer = LoopTimer(30.0)
    timer.reset()
    timer.tick(5.0, playing=True)
    timer.disable()
    assert not timer.active
    assert timer.remaining == 25.0


def test_session_timer(clock):
    timer = SessionTimer(clock)
    assert not timer.update()
    timer.start()
    clock.now += 70.4
    assert timer.update()
    assert timer.seconds == 70
    assert not timer.update()
    timer.start()
    assert timer.seconds == 0 and timer.running


def test_reset_without_activating():
    timer = LoopTimer(30.0)
    timer.reset()
    timer.tick(12.0, playing=True)
    timer.disable()
    timer.reset(activate=False)
    assert not timer.active
    assert timer.remaining == 30.0
