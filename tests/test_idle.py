import threading
import time

from remotecache.idle import IdleTimer


def test_idle_timer():
    tear_down = threading.Event()
    timer = IdleTimer(1.0)
    timer.register(tear_down)
    timer.start()

    for _ in range(5):
        assert not tear_down.wait(0.5), "unexpected timeout"
        timer.reset()

    assert tear_down.wait(2.0), "expected idle timer to trigger"


def test_all_registered_events_notified():
    first = threading.Event()
    second = threading.Event()
    timer = IdleTimer(0.0)
    timer.register(first)
    timer.register(second)
    started = time.monotonic()
    timer.start()
    assert first.wait(3.0)
    assert second.wait(0.5)
    assert time.monotonic() - started >= 0.9