import pytest

from remotecache.grpc_idle import GrpcIdleTimer


class _RecordingTimer:
    def __init__(self):
        self.resets = 0

    def reset(self):
        self.resets += 1


def test_intercept_resets_and_returns_handler_result():
    timer = _RecordingTimer()
    wrapper = GrpcIdleTimer(timer)
    assert wrapper.intercept(lambda request: request * 2, 21) == 42
    assert timer.resets == 1


def test_each_request_resets_timer():
    timer = _RecordingTimer()
    wrapper = GrpcIdleTimer(timer)
    results = [wrapper.intercept(str, value) for value in range(5)]
    assert results == ["0", "1", "2", "3", "4"]
    assert timer.resets == 5


def test_reset_happens_before_handler_errors():
    timer = _RecordingTimer()
    wrapper = GrpcIdleTimer(timer)

    def failing(request):
        raise RuntimeError(request)

    with pytest.raises(RuntimeError, match="boom"):
        wrapper.intercept(failing, "boom")
    assert timer.resets == 1