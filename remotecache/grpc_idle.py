"""Resetting an idle timer at the start of every gRPC request."""

from __future__ import annotations

from typing import Any, Callable

from remotecache.idle import IdleTimer


class GrpcIdleTimer:
    """Wraps an IdleTimer and resets it before each request is handled."""

    def __init__(self, idle_timer: IdleTimer) -> None:
        self._idle_timer = idle_timer

    def intercept(self, handler: Callable[[Any], Any], request: Any) -> Any:
        """Reset the idle timer, then return handler(request)."""
        self._idle_timer.reset()
        return handler(request)