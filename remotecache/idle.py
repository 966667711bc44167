"""An idle timer that notifies listeners when no request arrives in time."""

from __future__ import annotations

import threading
import time
from typing import List

_TICK = 1.0


class IdleTimer:
    """Tracks request activity and sets registered events on idle timeout."""

    def __init__(self, timeout: float) -> None:
        self._timeout = timeout
        self._lock = threading.Lock()
        self._last_request = time.monotonic()
        self._notify: List[threading.Event] = []

    def register(self, event: threading.Event) -> None:
        """Add an event to be set once the idle timeout is reached."""
        with self._lock:
            self._notify.append(event)

    def start(self) -> None:
        """Start watching for idleness in a background thread."""
        threading.Thread(target=self._run, daemon=True).start()

    def _run(self) -> None:
        while True:
            time.sleep(_TICK)
            with self._lock:
                elapsed = time.monotonic() - self._last_request
                listeners = list(self._notify)
            if elapsed > self._timeout:
                for event in listeners:
                    event.set()
                return

    def reset(self) -> None:
        """Restart the countdown; call at the start of every request."""
        now = time.monotonic()
        with self._lock:
            self._last_request = now