"""Creation of uniquely named, not-yet-complete files."""

from __future__ import annotations

import os
import stat
import threading
import time
from typing import BinaryIO, Optional, Tuple

END_MODE = 0o666
WIP_MODE = END_MODE | stat.S_ISGID
_ATTEMPTS = 10000


class TempFileError(OSError):
    """Raised when no unused temp file name could be found."""


class Creator:
    """Creates temp files named <base>-<random> using a fast LCG."""

    def __init__(self, seed: Optional[int] = None) -> None:
        if seed is None:
            seed = time.time_ns()
        self._state = seed & 0xFFFFFFFF
        self._lock = threading.Lock()

    def next_random(self) -> str:
        """Advance the generator and return a nine digit string."""
        with self._lock:
            self._state = (self._state * 1664525 + 1013904223) & 0xFFFFFFFF
            value = self._state
        return f"{value % 1_000_000_000:09d}"

    def create(self, base: str, legacy: bool = False) -> Tuple[BinaryIO, str]:
        """Create a new file with the setgid bit set, marking it unfinished.

        Returns the open file and the random part of its name. Once written,
        the caller should chmod it to END_MODE.
        """
        opener = lambda path, flags: os.open(path, flags, WIP_MODE)  # noqa: E731
        for _ in range(_ATTEMPTS):
            random_part = self.next_random()
            name = f"{base}-{random_part}"
            if legacy:
                name += ".v1"
            try:
                handle = open(name, "xb+", opener=opener)
            except FileExistsError:
                continue
            return handle, random_part
        raise TempFileError("Failed to create a temp file")