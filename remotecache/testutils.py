"""Helpers for producing random blobs and quiet loggers."""

from __future__ import annotations

import hashlib
import logging
import os
from typing import Tuple

from remotecache.validate import Digest


def random_data_and_hash(size: int) -> Tuple[bytes, str]:
    """Return a random blob of the given size and its hex SHA256 hash."""
    data = os.urandom(size)
    return data, hashlib.sha256(data).hexdigest()


def random_data_and_digest(size: int) -> Tuple[bytes, Digest]:
    """Return a random blob of the given size and its Digest."""
    data, hash_value = random_data_and_hash(size)
    return data, Digest(hash=hash_value, size_bytes=size)


def new_silent_logger() -> logging.Logger:
    """Return a logger that discards everything it is given."""
    logger = logging.getLogger("remotecache.silent")
    logger.handlers[:] = [logging.NullHandler()]
    logger.propagate = False
    return logger