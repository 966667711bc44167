"""Raising the limit on the number of open files."""

from __future__ import annotations

import logging
import resource
import subprocess
import sys
from typing import Optional, Tuple

_log = logging.getLogger(__name__)


def _darwin_max_files() -> int:
    output = subprocess.run(
        ["/usr/sbin/sysctl", "-n", "kern.maxfilesperproc"],
        check=True,
        capture_output=True,
        text=True,
    ).stdout
    return int(output.strip("\n"))


def raise_open_files_limit() -> Optional[Tuple[int, int]]:
    """Raise the soft RLIMIT_NOFILE to the hard limit.

    Returns the (soft, hard) pair that was set, or None if it failed.
    """
    try:
        soft, hard = resource.getrlimit(resource.RLIMIT_NOFILE)
    except (OSError, ValueError) as err:
        _log.warning("Failed to find rlimit from getrlimit: %s", err)
        return None

    if sys.platform == "darwin":
        # getrlimit does not report the real hard limit on macOS.
        try:
            sysctl_max = _darwin_max_files()
        except (OSError, subprocess.CalledProcessError) as err:
            _log.warning("Failed to find rlimit from sysctl: %s", err)
            return None
        except ValueError as err:
            _log.warning("Failed to parse rlimit from sysctl: %s", err)
            return None
        if hard == resource.RLIM_INFINITY or hard > sysctl_max:
            hard = sysctl_max

    _log.info("Initial RLIMIT_NOFILE cur: %d max: %d", soft, hard)
    soft = hard
    _log.info("Setting RLIMIT_NOFILE cur: %d max: %d", soft, hard)

    try:
        resource.setrlimit(resource.RLIMIT_NOFILE, (soft, hard))
    except (OSError, ValueError) as err:
        _log.warning("Failed to set rlimit: %s", err)
        return None
    return soft, hard