"""Formatting of the command line help text."""

from __future__ import annotations

import os
import re
import subprocess
import sys
from typing import Iterable, List, Optional, TextIO

from remotecache.flags import HELP_FLAG, Flag

DEFAULT_WIDTH = 10000
MINIMUM_WIDTH = 30

_OPTION_OFFSET = 6
_TAB_MIN_WIDTH = 1
_TAB_PADDING = 2

HEADER = "bazel-remote - A remote build cache for Bazel and other REAPI clients\n\n"

_INTEGER = re.compile(r"[+-]?\d+")


def wrap_line(text: str, wrap_at: int, padding: str) -> str:
    """Wrap one line at word boundaries, prefixing continuation lines.

    Whitespace inside the line is not preserved exactly.
    """
    offset = len(padding)
    if wrap_at <= offset:
        return text
    if len(text) <= wrap_at - offset:
        return text

    target = wrap_at - offset
    words = text.split()
    if not words:
        return text

    wrapped = words[0]
    space_left = target - len(wrapped)
    for word in words[1:]:
        if len(word) + 1 > space_left:
            wrapped += "\n" + padding + word
            space_left = target - len(word)
        else:
            wrapped += " " + word
            space_left -= 1 + len(word)
    return wrapped


def wrap(text: str, offset: int, wrap_at: int) -> str:
    """Wrap possibly multi-line text, indenting later lines by offset spaces."""
    prefix = " " * offset
    return ("\n" + prefix).join(
        wrap_line(line, wrap_at, prefix) for line in text.split("\n")
    )


def _parse_width(value: str) -> Optional[int]:
    value = value.strip()
    if not _INTEGER.fullmatch(value):
        return None
    return max(int(value), MINIMUM_WIDTH)


def console_width() -> int:
    """Return the terminal width from COLUMNS or tput, never below the minimum."""
    columns = os.environ.get("COLUMNS", "")
    if columns:
        width = _parse_width(columns)
        if width is not None:
            return width

    try:
        result = subprocess.run(
            ["tput", "cols"],
            stdin=sys.stdin,
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, ValueError, subprocess.SubprocessError):
        return DEFAULT_WIDTH

    width = _parse_width(result.stdout)
    return DEFAULT_WIDTH if width is None else width


def _write_lines(rows: List[List[str]], widths: List[int], out: List[str]) -> None:
    for cells in rows:
        parts = []
        for index, cell in enumerate(cells):
            parts.append(cell)
            if index < len(widths):
                parts.append(" " * max(widths[index] - len(cell), 0))
        out.append("".join(parts))


def _format_block(
    rows: List[List[str]], widths: List[int], start: int, end: int, out: List[str]
) -> None:
    column = len(widths)
    current = start
    while current < end:
        if column >= len(rows[current]) - 1:
            current += 1
            continue
        _write_lines(rows[start:current], widths, out)
        start = current
        width = _TAB_MIN_WIDTH
        while current < end and column < len(rows[current]) - 1:
            width = max(width, len(rows[current][column]) + _TAB_PADDING)
            current += 1
        _format_block(rows, widths + [width], start, current, out)
        start = current
    _write_lines(rows[start:end], widths, out)


def _align_tabs(text: str) -> str:
    """Align tab separated cells into space padded columns."""
    rows = [line.split("\t") for line in text.split("\n")]
    out: List[str] = []
    _format_block(rows, [], 0, len(rows), out)
    return "\n".join(out)


def render_help(name: str, flags: Iterable[Flag], width: Optional[int] = None) -> str:
    """Return the full help text for a program and its flags."""
    if width is None:
        width = console_width()
    options = list(flags)
    if not any(flag.name == HELP_FLAG.name for flag in options):
        options.append(HELP_FLAG)

    parts = [HEADER, f"USAGE:\n   {name} [options]\n\nOPTIONS:\n   "]
    for index, option in enumerate(options):
        if index:
            parts.append("\n   ")
        parts.append(wrap(option.help_text(), _OPTION_OFFSET, width))
        parts.append("\n")
    return _align_tabs("".join(parts))


def print_help(out: TextIO, name: str, flags: Iterable[Flag]) -> None:
    """Write the help text, wrapped to the console width, to out."""
    out.write(render_help(name, flags, console_width()))