import io
import subprocess

import pytest

from remotecache import usage
from remotecache.flags import Flag, FlagKind
from remotecache.usage import (
    console_width,
    print_help,
    render_help,
    wrap,
    wrap_line,
)

FOX = "the quick brown fox jumped over the lazy dog"


@pytest.mark.parametrize(
    "wrap_at, padding, expected",
    [
        (
            10,
            "__",
            "the\n__quick\n__brown\n__fox\n__jumped\n__over the\n__lazy dog",
        ),
        (50, "__", FOX),
    ],
)
def test_wrap_line(wrap_at, padding, expected):
    assert wrap_line(FOX, wrap_at, padding) == expected


def test_wrap_line_too_narrow_returns_input():
    assert wrap_line(FOX, 2, "____") == FOX


def test_wrap_line_whitespace_only_returns_input():
    text = " " * 40
    assert wrap_line(text, 10, "  ") == text


def test_wrap():
    text = (
        "the quick brown fox jumped over the lazy dog\n"
        "the second line is even longer than the first, with some super important\n"
        "information that overflows\n"
        "and finally a fourth line with some gibberish"
    )
    expected = (
        "the quick brown fox\n"
        "  jumped over the lazy\n"
        "  dog\n"
        "  the second line is even\n"
        "  longer than the first,\n"
        "  with some super\n"
        "  important\n"
        "  information that\n"
        "  overflows\n"
        "  and finally a fourth\n"
        "  line with some\n"
        "  gibberish"
    )
    assert wrap(text, 2, 25) == expected


def _sample_flags():
    return [
        Flag(
            name="foo",
            kind=FlagKind.STRING,
            default="42",
            usage="you really should specify this value, otherwise some terrible things will happen",
            env_vars=("FOO",),
        ),
        Flag(
            name="bar",
            kind=FlagKind.INT,
            default=1,
            usage="this is another flag with a description long enough to test the wrapping",
            env_vars=("BAR",),
        ),
    ]


EXPECTED_HELP = """bazel-remote - A remote build cache for Bazel and other REAPI clients

USAGE:
   cli.test [options]

OPTIONS:
   --foo value you really should
      specify this value, otherwise
      some terrible things will
      happen (default: "42") [$FOO]

   --bar value this is another
      flag with a description long
      enough to test the wrapping
      (default: 1) [$BAR]

   --help, -h show help
      (default: false)
"""


def test_render_help():
    assert render_help("cli.test", _sample_flags(), 35) == EXPECTED_HELP


def test_print_help_uses_columns(monkeypatch):
    monkeypatch.setenv("COLUMNS", "35")
    out = io.StringIO()
    print_help(out, "cli.test", _sample_flags())
    assert out.getvalue() == EXPECTED_HELP


def test_wide_help_aligns_tab_with_padding():
    text = render_help("cli.test", _sample_flags(), 1000)
    assert "   --foo value  you really should specify" in text
    assert "\t" not in text


def test_console_width_from_columns(monkeypatch):
    monkeypatch.setenv("COLUMNS", "120")
    assert console_width() == 120


def test_console_width_minimum(monkeypatch):
    monkeypatch.setenv("COLUMNS", "10")
    assert console_width() == usage.MINIMUM_WIDTH


def test_console_width_falls_back_when_tput_fails(monkeypatch):
    monkeypatch.delenv("COLUMNS", raising=False)

    def failing_run(*args, **kwargs):
        raise OSError("no tput")

    monkeypatch.setattr(subprocess, "run", failing_run)
    assert console_width() == usage.DEFAULT_WIDTH


@pytest.mark.parametrize(
    "output, expected",
    [("80\n", 80), ("20\n", usage.MINIMUM_WIDTH), ("junk\n", usage.DEFAULT_WIDTH)],
)
def test_console_width_from_tput(monkeypatch, output, expected):
    monkeypatch.setenv("COLUMNS", "not-a-number")

    def fake_run(args, **kwargs):
        return subprocess.CompletedProcess(args, 0, stdout=output, stderr="")

    monkeypatch.setattr(subprocess, "run", fake_run)
    assert console_width() == expected