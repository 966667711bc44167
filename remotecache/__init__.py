"""Building blocks for a remote build cache: validation, URL parsing, auth, idle timing and help text."""

__version__ = "0.1.0"