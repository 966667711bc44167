"""Request URL parsing and small helpers for the HTTP cache front end."""

from __future__ import annotations

import enum
import re
from typing import NamedTuple

_BLOB_NAME_SHA256 = re.compile(r"/?(.*/)?(ac/|cas/)([a-f0-9]{64})")

_HTML_ESCAPES = str.maketrans(
    {"&": "&amp;", "'": "&#39;", "<": "&lt;", ">": "&gt;", '"': "&#34;"}
)


class EntryKind(enum.Enum):
    """The kind of cache entry a request refers to."""

    AC = "ac"
    CAS = "cas"
    RAW = "raw"

    def __str__(self) -> str:
        return self.value


class RequestURLError(ValueError):
    """Raised when a request path does not name a cache entry."""


class ParsedURL(NamedTuple):
    kind: EntryKind
    hash: str
    instance: str


def _escape_html(text: str) -> str:
    return text.translate(_HTML_ESCAPES)


def parse_request_url(url: str, validate_ac: bool) -> ParsedURL:
    """Split a request path into entry kind, hash and instance name.

    AC paths map to EntryKind.AC when validate_ac is true, else EntryKind.RAW.
    """
    match = _BLOB_NAME_SHA256.fullmatch(url)
    if match is None:
        raise RequestURLError(
            "resource name must be a SHA256 hash in hex. "
            f"got '{_escape_html(url)}'"
        )

    prefix, kind_part, hash_value = match.groups()
    instance = (prefix or "").removesuffix("/")

    if kind_part == "cas/":
        return ParsedURL(EntryKind.CAS, hash_value, instance)
    if validate_ac:
        return ParsedURL(EntryKind.AC, hash_value, instance)
    return ParsedURL(EntryKind.RAW, hash_value, instance)


def blob_path(kind: EntryKind, hash_value: str) -> str:
    """Return the canonical path of a cache entry, for log messages."""
    return f"/{kind}/{hash_value}"


def _split_host(address: str) -> str:
    if address.startswith("["):
        end = address.find("]")
        if end < 0 or not address[end + 1:].startswith(":"):
            raise ValueError(f"invalid address: {address!r}")
        port = address[end + 2:]
        if ":" in port:
            raise ValueError(f"invalid address: {address!r}")
        return address[1:end]

    if address.count(":") != 1:
        raise ValueError(f"invalid address: {address!r}")
    host, _, _ = address.partition(":")
    if "[" in host or "]" in host:
        raise ValueError(f"invalid address: {address!r}")
    return host


def client_address(remote_addr: str) -> str:
    """Return the host part of host:port, or the whole address if it has none."""
    try:
        return _split_host(remote_addr)
    except ValueError:
        return remote_addr