"""Validation of ActionResult messages before they are stored in the cache."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

_HASH_KEY = re.compile(r"[a-f0-9]{64}")


class ValidationError(ValueError):
    """Raised when an ActionResult or one of its fields is invalid."""


@dataclass
class Digest:
    """A content digest: lower case hex SHA256 plus the blob size."""

    hash: str = ""
    size_bytes: int = 0


@dataclass
class OutputFile:
    path: str = ""
    digest: Optional[Digest] = None
    contents: bytes = b""
    is_executable: bool = False


@dataclass
class OutputDirectory:
    path: str = ""
    tree_digest: Optional[Digest] = None


@dataclass
class OutputSymlink:
    path: str = ""
    target: str = ""


@dataclass
class ExecutedActionMetadata:
    worker: str = ""


@dataclass
class ActionResult:
    output_files: List[Optional[OutputFile]] = field(default_factory=list)
    output_directories: List[Optional[OutputDirectory]] = field(default_factory=list)
    output_file_symlinks: List[Optional[OutputSymlink]] = field(default_factory=list)
    output_symlinks: List[Optional[OutputSymlink]] = field(default_factory=list)
    output_directory_symlinks: List[Optional[OutputSymlink]] = field(default_factory=list)
    exit_code: int = 0
    stdout_raw: bytes = b""
    stdout_digest: Optional[Digest] = None
    stderr_raw: bytes = b""
    stderr_digest: Optional[Digest] = None
    execution_metadata: Optional[ExecutedActionMetadata] = None


def is_valid_hash(value: str) -> bool:
    """Return True if value is a lower case hex SHA256 sum."""
    return isinstance(value, str) and _HASH_KEY.fullmatch(value) is not None


def _check_digest(digest: Optional[Digest]) -> None:
    if digest is None:
        return
    if digest.size_bytes < 0:
        raise ValidationError("Digest has negative SizeBytes")
    if not is_valid_hash(digest.hash):
        raise ValidationError(f"invalid hash: {digest.hash!r}")


def _check_symlinks(links, group: str, kind: str) -> None:
    for link in links:
        if link is None:
            raise ValidationError(f"missing OutputSymlink in {group}")
        if link.path == "":
            raise ValidationError(f"empty path in {group}")
        if link.target == "":
            raise ValidationError(f"empty target in {group}")
        if link.path.startswith("/"):
            raise ValidationError(f"absolute path in {kind}: {link.path!r}")


def validate_action_result(action_result: Optional[ActionResult]) -> ActionResult:
    """Check the immediate fields of an ActionResult, not its dependent blobs.

    Returns the action result unchanged; raises ValidationError if invalid.
    """
    if action_result is None:
        raise ValidationError("missing ActionResult")

    for output in action_result.output_files:
        if output is None:
            raise ValidationError("missing output file")
        if output.path == "":
            raise ValidationError("empty path")
        if output.path.startswith("/"):
            raise ValidationError(f"absolute path in output file: {output.path!r}")
        if output.digest is None:
            raise ValidationError(f"missing Digest for path {output.path!r}")
        try:
            _check_digest(output.digest)
        except ValidationError as err:
            raise ValidationError(
                f"invalid Digest for path {output.path!r}: {err}"
            ) from err

    for directory in action_result.output_directories:
        if directory is None:
            raise ValidationError("missing output directory")
        if directory.path.startswith("/"):
            raise ValidationError(
                f"absolute path in output directory: {directory.path!r}"
            )
        if directory.tree_digest is None:
            raise ValidationError(
                f"missing tree digest for output directory: {directory.path!r}"
            )
        try:
            _check_digest(directory.tree_digest)
        except ValidationError as err:
            raise ValidationError(
                f"invalid TreeDigest for path {directory.path!r}: {err}"
            ) from err

    _check_symlinks(
        action_result.output_file_symlinks, "OutputFileSymlinks", "output file symlink"
    )
    _check_symlinks(action_result.output_symlinks, "OutputSymlinks", "output symlink")
    _check_symlinks(
        action_result.output_directory_symlinks,
        "OutputDirectorySymlinks",
        "output directory symlink",
    )

    for name, digest in (
        ("StdoutDigest", action_result.stdout_digest),
        ("StderrDigest", action_result.stderr_digest),
    ):
        try:
            _check_digest(digest)
        except ValidationError as err:
            raise ValidationError(f"invalid {name}: {err}") from err

    return action_result