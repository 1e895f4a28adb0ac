"""Shared utilities for archsentinel."""

from __future__ import annotations

import os
import posixpath


def normalize_identity(file_path: str | os.PathLike[str]) -> str:
    """Convert a host path to the canonical node identity.

    Args:
        file_path: Absolute or relative path, with either separator style.

    Returns:
        Forward-slash path with redundant separators and dot segments
        collapsed. Applying it twice yields the same string.

    Examples:
        >>> normalize_identity("C:\\\\proj\\\\src\\\\a.ts")
        'C:/proj/src/a.ts'
        >>> normalize_identity("/proj/src/../lib/./b.ts")
        '/proj/lib/b.ts'
    """
    path_str = os.fspath(file_path)
    path_str = path_str.replace("\\", "/")
    if not path_str:
        return path_str

    # posixpath.normpath keeps a leading "//" (POSIX implementation-defined);
    # identities never need it.
    normalized = posixpath.normpath(path_str)
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


def display_name(identity: str) -> str:
    """Return the last path segment of an identity."""
    return posixpath.basename(identity.rstrip("/")) or identity


def parent_identity(identity: str) -> str:
    """Return the directory part of an identity."""
    return posixpath.dirname(identity)


__all__ = ["display_name", "normalize_identity", "parent_identity"]
