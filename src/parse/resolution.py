"""Resolution of relative and absolute import literals to file identities."""

from __future__ import annotations

import posixpath
import re
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from utils import normalize_identity

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

DEFAULT_EXTENSIONS: tuple[str, ...] = (".ts", ".tsx", ".dart", ".js", ".jsx")

INDEX_BASENAME = "index"

_DRIVE_ROOT_RE = re.compile(r"^[A-Za-z]:[\\/]")


class ExistenceProbe(Protocol):
    """Read-only filesystem queries used during resolution."""

    def exists(self, identity: str) -> bool: ...

    def is_file(self, identity: str) -> bool: ...

    def is_dir(self, identity: str) -> bool: ...


class DiskProbe:
    """Probe backed by the real filesystem.

    OS errors (permission denied, broken links) count as a miss.
    """

    def exists(self, identity: str) -> bool:
        try:
            return Path(identity).exists()
        except OSError:
            return False

    def is_file(self, identity: str) -> bool:
        try:
            return Path(identity).is_file()
        except OSError:
            return False

    def is_dir(self, identity: str) -> bool:
        try:
            return Path(identity).is_dir()
        except OSError:
            return False


class InMemoryProbe:
    """Probe over a fixed set of file identities.

    Every ancestor of a registered file is reported as a directory.
    """

    def __init__(self, files: Iterable[str] = ()) -> None:
        self._files: set[str] = set()
        self._dirs: set[str] = set()
        for file_path in files:
            self.add(file_path)

    def add(self, file_path: str) -> None:
        identity = normalize_identity(file_path)
        self._files.add(identity)
        parent = posixpath.dirname(identity)
        while parent and parent not in self._dirs:
            self._dirs.add(parent)
            next_parent = posixpath.dirname(parent)
            if next_parent == parent:
                break
            parent = next_parent

    def exists(self, identity: str) -> bool:
        return self.is_file(identity) or self.is_dir(identity)

    def is_file(self, identity: str) -> bool:
        return normalize_identity(identity) in self._files

    def is_dir(self, identity: str) -> bool:
        return normalize_identity(identity) in self._dirs


def is_relative_literal(literal: str) -> bool:
    """Return True for literals starting with a dot (`./x`, `../x`, `.hidden/x`)."""
    return literal.startswith(".")


def is_absolute_literal(literal: str) -> bool:
    """Return True for POSIX-rooted or drive-qualified paths."""
    return literal.startswith(("/", "\\")) or bool(_DRIVE_ROOT_RE.match(literal))


class PathResolver:
    """Maps import literals to canonical file identities.

    Resolution depends only on the referring file's directory, the literal,
    and the probe's answers at call time. Nothing is cached between calls.
    """

    def __init__(
        self,
        probe: ExistenceProbe | None = None,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    ) -> None:
        self.probe: ExistenceProbe = probe if probe is not None else DiskProbe()
        self.extensions = tuple(extensions)

    def resolve(self, referring_identity: str, literal: str) -> str | None:
        """Resolve an import literal seen in referring_identity.

        Args:
            referring_identity: Identity of the file containing the import
            literal: The import string exactly as written in source

        Returns:
            The normalized identity of the first probe hit, or None for
            package-style literals and relative/absolute paths that do not
            exist.
        """
        if is_relative_literal(literal):
            base_dir = posixpath.dirname(normalize_identity(referring_identity))
            joined = normalize_identity(posixpath.join(base_dir, literal))
            return self._probe_candidates(joined)

        if is_absolute_literal(literal):
            identity = normalize_identity(literal)
            if self.probe.exists(identity):
                return identity

        return None

    def _probe_candidates(self, joined: str) -> str | None:
        if self.probe.is_file(joined):
            return joined

        for ext in self.extensions:
            candidate = joined + ext
            if self.probe.is_file(candidate):
                return candidate

        if self.probe.is_dir(joined):
            for ext in self.extensions:
                candidate = posixpath.join(joined, INDEX_BASENAME + ext)
                if self.probe.is_file(candidate):
                    return candidate

        return None


def resolve_import(
    referring_identity: str,
    literal: str,
    *,
    probe: ExistenceProbe | None = None,
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
) -> str | None:
    """Resolve one literal with a throwaway resolver."""
    return PathResolver(probe, extensions).resolve(referring_identity, literal)


__all__ = [
    "DEFAULT_EXTENSIONS",
    "DiskProbe",
    "ExistenceProbe",
    "INDEX_BASENAME",
    "InMemoryProbe",
    "PathResolver",
    "is_absolute_literal",
    "is_relative_literal",
    "resolve_import",
]
