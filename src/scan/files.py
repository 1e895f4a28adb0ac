"""Source file discovery for whole-project analysis.

Directories are pruned while walking, so dependency folders such as
``node_modules`` are never entered, and symlinked directories are not
followed.
"""

from __future__ import annotations

import os
from fnmatch import fnmatch
from pathlib import Path
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

DEFAULT_SKIP_DIRS: frozenset[str] = frozenset(
    {".git", "node_modules", ".dart_tool", "build", "dist", ".next"}
)


def _walk(root: Path, skip_dirs: frozenset[str]) -> Iterator[tuple[Path, list[str]]]:
    """Yield (directory, file names) below root, skipping pruned folders."""
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(name for name in dirnames if name not in skip_dirs)
        yield Path(dirpath), filenames


def _is_within_root(path: Path, root: Path) -> bool:
    """Return True when the resolved path stays within the resolved root."""
    try:
        root_resolved = root.resolve()
        path_resolved = path.resolve()
    except OSError:
        return False

    try:
        path_resolved.relative_to(root_resolved)
    except ValueError:
        return False

    return True


def _matches_any(rel_path: str, patterns: list[str] | None) -> bool:
    return any(fnmatch(rel_path, pat) for pat in patterns or ())


def _should_include_file(
    path: Path,
    root: Path,
    gitignore_matches: Callable[[str], bool] | None,
    include_patterns: list[str] | None,
    exclude_patterns: list[str] | None,
) -> bool:
    """Apply symlink, gitignore, and include/exclude filtering to one file."""
    if path.is_symlink() or not path.is_file():
        return False

    if not _is_within_root(path, root):
        return False

    if gitignore_matches is not None and gitignore_matches(str(path)):
        return False

    rel_path = path.relative_to(root).as_posix()
    if include_patterns and not _matches_any(rel_path, include_patterns):
        return False

    return not _matches_any(rel_path, exclude_patterns)


def _iter_gitignore_files(root: Path, skip_dirs: frozenset[str]) -> list[Path]:
    """Return the regular .gitignore files below root, root first."""
    found = [
        directory / ".gitignore"
        for directory, filenames in _walk(root, skip_dirs)
        if ".gitignore" in filenames
    ]
    gitignore_paths = [
        path for path in found if path.is_file() and not path.is_symlink()
    ]
    return sorted(gitignore_paths, key=lambda p: p.relative_to(root).as_posix())


def _build_gitignore_matcher(
    root: Path,
    *,
    nested_gitignore: bool,
    skip_dirs: frozenset[str] = DEFAULT_SKIP_DIRS,
) -> Callable[[str], bool] | None:
    if not nested_gitignore:
        gitignore_path = root / ".gitignore"
        if gitignore_path.is_file():
            return cast("Callable[[str], bool]", parse_gitignore(gitignore_path))
        return None

    gitignore_paths = _iter_gitignore_files(root, skip_dirs)
    if not gitignore_paths:
        return None

    matchers = [parse_gitignore(path) for path in gitignore_paths]

    def matches(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                # Path outside this matcher's base directory.
                continue
        return False

    return matches


def find_source_files(
    directory: Path,
    *,
    extensions: Iterable[str],
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
    nested_gitignore: bool = False,
    skip_dirs: frozenset[str] = DEFAULT_SKIP_DIRS,
) -> Iterator[Path]:
    """Find source files with the given extensions, honoring .gitignore.

    Args:
        directory: Project root to search
        extensions: File suffixes to collect, compared case-insensitively
            (e.g. ".ts", ".dart")
        include_patterns: Optional fnmatch patterns over root-relative paths;
            if given, a file must match at least one
        exclude_patterns: Optional fnmatch patterns; matching files are dropped
        nested_gitignore: Compose every .gitignore below the root instead of
            reading the root one only
        skip_dirs: Directory names that are never descended into

    Yields:
        Matching files, sorted by root-relative POSIX path.
    """
    suffixes = {ext.lower() for ext in extensions}
    gitignore_matches = _build_gitignore_matcher(
        directory,
        nested_gitignore=nested_gitignore,
        skip_dirs=skip_dirs,
    )

    matched_files = [
        current / name
        for current, filenames in _walk(directory, skip_dirs)
        for name in filenames
        if os.path.splitext(name)[1].lower() in suffixes
        and _should_include_file(
            current / name,
            directory,
            gitignore_matches,
            include_patterns,
            exclude_patterns,
        )
    ]

    matched_files.sort(key=lambda p: p.relative_to(directory).as_posix())

    yield from matched_files


__all__ = ["DEFAULT_SKIP_DIRS", "find_source_files"]
