"""Lexical import extraction for TypeScript/JavaScript and Dart sources.

Extraction is regex-based scanning, not parsing. Source text that is
syntactically broken mid-edit simply yields fewer matches.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    import os
    from collections.abc import Iterator

SUPPRESSION_MARKER = "arch-ignore"


class Dialect(str, Enum):
    """Import grammars understood by the extractor."""

    BRACKETED_MODULE = "bracketed-module"
    QUOTED_LITERAL = "quoted-literal"


DIALECT_BY_EXTENSION: dict[str, Dialect] = {
    ".ts": Dialect.BRACKETED_MODULE,
    ".tsx": Dialect.BRACKETED_MODULE,
    ".js": Dialect.BRACKETED_MODULE,
    ".jsx": Dialect.BRACKETED_MODULE,
    ".mjs": Dialect.BRACKETED_MODULE,
    ".cjs": Dialect.BRACKETED_MODULE,
    ".dart": Dialect.QUOTED_LITERAL,
}


@dataclass(frozen=True)
class ImportMatch:
    """A single import literal found in source text."""

    literal: str
    span: tuple[int, int]
    statement_start: int
    line: int
    column: int
    preceding_line: str

    def is_suppressed(self, marker: str = SUPPRESSION_MARKER) -> bool:
        return is_suppressed(self.preceding_line, marker)


def is_suppressed(preceding_line: str, marker: str = SUPPRESSION_MARKER) -> bool:
    """Return True when the suppression marker appears on the given line."""
    return bool(marker) and marker in preceding_line.strip()


class ImportExtractor(Protocol):
    """Scans source text of one dialect for import literals."""

    dialect: Dialect

    def finditer(self, text: str) -> Iterator[ImportMatch]: ...


def _line_bounds(text: str, offset: int) -> tuple[int, int]:
    """Return (line_index, line_start_offset) for a character offset."""
    line_start = text.rfind("\n", 0, offset) + 1
    return text.count("\n", 0, line_start), line_start


def _preceding_line(text: str, statement_start: int) -> str:
    """Return the full line above the one containing statement_start."""
    line_start = text.rfind("\n", 0, statement_start) + 1
    if line_start == 0:
        return ""
    previous_start = text.rfind("\n", 0, line_start - 1) + 1
    return text[previous_start : line_start - 1].rstrip("\r")


def _build_match(text: str, match: re.Match[str], group: str) -> ImportMatch:
    start, end = match.span(group)
    line, line_start = _line_bounds(text, start)
    return ImportMatch(
        literal=match.group(group),
        span=(start, end),
        statement_start=match.start(),
        line=line,
        column=start - line_start,
        preceding_line=_preceding_line(text, match.start()),
    )


class RegexImportExtractor:
    """Extractor driven by one compiled pattern with named literal groups."""

    def __init__(
        self, dialect: Dialect, pattern: re.Pattern[str], groups: tuple[str, ...]
    ) -> None:
        self.dialect = dialect
        self._pattern = pattern
        self._groups = groups

    def finditer(self, text: str) -> Iterator[ImportMatch]:
        for match in self._pattern.finditer(text):
            for group in self._groups:
                if match.group(group) is not None:
                    yield _build_match(text, match, group)
                    break


# `import ... from '<lit>'` may span lines, but its body cannot cross a quote or
# a `;`, so a side-effect `import 'x';` never runs on into later statements.
# `require('<lit>')` stays on one line.
_BRACKETED_MODULE_RE = re.compile(
    r"""\bimport\s+[^'";]*?\bfrom\s+['"](?P<from_literal>[^'"]+)['"]"""
    r"""|\brequire\(\s*['"](?P<require_literal>[^'"\n]+)['"]"""
)

_QUOTED_LITERAL_RE = re.compile(
    r"""\bimport[ \t]+['"](?P<literal>[^'"\n]+)['"]"""
)

EXTRACTORS: dict[Dialect, ImportExtractor] = {
    Dialect.BRACKETED_MODULE: RegexImportExtractor(
        Dialect.BRACKETED_MODULE,
        _BRACKETED_MODULE_RE,
        ("from_literal", "require_literal"),
    ),
    Dialect.QUOTED_LITERAL: RegexImportExtractor(
        Dialect.QUOTED_LITERAL,
        _QUOTED_LITERAL_RE,
        ("literal",),
    ),
}


class ImportSequence:
    """Lazy view over the imports of one text.

    Every iteration rescans the text, so the sequence can be walked any
    number of times with identical results.
    """

    def __init__(self, text: str, extractor: ImportExtractor) -> None:
        self.text = text
        self.extractor = extractor

    def __iter__(self) -> Iterator[ImportMatch]:
        return self.extractor.finditer(self.text)


def dialect_for_path(file_path: str | os.PathLike[str]) -> Dialect | None:
    """Select the dialect from a file's extension, or None if unsupported."""
    suffix = PurePath(str(file_path).replace("\\", "/")).suffix.lower()
    return DIALECT_BY_EXTENSION.get(suffix)


def extract_imports(text: str, dialect: Dialect | str) -> ImportSequence:
    """Extract import literals from source text.

    Args:
        text: Full source text of one file
        dialect: Grammar to scan with

    Returns:
        Restartable iterable of ImportMatch records in source order.
    """
    return ImportSequence(text, EXTRACTORS[Dialect(dialect)])


__all__ = [
    "DIALECT_BY_EXTENSION",
    "EXTRACTORS",
    "SUPPRESSION_MARKER",
    "Dialect",
    "ImportExtractor",
    "ImportMatch",
    "ImportSequence",
    "RegexImportExtractor",
    "dialect_for_path",
    "extract_imports",
    "is_suppressed",
]
