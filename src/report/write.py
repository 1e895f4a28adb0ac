"""Serialization of findings and render graphs."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import orjson

if TYPE_CHECKING:
    from collections.abc import Sequence

    from analysis.pipeline import Finding
    from graph.render import RenderGraph


def _to_dict(obj: object) -> object:
    """Convert object to dict for JSON serialization."""
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json", by_alias=True)
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    return obj


def dumps_json(obj: object) -> bytes:
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    return orjson.dumps(_to_dict(obj), option=opts)


def _write_json(path: Path, obj: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(dumps_json(obj))


def _write_jsonl(path: Path, records: Sequence[object]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        for rec in records:
            f.write(orjson.dumps(_to_dict(rec), option=orjson.OPT_SORT_KEYS))
            f.write(b"\n")


def write_render_graph(path: Path, graph: RenderGraph) -> None:
    _write_json(path, graph)


def write_findings(path: Path, findings: Sequence[Finding]) -> None:
    _write_jsonl(path, findings)


def _display_path(file: str, root: Path | None) -> str:
    if root is None:
        return file
    try:
        return Path(file).relative_to(root).as_posix()
    except ValueError:
        return file


def format_finding(finding: Finding, root: Path | None = None) -> str:
    """Format a finding as ``path:line:col: severity: message`` (1-based)."""
    location = _display_path(finding.file, root)
    return (
        f"{location}:{finding.line + 1}:{finding.column + 1}: "
        f"{finding.severity.value}: {finding.message}"
    )


__all__ = [
    "dumps_json",
    "format_finding",
    "write_findings",
    "write_render_graph",
]
