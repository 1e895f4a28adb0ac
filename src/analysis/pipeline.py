"""Per-file analysis: extract -> resolve -> match rules -> update graph -> cycles."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from graph.model import Edge
from parse.imports import Dialect, dialect_for_path, extract_imports
from parse.resolution import PathResolver
from rules.config import ArchConfig
from rules.engine import match_edge
from utils import display_name, normalize_identity

if TYPE_CHECKING:
    import os

    from graph.dependency_graph import DependencyGraph
    from parse.imports import ImportMatch
    from rules.engine import RuleMatch

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"


FindingKind = Literal["violation", "cycle"]


@dataclass(frozen=True)
class Finding:
    """A diagnostic produced for one analyzed file.

    ``span`` holds character offsets into the file text; for violations it
    covers the import literal only. ``line`` and ``column`` are 0-based.
    """

    file: str
    kind: FindingKind
    message: str
    severity: Severity
    span: tuple[int, int] = (0, 0)
    line: int = 0
    column: int = 0
    suppressed: bool = False
    literal: str | None = None
    cycle: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "file": self.file,
            "kind": self.kind,
            "message": self.message,
            "severity": self.severity.value,
            "span": list(self.span),
            "line": self.line,
            "column": self.column,
            "suppressed": self.suppressed,
            "literal": self.literal,
            "cycle": list(self.cycle),
        }


@dataclass(frozen=True)
class AnalysisResult:
    file: str
    edges: tuple[Edge, ...] = ()
    findings: tuple[Finding, ...] = ()
    cycle: list[str] = field(default_factory=list)

    @property
    def violations(self) -> list[Finding]:
        return [f for f in self.findings if f.kind == "violation"]

    @property
    def active_violations(self) -> list[Finding]:
        return [f for f in self.violations if not f.suppressed]


def violation_message(match: RuleMatch, literal: str) -> str:
    return f"{match.message} (Forbidden import: {literal})"


def cycle_message(cycle: list[str]) -> str:
    return "Circular Dependency Detected: " + " -> ".join(
        display_name(identity) for identity in cycle
    )


class AnalysisPipeline:
    """Runs the per-file analysis against one graph instance.

    Args:
        graph: Graph owned by the caller; every analysis updates it
        config: Rules, probe extensions, and suppression marker
        resolver: Optional resolver (e.g. over an in-memory probe); built
            from ``config.extensions`` when omitted
    """

    def __init__(
        self,
        graph: DependencyGraph,
        config: ArchConfig | None = None,
        resolver: PathResolver | None = None,
    ) -> None:
        self.graph = graph
        self.config = config if config is not None else ArchConfig()
        self.resolver = (
            resolver
            if resolver is not None
            else PathResolver(extensions=self.config.extensions)
        )

    def _build_edge(self, identity: str, imp: ImportMatch) -> Edge:
        resolved = self.resolver.resolve(identity, imp.literal)
        if resolved is None:
            logger.debug("%s: unresolved import %r", identity, imp.literal)
        return Edge(
            source=identity,
            literal=imp.literal,
            resolved=resolved,
            suppressed=imp.is_suppressed(self.config.suppression_marker),
        )

    def _violation_findings(
        self, identity: str, imp: ImportMatch, edge: Edge
    ) -> list[Finding]:
        findings: list[Finding] = []
        for match in match_edge(edge, self.config.rules, identity):
            findings.append(
                Finding(
                    file=identity,
                    kind="violation",
                    message=violation_message(match, imp.literal),
                    severity=(
                        Severity.INFORMATION if edge.suppressed else Severity.ERROR
                    ),
                    span=imp.span,
                    line=imp.line,
                    column=imp.column,
                    suppressed=edge.suppressed,
                    literal=imp.literal,
                )
            )
        return findings

    def analyze(
        self, identity: str, text: str, dialect: Dialect | str | None = None
    ) -> AnalysisResult:
        """Analyze one file's text and replace its edges in the graph.

        Args:
            identity: Path of the file (normalized before use)
            text: Current source text
            dialect: Extraction grammar; chosen from the extension if omitted

        Returns:
            Edges recorded for the file, violation findings followed by a
            cycle finding when one is reachable from the file.
        """
        identity = normalize_identity(identity)
        if dialect is None:
            dialect = dialect_for_path(identity)

        edges: list[Edge] = []
        findings: list[Finding] = []
        if dialect is None:
            logger.debug("%s: unsupported file type, recording no edges", identity)
        else:
            for imp in extract_imports(text, dialect):
                edge = self._build_edge(identity, imp)
                edges.append(edge)
                findings.extend(self._violation_findings(identity, imp, edge))

        self.graph.update(identity, edges)
        cycle = self.graph.detect_cycle(identity)
        if cycle:
            logger.info("%s: %s", identity, cycle_message(cycle))
            findings.append(
                Finding(
                    file=identity,
                    kind="cycle",
                    message=cycle_message(cycle),
                    severity=Severity.WARNING,
                    cycle=tuple(cycle),
                )
            )

        return AnalysisResult(
            file=identity,
            edges=tuple(edges),
            findings=tuple(findings),
            cycle=cycle,
        )

    def analyze_path(self, file_path: str | os.PathLike[str]) -> AnalysisResult:
        """Read a file from disk and analyze it."""
        path = Path(file_path)
        text = path.read_text(encoding="utf-8", errors="replace")
        return self.analyze(str(path.absolute()), text)

    def forget(self, file_path: str | os.PathLike[str]) -> bool:
        """Evict a deleted file from the graph."""
        return self.graph.remove(str(Path(file_path).absolute()))


__all__ = [
    "AnalysisPipeline",
    "AnalysisResult",
    "Finding",
    "Severity",
    "cycle_message",
    "violation_message",
]
