"""Whole-project analysis: run the per-file pipeline over every source file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from analysis.pipeline import (
    AnalysisPipeline,
    Finding,
    Severity,
    cycle_message,
)
from graph.dependency_graph import DependencyGraph
from parse.imports import DIALECT_BY_EXTENSION
from rules.config import load_config
from scan.files import find_source_files

if TYPE_CHECKING:
    from pathlib import Path

    from graph.render import RenderGraph
    from rules.config import ArchConfig

logger = logging.getLogger(__name__)


@dataclass
class ProjectReport:
    root: Path
    files: list[str] = field(default_factory=list)
    findings: list[Finding] = field(default_factory=list)
    cycles: list[list[str]] = field(default_factory=list)
    graph: DependencyGraph = field(default_factory=DependencyGraph)
    config: ArchConfig | None = None

    @property
    def active_violations(self) -> list[Finding]:
        return [f for f in self.findings if f.kind == "violation" and not f.suppressed]

    @property
    def ok(self) -> bool:
        return not self.active_violations and not self.cycles

    def render_graph(self) -> RenderGraph:
        rules = self.config.rules if self.config is not None else []
        return self.graph.derive_render_graph(rules)


def analyze_project(
    root: Path,
    *,
    config: ArchConfig | None = None,
    pipeline: AnalysisPipeline | None = None,
) -> ProjectReport:
    """Analyze every supported source file below root.

    Files are analyzed in sorted order. Cycle findings are computed once the
    whole graph is built, so a cycle is reported for each file on it no
    matter which file was analyzed last.

    Args:
        root: Project root; also where arch-rules.json is looked up
        config: Preloaded configuration (loaded from root when omitted)
        pipeline: Preconfigured pipeline; a fresh graph is used otherwise

    Returns:
        ProjectReport with violation findings, per-file cycle findings, all
        cycle components, and the populated graph.
    """
    if config is None:
        config = load_config(root)
    if pipeline is None:
        pipeline = AnalysisPipeline(DependencyGraph(), config)

    report = ProjectReport(root=root, graph=pipeline.graph, config=config)
    extensions = set(config.extensions) | set(DIALECT_BY_EXTENSION)

    for file_path in find_source_files(
        root,
        extensions=sorted(extensions),
        include_patterns=config.include,
        exclude_patterns=config.exclude,
        nested_gitignore=config.nested_gitignore,
    ):
        result = pipeline.analyze_path(file_path)
        report.files.append(result.file)
        report.findings.extend(result.violations)

    for identity in report.files:
        cycle = pipeline.graph.detect_cycle(identity)
        if cycle:
            report.findings.append(
                Finding(
                    file=identity,
                    kind="cycle",
                    message=cycle_message(cycle),
                    severity=Severity.WARNING,
                    cycle=tuple(cycle),
                )
            )

    report.cycles = pipeline.graph.find_cycles()
    logger.info(
        "analyzed %d file(s): %d active violation(s), %d cycle(s)",
        len(report.files),
        len(report.active_violations),
        len(report.cycles),
    )
    return report


__all__ = ["ProjectReport", "analyze_project"]
