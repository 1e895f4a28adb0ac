"""Per-file and whole-project analysis entry points."""

from analysis.pipeline import (
    AnalysisPipeline,
    AnalysisResult,
    Finding,
    Severity,
)
from analysis.project import ProjectReport, analyze_project

__all__ = [
    "AnalysisPipeline",
    "AnalysisResult",
    "Finding",
    "ProjectReport",
    "Severity",
    "analyze_project",
]
