"""Output helpers for findings and render graphs."""

from report.write import dumps_json, format_finding, write_findings, write_render_graph

__all__ = ["dumps_json", "format_finding", "write_findings", "write_render_graph"]
