"""Dependency graph, cycle detection, metrics, and render projection."""

from graph.algos import compute_fan_stats, find_cycles, find_first_cycle
from graph.dependency_graph import DependencyGraph
from graph.metrics import NodeMetrics, classify_instability, instability
from graph.model import Edge
from graph.render import (
    EdgeState,
    RenderEdge,
    RenderGraph,
    RenderNode,
    build_render_graph,
    classify_edge,
)

__all__ = [
    "DependencyGraph",
    "Edge",
    "EdgeState",
    "NodeMetrics",
    "RenderEdge",
    "RenderGraph",
    "RenderNode",
    "build_render_graph",
    "classify_edge",
    "classify_instability",
    "compute_fan_stats",
    "find_cycles",
    "find_first_cycle",
    "instability",
]
