"""Renderer-neutral projection of the dependency graph.

Node and edge records hold only primitive fields so any visualization
technology can consume ``RenderGraph.model_dump(by_alias=True)``.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from graph.metrics import StabilityBucket, compute_node_metrics
from rules.engine import match_edge
from utils import display_name, parent_identity

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from graph.metrics import NodeMetrics
    from graph.model import Edge
    from rules.config import Rule

BUCKET_COLORS: dict[str, str] = {
    "stable": "#77dd77",
    "hybrid": "#fdfd96",
    "volatile": "#ffb347",
}
NODE_BORDER = "#2B2B2B"
NODE_FONT = "#000000"


class EdgeState(str, Enum):
    CLEAN = "clean"
    ACTIVE_VIOLATION = "active-violation"
    SUPPRESSED_VIOLATION = "suppressed-violation"


class EdgeStyle(BaseModel):
    color: str
    width: int
    dashes: bool | list[int]


EDGE_STYLES: dict[EdgeState, EdgeStyle] = {
    EdgeState.CLEAN: EdgeStyle(color="gray", width=1, dashes=True),
    EdgeState.ACTIVE_VIOLATION: EdgeStyle(color="red", width=3, dashes=False),
    EdgeState.SUPPRESSED_VIOLATION: EdgeStyle(color="#FFA500", width=2, dashes=[5, 5]),
}


class HighlightColor(BaseModel):
    background: str
    border: str


class NodeColor(BaseModel):
    background: str
    border: str
    highlight: HighlightColor


class NodeFont(BaseModel):
    color: str = NODE_FONT


class RenderNode(BaseModel):
    """A graph node with its stability metric and color bucket."""

    id: str
    label: str
    group: str
    fan_in: int
    fan_out: int
    instability: float
    bucket: StabilityBucket
    external: bool = Field(
        default=False,
        description="True for targets with no adjacency entry of their own",
    )
    color: NodeColor
    font: NodeFont = Field(default_factory=NodeFont)


class EdgeColor(BaseModel):
    color: str


class RenderEdge(BaseModel):
    """A graph edge classified as clean, active, or suppressed violation."""

    model_config = ConfigDict(populate_by_name=True)

    source: str = Field(alias="from")
    target: str = Field(alias="to")
    literal: str
    state: EdgeState
    messages: list[str] = Field(default_factory=list)
    color: EdgeColor
    width: int
    dashes: bool | list[int]
    arrows: str = "to"


class RenderGraph(BaseModel):
    nodes: list[RenderNode] = Field(default_factory=list)
    edges: list[RenderEdge] = Field(default_factory=list)


def classify_edge(
    edge: Edge, rules: Iterable[Rule], source: str | None = None
) -> tuple[EdgeState, list[str]]:
    """Classify an edge for rendering, returning every matching rule message."""
    matches = match_edge(edge, rules, source)
    if not matches:
        return EdgeState.CLEAN, []
    messages = [match.message for match in matches]
    if edge.suppressed:
        return EdgeState.SUPPRESSED_VIOLATION, messages
    return EdgeState.ACTIVE_VIOLATION, messages


def _render_node(metrics: NodeMetrics, *, external: bool) -> RenderNode:
    value = metrics.instability
    background = BUCKET_COLORS[metrics.bucket]
    return RenderNode(
        id=metrics.identity,
        label=f"{display_name(metrics.identity)}\n(I: {value:.2f})",
        group=parent_identity(metrics.identity),
        fan_in=metrics.fan_in,
        fan_out=metrics.fan_out,
        instability=value,
        bucket=metrics.bucket,
        external=external,
        color=NodeColor(
            background=background,
            border=NODE_BORDER,
            highlight=HighlightColor(background=background, border=NODE_BORDER),
        ),
    )


def _render_edge(source: str, edge: Edge, rules: Sequence[Rule]) -> RenderEdge:
    state, messages = classify_edge(edge, rules, source)
    style = EDGE_STYLES[state]
    dashes = list(style.dashes) if isinstance(style.dashes, list) else style.dashes
    return RenderEdge(
        source=source,
        target=edge.target,
        literal=edge.literal,
        state=state,
        messages=messages,
        color=EdgeColor(color=style.color),
        width=style.width,
        dashes=dashes,
    )


def build_render_graph(
    adjacency: Mapping[str, Sequence[Edge]], rules: Sequence[Rule]
) -> RenderGraph:
    """Project an adjacency snapshot into nodes and styled edges.

    Analyzed files are added in adjacency order. Each edge target without an
    adjacency entry of its own is added once, the first time it is seen.
    """
    metrics = compute_node_metrics(adjacency)
    graph = RenderGraph()
    added: set[str] = set()

    for identity, edges in adjacency.items():
        if identity not in added:
            graph.nodes.append(_render_node(metrics[identity], external=False))
            added.add(identity)

        for edge in edges:
            target = edge.target
            if target not in added and target not in adjacency:
                graph.nodes.append(_render_node(metrics[target], external=True))
                added.add(target)
            graph.edges.append(_render_edge(identity, edge, rules))

    return graph


__all__ = [
    "BUCKET_COLORS",
    "EDGE_STYLES",
    "EdgeState",
    "EdgeStyle",
    "RenderEdge",
    "RenderGraph",
    "RenderNode",
    "build_render_graph",
    "classify_edge",
]
