"""Instability metric (fan-out / (fan-in + fan-out)) per graph node."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from graph.algos import compute_fan_stats

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from graph.model import Edge

StabilityBucket = Literal["stable", "hybrid", "volatile"]

STABLE_MAX = 0.3
HYBRID_MAX = 0.7


def instability(fan_in: int, fan_out: int) -> float:
    """Return fan_out / (fan_in + fan_out), or 0.0 for an isolated node."""
    total = fan_in + fan_out
    if total == 0:
        return 0.0
    return fan_out / total


def classify_instability(value: float) -> StabilityBucket:
    if value <= STABLE_MAX:
        return "stable"
    if value <= HYBRID_MAX:
        return "hybrid"
    return "volatile"


@dataclass(frozen=True)
class NodeMetrics:
    identity: str
    fan_in: int
    fan_out: int

    @property
    def instability(self) -> float:
        return instability(self.fan_in, self.fan_out)

    @property
    def bucket(self) -> StabilityBucket:
        return classify_instability(self.instability)


def compute_node_metrics(
    adjacency: Mapping[str, Sequence[Edge]],
) -> dict[str, NodeMetrics]:
    """Compute metrics for every analyzed file and every edge target.

    Fan-out counts a file's edges (duplicates included); fan-in counts the
    edges anywhere in the graph whose target is the node. Targets without
    their own adjacency entry have fan-out 0.
    """
    fan_in, fan_out = compute_fan_stats(
        (identity, edge.target)
        for identity, edges in adjacency.items()
        for edge in edges
    )

    nodes: dict[str, NodeMetrics] = {}
    for identity in adjacency:
        nodes[identity] = NodeMetrics(
            identity, fan_in.get(identity, 0), fan_out.get(identity, 0)
        )
    for target in fan_in:
        if target not in nodes:
            nodes[target] = NodeMetrics(target, fan_in[target], 0)
    return nodes


__all__ = [
    "HYBRID_MAX",
    "STABLE_MAX",
    "NodeMetrics",
    "StabilityBucket",
    "classify_instability",
    "compute_node_metrics",
    "instability",
]
