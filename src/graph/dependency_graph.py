"""Incrementally maintained file-level dependency graph."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from graph.algos import find_cycles, find_first_cycle
from graph.render import build_render_graph
from utils import normalize_identity

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from graph.model import Edge
    from graph.render import RenderGraph
    from rules.config import Rule


class DependencyGraph:
    """Adjacency of analyzed files to their outgoing import edges.

    The only mutation is whole-file replacement through :meth:`update` (and
    explicit eviction through :meth:`remove`). Edge lists are stored as
    tuples and every reader works on a snapshot taken under the lock, so a
    concurrent reader sees either the old or the new list for a file, never
    a mix.
    """

    def __init__(self) -> None:
        self._adjacency: dict[str, tuple[Edge, ...]] = {}
        self._lock = threading.RLock()

    def __contains__(self, identity: object) -> bool:
        if not isinstance(identity, str):
            return False
        with self._lock:
            return normalize_identity(identity) in self._adjacency

    def __len__(self) -> int:
        with self._lock:
            return len(self._adjacency)

    def update(self, identity: str, edges: Iterable[Edge]) -> None:
        """Replace the outgoing edges of one file. An empty list marks a leaf."""
        key = normalize_identity(identity)
        frozen = tuple(edges)
        with self._lock:
            self._adjacency[key] = frozen

    def remove(self, identity: str) -> bool:
        """Drop a file's adjacency entry. Returns False if it had none.

        Edges from other files that point at the removed file are kept; they
        are replaced the next time those files are analyzed.
        """
        key = normalize_identity(identity)
        with self._lock:
            return self._adjacency.pop(key, None) is not None

    def edges_of(self, identity: str) -> tuple[Edge, ...]:
        with self._lock:
            return self._adjacency.get(normalize_identity(identity), ())

    def files(self) -> list[str]:
        with self._lock:
            return list(self._adjacency)

    def snapshot(self) -> dict[str, tuple[Edge, ...]]:
        """Return a point-in-time copy of the adjacency."""
        with self._lock:
            return dict(self._adjacency)

    def _resolved_adjacency(self) -> dict[str, list[str]]:
        return {
            identity: [edge.resolved for edge in edges if edge.resolved is not None]
            for identity, edges in self.snapshot().items()
        }

    def detect_cycle(self, start: str) -> list[str]:
        """Return the first cycle reachable from start, or an empty list.

        Only resolved edges are followed. The witness is the path from start
        plus the node that closes the loop, e.g. ``[a, b, c, a]`` or
        ``[a, b, c, b]`` when start only leads into the cycle.
        """
        return find_first_cycle(self._resolved_adjacency(), normalize_identity(start))

    def find_cycles(self) -> list[list[str]]:
        """Return every cycle-bearing component of the whole graph."""
        return find_cycles(self._resolved_adjacency())

    def derive_render_graph(self, rules: Sequence[Rule]) -> RenderGraph:
        """Project the graph into styled nodes and edges for visualization."""
        return build_render_graph(self.snapshot(), rules)


__all__ = ["DependencyGraph"]
