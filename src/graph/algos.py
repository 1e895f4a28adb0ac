"""Graph algorithms for archsentinel"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence


def find_first_cycle(adjacency: Mapping[str, Sequence[str]], start: str) -> list[str]:
    """Find the first cycle reachable from start by depth-first search.

    Neighbors are visited in edge-list order. The search stops at the first
    neighbor already on the active path.

    Args:
        adjacency: Mapping of node -> ordered neighbor list
        start: Node to search from

    Returns:
        The DFS path from start followed by the neighbor that closed the
        loop, so the last node also appears earlier in the witness
        (e.g. ["a", "b", "c", "a"], or ["a", "b", "c", "b"] when start only
        leads into the cycle). Empty when no cycle is reachable or start has
        no adjacency entry.
    """
    if start not in adjacency:
        return []

    visited: set[str] = {start}
    on_path: set[str] = {start}
    path: list[str] = [start]
    # Explicit stack of neighbor iterators keeps deep chains off the call stack.
    pending = [iter(adjacency[start])]

    while pending:
        for neighbor in pending[-1]:
            if neighbor in on_path:
                return [*path, neighbor]
            if neighbor not in visited:
                visited.add(neighbor)
                on_path.add(neighbor)
                path.append(neighbor)
                pending.append(iter(adjacency.get(neighbor, ())))
                break
        else:
            pending.pop()
            on_path.discard(path.pop())

    return []


class _TarjanState:
    """Mutable state container for Tarjan's SCC algorithm."""

    def __init__(self) -> None:
        self.index = 0
        self.indices: dict[str, int] = {}
        self.low_link: dict[str, int] = {}
        self.on_stack: set[str] = set()
        self.stack: list[str] = []
        self.sccs: list[list[str]] = []


def _extract_scc(state: _TarjanState, root: str) -> list[str]:
    """Extract a strongly connected component from the stack."""
    scc: list[str] = []
    while state.stack:
        w = state.stack.pop()
        state.on_stack.remove(w)
        scc.append(w)
        if w == root:
            break
    if root not in scc:
        msg = (
            f"Tarjan algorithm invariant violated: root node {root!r} "
            "not found in stack during SCC extraction."
        )
        raise RuntimeError(msg)
    return scc


def _strongconnect(
    node: str, graph: Mapping[str, Sequence[str]], state: _TarjanState
) -> None:
    """Process a node in Tarjan's algorithm."""
    state.indices[node] = state.index
    state.low_link[node] = state.index
    state.index += 1
    state.stack.append(node)
    state.on_stack.add(node)

    neighbors = set(graph.get(node, ()))
    for neighbor in sorted(neighbors):
        if neighbor not in state.indices:
            _strongconnect(neighbor, graph, state)
            state.low_link[node] = min(state.low_link[node], state.low_link[neighbor])
        elif neighbor in state.on_stack:
            state.low_link[node] = min(state.low_link[node], state.indices[neighbor])

    if state.low_link[node] == state.indices[node]:
        scc = _extract_scc(state, node)
        if len(scc) > 1 or node in neighbors:
            state.sccs.append(sorted(scc))


def find_cycles(graph: Mapping[str, Sequence[str]]) -> list[list[str]]:
    """Find every cycle-bearing strongly connected component.

    Args:
        graph: Mapping of node -> neighbors

    Returns:
        Sorted list of components, each a sorted list of nodes. A node
        importing itself forms a single-node component.
    """
    state = _TarjanState()

    for node in sorted(graph):
        if node not in state.indices:
            _strongconnect(node, graph, state)

    return sorted(state.sccs)


def compute_fan_stats(
    edges: Iterable[tuple[str, str]],
) -> tuple[dict[str, int], dict[str, int]]:
    """Compute fan-in and fan-out statistics from edges."""
    fan_in: dict[str, int] = {}
    fan_out: dict[str, int] = {}

    for source, target in edges:
        fan_out[source] = fan_out.get(source, 0) + 1
        fan_in[target] = fan_in.get(target, 0) + 1

    return fan_in, fan_out


__all__ = [
    "compute_fan_stats",
    "find_cycles",
    "find_first_cycle",
]
