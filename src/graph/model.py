"""Edge record stored in the dependency graph."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Edge:
    """One import statement, as a directed reference out of a file.

    ``suppressed`` is fixed when the edge is built from the source text and
    does not depend on whether any rule matches.
    """

    source: str
    literal: str
    resolved: str | None = None
    suppressed: bool = False

    @property
    def target(self) -> str:
        """Resolved identity, or the raw literal for opaque references."""
        return self.resolved if self.resolved is not None else self.literal

    @property
    def is_resolved(self) -> bool:
        return self.resolved is not None


__all__ = ["Edge"]
