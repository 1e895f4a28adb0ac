"""Rule scoping and violation matching for dependency edges."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from graph.model import Edge
    from rules.config import Rule


@dataclass(frozen=True)
class RuleMatch:
    """A rule an edge violates, with the forbidden pattern that hit."""

    rule: Rule
    pattern: str
    subject: str

    @property
    def message(self) -> str:
        return self.rule.message


def applicable_rules(identity: str, rules: Iterable[Rule]) -> list[Rule]:
    """Return the rules whose scope pattern is found in the file identity.

    Matching is an unanchored search, so a scope of "src/domain" applies to
    files at any depth below a folder of that name.
    """
    return [rule for rule in rules if rule.scope_pattern.search(identity)]


def _first_forbidden_hit(edge: Edge, rule: Rule) -> RuleMatch | None:
    subjects = [edge.resolved, edge.literal] if edge.resolved else [edge.literal]
    for pattern in rule.forbidden_patterns:
        for subject in subjects:
            if pattern.search(subject):
                return RuleMatch(rule=rule, pattern=pattern.pattern, subject=subject)
    return None


def match_edge(
    edge: Edge, rules: Iterable[Rule], source: str | None = None
) -> tuple[RuleMatch, ...]:
    """Return every applicable rule the edge violates, in configuration order.

    Scope is checked against ``source`` (the graph key of the importing file,
    defaulting to ``edge.source``) before any forbidden pattern, so a rule
    never fires outside its scope. Each forbidden pattern is tried
    against the resolved identity and the original literal; package imports
    have only the literal.
    """
    matches: list[RuleMatch] = []
    scope_subject = source if source is not None else edge.source
    for rule in applicable_rules(scope_subject, rules):
        hit = _first_forbidden_hit(edge, rule)
        if hit is not None:
            matches.append(hit)
    return tuple(matches)


def violates(edge: Edge, rules: Iterable[Rule]) -> tuple[bool, str | None]:
    """Return whether the edge violates any rule, and the first rule's message."""
    matches = match_edge(edge, rules)
    if not matches:
        return False, None
    return True, matches[0].message


__all__ = ["RuleMatch", "applicable_rules", "match_edge", "violates"]
