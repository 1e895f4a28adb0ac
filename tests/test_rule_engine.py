from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from graph.model import Edge
from rules.config import ConfigError, load_rules
from rules.engine import applicable_rules, match_edge, violates

if TYPE_CHECKING:
    from rules.config import Rule

DOMAIN_FILE = "/proj/src/domain/user.ts"


def _domain_rules() -> list[Rule]:
    return load_rules(
        [
            {
                "scope": "src/domain",
                "forbidden": ["src/infra", "^react$"],
                "message": "no infra",
            }
        ]
    )


def test_scope_matches_any_depth_below_folder_name() -> None:
    rules = _domain_rules()

    assert applicable_rules("/proj/src/domain/user.ts", rules) == rules
    assert applicable_rules("/proj/src/domain/model/deep/user.ts", rules) == rules
    assert applicable_rules("/proj/src/application/user.ts", rules) == []


def test_forbidden_pattern_matches_resolved_identity() -> None:
    edge = Edge(
        source=DOMAIN_FILE,
        literal="../infra/db",
        resolved="/proj/src/infra/db.ts",
    )

    [match] = match_edge(edge, _domain_rules())

    assert match.pattern == "src/infra"
    assert match.subject == "/proj/src/infra/db.ts"
    assert violates(edge, _domain_rules()) == (True, "no infra")


def test_forbidden_pattern_matches_literal_of_unresolved_package_import() -> None:
    edge = Edge(source=DOMAIN_FILE, literal="react")

    assert violates(edge, _domain_rules()) == (True, "no infra")


def test_anchored_pattern_does_not_match_longer_package_name() -> None:
    edge = Edge(source=DOMAIN_FILE, literal="react-dom")

    assert violates(edge, _domain_rules()) == (False, None)


def test_rule_never_fires_outside_scope() -> None:
    edge = Edge(
        source="/proj/src/application/service.ts",
        literal="react",
    )

    assert match_edge(edge, _domain_rules()) == ()


def test_literal_is_checked_when_resolved_identity_does_not_match() -> None:
    rules = load_rules(
        [{"scope": "domain", "forbidden": ["^@infra/"], "message": "alias"}]
    )
    edge = Edge(source=DOMAIN_FILE, literal="@infra/db", resolved=None)

    [match] = match_edge(edge, rules)

    assert match.subject == "@infra/db"


def test_all_matching_rules_reported_in_configuration_order() -> None:
    rules = load_rules(
        [
            {"scope": "src/", "forbidden": ["lodash"], "message": "first"},
            {"scope": "never-matches", "forbidden": ["lodash"], "message": "skipped"},
            {"scope": "domain", "forbidden": ["^lod"], "message": "second"},
        ]
    )
    edge = Edge(source=DOMAIN_FILE, literal="lodash")

    assert [m.message for m in match_edge(edge, rules)] == ["first", "second"]
    assert violates(edge, rules) == (True, "first")


def test_suppressed_edge_still_matches() -> None:
    edge = Edge(source=DOMAIN_FILE, literal="react", suppressed=True)

    assert violates(edge, _domain_rules())[0] is True


def test_matching_is_pure() -> None:
    rules = _domain_rules()
    edge = Edge(source=DOMAIN_FILE, literal="react")

    assert match_edge(edge, rules) == match_edge(edge, rules)
    assert edge == Edge(source=DOMAIN_FILE, literal="react")


def test_invalid_forbidden_pattern_fails_at_load_time() -> None:
    with pytest.raises(ConfigError, match="forbidden"):
        load_rules([{"scope": "src", "forbidden": ["("], "message": "broken"}])


def test_invalid_scope_pattern_fails_at_load_time() -> None:
    with pytest.raises(ConfigError, match="scope"):
        load_rules([{"scope": "[a-", "forbidden": ["x"], "message": "broken"}])


@pytest.mark.parametrize(
    "record",
    [
        {"forbidden": ["x"], "message": "no scope"},
        {"scope": "src", "message": "no forbidden"},
        {"scope": "src", "forbidden": ["x"]},
        {"scope": "src", "forbidden": ["x"], "message": "m", "severity": "error"},
    ],
)
def test_malformed_rule_records_are_rejected(record: dict[str, object]) -> None:
    with pytest.raises(ConfigError):
        load_rules([record])


def test_empty_forbidden_list_loads_and_never_fires() -> None:
    rules = load_rules([{"scope": "src/ui", "forbidden": [], "message": "ui"}])
    edge = Edge(source="/proj/src/ui/page.ts", literal="../infra/db")

    assert rules[0].forbidden_patterns == ()
    assert match_edge(edge, rules) == ()


def test_scope_is_checked_against_explicit_source_identity() -> None:
    edge = Edge(
        source="/proj/other/x.ts",
        literal="../infra/db",
        resolved="/proj/src/infra/db.ts",
    )

    assert match_edge(edge, _domain_rules()) == ()
    [match] = match_edge(edge, _domain_rules(), DOMAIN_FILE)
    assert match.pattern == "src/infra"
