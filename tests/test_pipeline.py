from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from analysis.pipeline import AnalysisPipeline, Severity, cycle_message
from graph.dependency_graph import DependencyGraph
from graph.render import EdgeState
from parse.resolution import InMemoryProbe, PathResolver
from rules.config import parse_config
from utils import normalize_identity

if TYPE_CHECKING:
    from pathlib import Path

DOMAIN_FILE = "/proj/src/domain/a.ts"
INFRA_FILE = "/proj/src/infra/db.ts"


def _pipeline(*files: str, **config: object) -> AnalysisPipeline:
    data: dict[str, object] = {
        "rules": [
            {"scope": "src/domain", "forbidden": ["src/infra"], "message": "no infra"}
        ]
    }
    data.update(config)
    return AnalysisPipeline(
        DependencyGraph(),
        parse_config(data),
        resolver=PathResolver(InMemoryProbe(files)),
    )


def test_forbidden_import_reported_then_suppressed() -> None:
    pipeline = _pipeline(DOMAIN_FILE, INFRA_FILE)
    text = "import x from '../infra/db'\n"

    result = pipeline.analyze(DOMAIN_FILE, text)

    [finding] = result.findings
    assert finding.kind == "violation"
    assert "no infra" in finding.message
    assert finding.message == "no infra (Forbidden import: ../infra/db)"
    assert finding.severity is Severity.ERROR
    assert finding.suppressed is False
    start, end = finding.span
    assert text[start:end] == "../infra/db"
    [edge] = pipeline.graph.derive_render_graph(pipeline.config.rules).edges
    assert edge.target == INFRA_FILE
    assert edge.state is EdgeState.ACTIVE_VIOLATION

    result = pipeline.analyze(DOMAIN_FILE, "// arch-ignore\n" + text)

    [finding] = result.findings
    assert finding.suppressed is True
    assert finding.severity is Severity.INFORMATION
    assert result.active_violations == []
    [edge] = pipeline.graph.derive_render_graph(pipeline.config.rules).edges
    assert edge.state is EdgeState.SUPPRESSED_VIOLATION


def test_suppression_after_side_effect_import_applies_to_its_own_line() -> None:
    pipeline = _pipeline(DOMAIN_FILE, INFRA_FILE)
    text = "import './polyfill';\n// arch-ignore\nimport { Db } from '../infra/db';\n"

    result = pipeline.analyze(DOMAIN_FILE, text)

    [finding] = result.findings
    assert finding.suppressed is True
    assert finding.line == 2
    assert finding.severity is Severity.INFORMATION
    assert result.active_violations == []


def test_reanalysis_is_idempotent() -> None:
    pipeline = _pipeline(DOMAIN_FILE, INFRA_FILE)
    text = "import x from '../infra/db'\nimport y from 'react'\n"

    first = pipeline.analyze(DOMAIN_FILE, text)
    snapshot = pipeline.graph.snapshot()
    second = pipeline.analyze(DOMAIN_FILE, text)

    assert first == second
    assert pipeline.graph.snapshot() == snapshot


def test_edges_record_resolved_and_unresolved_targets() -> None:
    pipeline = _pipeline(DOMAIN_FILE, INFRA_FILE)

    result = pipeline.analyze(
        DOMAIN_FILE, "import x from '../infra/db';\nimport y from 'react';\n"
    )

    assert [(edge.literal, edge.resolved) for edge in result.edges] == [
        ("../infra/db", INFRA_FILE),
        ("react", None),
    ]
    assert [edge.target for edge in result.edges] == [INFRA_FILE, "react"]
    assert pipeline.graph.edges_of(DOMAIN_FILE) == result.edges


def test_cycle_reported_once_both_files_are_known() -> None:
    a = "/proj/src/a.ts"
    b = "/proj/src/b.ts"
    pipeline = _pipeline(a, b, rules=[])

    first = pipeline.analyze(a, "import { b } from './b';\n")
    assert first.cycle == []
    assert first.findings == ()

    second = pipeline.analyze(b, "import { a } from './a';\n")

    assert second.cycle == [b, a, b]
    [finding] = second.findings
    assert finding.kind == "cycle"
    assert finding.severity is Severity.WARNING
    assert finding.message == "Circular Dependency Detected: b.ts -> a.ts -> b.ts"
    assert finding.cycle == (b, a, b)


def test_cycle_message_uses_base_names() -> None:
    assert cycle_message(["/x/a.ts", "/y/b.ts", "/x/a.ts"]) == (
        "Circular Dependency Detected: a.ts -> b.ts -> a.ts"
    )


def test_cycle_logged_at_info(caplog: pytest.LogCaptureFixture) -> None:
    a = "/proj/src/a.ts"
    pipeline = _pipeline(a, rules=[])

    with caplog.at_level(logging.INFO, logger="analysis.pipeline"):
        pipeline.analyze(a, "import self from './a';\n")

    assert "Circular Dependency Detected: a.ts -> a.ts" in caplog.text


def test_unsupported_extension_records_leaf() -> None:
    pipeline = _pipeline()

    result = pipeline.analyze("/proj/README.md", "import x from '../infra/db'\n")

    assert result.edges == ()
    assert result.findings == ()
    assert "/proj/README.md" in pipeline.graph


def test_explicit_dialect_overrides_extension() -> None:
    pipeline = _pipeline(INFRA_FILE)

    result = pipeline.analyze(
        "/proj/src/domain/a.vue", "import x from '../infra/db'\n", "bracketed-module"
    )

    assert [edge.resolved for edge in result.edges] == [INFRA_FILE]
    assert len(result.active_violations) == 1


def test_dart_file_uses_quoted_literal_dialect() -> None:
    pipeline = _pipeline("/proj/src/infra/db.dart")

    result = pipeline.analyze(
        "/proj/src/domain/user.dart",
        "import 'package:flutter/material.dart';\nimport '../infra/db.dart';\n",
    )

    assert [(edge.literal, edge.resolved) for edge in result.edges] == [
        ("package:flutter/material.dart", None),
        ("../infra/db.dart", "/proj/src/infra/db.dart"),
    ]
    [finding] = result.findings
    assert finding.literal == "../infra/db.dart"
    assert finding.line == 1


def test_each_matching_rule_yields_a_finding() -> None:
    pipeline = _pipeline(
        INFRA_FILE,
        rules=[
            {"scope": "src/", "forbidden": ["infra"], "message": "first"},
            {"scope": "domain", "forbidden": ["db"], "message": "second"},
        ],
    )

    result = pipeline.analyze(DOMAIN_FILE, "import x from '../infra/db';\n")

    assert [f.message for f in result.findings] == [
        "first (Forbidden import: ../infra/db)",
        "second (Forbidden import: ../infra/db)",
    ]


def test_custom_suppression_marker() -> None:
    pipeline = _pipeline(INFRA_FILE, suppression_marker="boundary-ok")

    default_marker = pipeline.analyze(
        DOMAIN_FILE, "// arch-ignore\nimport x from '../infra/db';\n"
    )
    custom_marker = pipeline.analyze(
        DOMAIN_FILE, "// boundary-ok\nimport x from '../infra/db';\n"
    )

    assert default_marker.findings[0].suppressed is False
    assert custom_marker.findings[0].suppressed is True


def test_identity_is_normalized_before_use() -> None:
    pipeline = _pipeline("C:/proj/src/infra/db.ts")

    result = pipeline.analyze(
        "C:\\proj\\src\\domain\\a.ts", "import x from '../infra/db';\n"
    )

    assert result.file == "C:/proj/src/domain/a.ts"
    assert result.edges[0].resolved == "C:/proj/src/infra/db.ts"
    assert pipeline.graph.files() == ["C:/proj/src/domain/a.ts"]


def test_analyze_path_reads_from_disk_and_forget_evicts(tmp_path: Path) -> None:
    (tmp_path / "src" / "domain").mkdir(parents=True)
    (tmp_path / "src" / "infra").mkdir()
    domain_file = tmp_path / "src" / "domain" / "a.ts"
    domain_file.write_text("import x from '../infra/db';\n", encoding="utf-8")
    (tmp_path / "src" / "infra" / "db.ts").write_text("", encoding="utf-8")
    pipeline = AnalysisPipeline(
        DependencyGraph(),
        parse_config(
            {
                "rules": [
                    {
                        "scope": "src/domain",
                        "forbidden": ["src/infra"],
                        "message": "no infra",
                    }
                ]
            }
        ),
    )

    result = pipeline.analyze_path(domain_file)

    identity = normalize_identity(domain_file)
    assert result.file == identity
    assert result.edges[0].resolved == normalize_identity(
        tmp_path / "src" / "infra" / "db.ts"
    )
    assert len(result.active_violations) == 1

    assert pipeline.forget(domain_file) is True
    assert identity not in pipeline.graph
    assert pipeline.forget(domain_file) is False
