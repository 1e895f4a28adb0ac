"""Command-line interface for archsentinel."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from analysis.project import analyze_project
from report.write import dumps_json, format_finding, write_findings, write_render_graph
from rules.config import CONFIG_FILENAME, ConfigError, load_config


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Project root (default: .)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"Rule file (default: <root>/{CONFIG_FILENAME})",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="archsentinel")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check", help="Report boundary violations and dependency cycles"
    )
    _add_common_paths(check_parser)
    check_parser.add_argument(
        "--findings-out",
        default=None,
        help="Also write findings as JSON lines to this path",
    )

    graph_parser = subparsers.add_parser(
        "graph", help="Write the dependency graph with metrics as JSON"
    )
    _add_common_paths(graph_parser)
    graph_parser.add_argument(
        "--out",
        default=None,
        help="Output file (default: stdout)",
    )

    validate_parser = subparsers.add_parser("validate", help="Validate the rule file")
    _add_common_paths(validate_parser)

    return parser


def _resolve_config_path(config: str | None) -> Path | None:
    if config is None:
        return None
    return Path(config).expanduser().resolve()


def _handle_check(
    root: Path, config_path: Path | None, findings_out: str | None
) -> int:
    config = load_config(root, config_path)
    report = analyze_project(root, config=config)

    for finding in report.findings:
        sys.stdout.write(format_finding(finding, root) + "\n")

    if findings_out is not None:
        write_findings(Path(findings_out).expanduser().resolve(), report.findings)

    sys.stdout.write(
        f"{len(report.files)} file(s), "
        f"{len(report.active_violations)} violation(s), "
        f"{len(report.cycles)} cycle(s)\n"
    )
    return 0 if report.ok else 1


def _handle_graph(root: Path, config_path: Path | None, out: str | None) -> int:
    config = load_config(root, config_path)
    report = analyze_project(root, config=config)
    render_graph = report.render_graph()

    if out is None:
        sys.stdout.write(dumps_json(render_graph).decode("utf-8") + "\n")
    else:
        write_render_graph(Path(out).expanduser().resolve(), render_graph)
    return 0


def _handle_validate(root: Path, config_path: Path | None) -> int:
    config = load_config(root, config_path)
    sys.stdout.write(f"{len(config.rules)} rule(s) OK\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    root = Path(args.root).expanduser().resolve()
    config_path = _resolve_config_path(args.config)

    try:
        if args.command == "check":
            return _handle_check(root, config_path, args.findings_out)

        if args.command == "graph":
            return _handle_graph(root, config_path, args.out)

        if args.command == "validate":
            return _handle_validate(root, config_path)
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
