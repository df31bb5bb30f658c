"""Command-line entry point for the infra-check scanner."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List

from .config import REPORT_FORMATS, ScanConfig, load_config
from .engine import DIALECTS, get_rule, scan
from .errors import ConfigError, ScanError
from .report import render
from .result import ScanResult
from .severity import THRESHOLD_CHOICES

EXIT_FATAL = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="infra-check",
        description="Static analysis scanner for Terraform, Ansible and Puppet code",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Log progress to stderr (repeat for debug output).",
    )
    subcommands = parser.add_subparsers(dest="command", required=True)

    scan_parser = subcommands.add_parser("scan", help="Scan a directory tree.")
    scan_parser.add_argument("dialect", choices=DIALECTS, help="Infrastructure language to scan.")
    scan_parser.add_argument("path", help="Directory (or single file) to scan.")
    scan_parser.add_argument(
        "--format",
        "-f",
        dest="report_format",
        choices=REPORT_FORMATS,
        default=None,
        help="Report format (defaults to text).",
    )
    scan_parser.add_argument(
        "--fail-on",
        dest="fail_on",
        choices=THRESHOLD_CHOICES,
        default=None,
        help="Exit non-zero when a finding at or above this severity is reported (defaults to error).",
    )
    scan_parser.add_argument(
        "--out",
        "--output",
        dest="output_path",
        default=None,
        help="Write the report to this file instead of stdout.",
    )
    scan_parser.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to a JSON config file (defaults to ./.infra-check.json when present).",
    )
    scan_parser.add_argument(
        "--linter-command",
        dest="linter_command",
        default=None,
        help="puppet-lint executable to run for puppet scans.",
    )
    scan_parser.add_argument(
        "--linter-timeout",
        dest="linter_timeout",
        type=float,
        default=None,
        help="Seconds before a puppet-lint run is abandoned (0 disables).",
    )
    return parser


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")


def run_scan(dialect: str, path: str, config: ScanConfig) -> ScanResult:
    return scan(path, get_rule(dialect, config))


def write_output(result: ScanResult, output_path: str | None, report_format: str) -> None:
    payload = render(result, report_format)
    if output_path:
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(payload if payload.endswith("\n") else payload + "\n", encoding="utf-8")
        print(f"Report written to {output_path}")
    else:
        print(payload, end="" if payload.endswith("\n") else "\n")


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = load_config(
            args.config_path,
            overrides={
                "report_format": args.report_format,
                "fail_on": args.fail_on,
                "linter_command": args.linter_command,
                "linter_timeout": args.linter_timeout,
            },
        )
        result = run_scan(args.dialect, args.path, config)
    except (ConfigError, ScanError) as exc:
        print(f"infra-check: {exc}", file=sys.stderr)
        return EXIT_FATAL

    write_output(result, args.output_path, config.report_format)
    return result.exit_code(config.threshold)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
