"""Command-line entrypoint.

Usage:
  worm-scan [--root DIR] [--data-url URL] [--npm-ls-json FILE]
            [--patch-distance N] [--json] [--summary FILE] [--verbose]

Exit codes: 2 when any critical finding exists, 1 on errors (feed retrieval,
dependency tree acquisition, configuration, report schema), 0 otherwise.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from . import __version__
from .config import ConfigError, load_settings
from .console import make_console, print_error, print_findings
from .core import scan_project
from .ingestion import DependencyTreeError, FeedError
from .log import setup_logging
from .report import build_report
from .summary import render_summary
from .validators import ReportSchemaError, validate_report


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="worm-scan",
        description="Check installed npm packages against a list of known-malicious versions.",
    )
    parser.add_argument("--root", type=Path, default=None, help="Project directory (default: cwd)")
    parser.add_argument(
        "--data-url",
        default=None,
        help="Advisory feed URL, file:// URL or path (env: WORMSCAN_DATA_URL)",
    )
    parser.add_argument(
        "--npm-ls-json",
        default=None,
        help="Read the tree from saved `npm ls --all --json` output (env: WORMSCAN_NPM_LS_JSON)",
    )
    parser.add_argument(
        "--patch-distance",
        default=None,
        help="Warn on versions within N patches of a blocked one (env: WORMSCAN_PATCH_DISTANCE)",
    )
    parser.add_argument(
        "--ecosystem",
        default=None,
        help="Advisory ecosystem to keep (env: WORMSCAN_ECOSYSTEM, default: npm)",
    )
    parser.add_argument("--json", action="store_true", help="Print a JSON report instead of text")
    parser.add_argument("--summary", type=Path, default=None, help="Write a Markdown summary here")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    err_console = make_console(stderr=True)
    setup_logging(verbose=args.verbose, console=err_console)

    try:
        settings = load_settings(
            data_url=args.data_url,
            npm_ls_json=args.npm_ls_json,
            patch_distance=args.patch_distance,
            ecosystem=args.ecosystem,
            root=args.root,
        )
        result = scan_project(settings)
    except (ConfigError, FeedError, DependencyTreeError) as exc:
        print_error(err_console, str(exc))
        return 1

    if args.json:
        report = build_report(result.findings, result.statistics, result.patch_distance)
        try:
            validate_report(report)
        except ReportSchemaError as exc:
            print_error(err_console, f"Report does not match its schema: {exc}")
            return 1
        print(json.dumps(report, indent=2))
    else:
        print_findings(make_console(sys.stdout), result)

    if args.summary is not None:
        try:
            args.summary.write_text(render_summary(result), encoding="utf-8")
        except OSError as exc:
            print_error(err_console, f"Failed to write summary {args.summary}: {exc}")
            return 1

    return result.exit_code


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
