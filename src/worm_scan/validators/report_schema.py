"""Schema checks for worm-scan JSON reports.

``worm-scan --json`` validates every report before printing it. The
``worm-scan-validate`` entrypoint checks reports saved earlier, one or more
files per run, reading standard input for ``-``.
"""

from __future__ import annotations

import argparse
import json
import sys
from functools import lru_cache
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

DEFAULT_SCHEMA = Path(__file__).resolve().with_name("report.schema.json")


class ReportSchemaError(ValueError):
    """Raised when a report does not conform to the report schema."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


@lru_cache(maxsize=4)
def _validator(schema_path: Path) -> Draft202012Validator:
    schema = json.loads(schema_path.read_text(encoding="utf-8"))
    Draft202012Validator.check_schema(schema)
    return Draft202012Validator(schema)


def report_errors(document: Any, schema_path: Path = DEFAULT_SCHEMA) -> list[str]:
    """Return ``"<json path>: <message>"`` lines for ``document``; empty when valid."""
    errors = sorted(_validator(schema_path).iter_errors(document), key=lambda e: e.json_path)
    return [f"{error.json_path}: {error.message}" for error in errors]


def validate_report(document: Any, schema_path: Path = DEFAULT_SCHEMA) -> None:
    errors = report_errors(document, schema_path)
    if errors:
        raise ReportSchemaError(errors)


def _read_report(source: str) -> Any:
    if source == "-":
        return json.load(sys.stdin)
    return json.loads(Path(source).read_text(encoding="utf-8"))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="worm-scan-validate",
        description="Validate saved `worm-scan --json` reports.",
    )
    parser.add_argument("reports", nargs="+", help="Report files to check, or - for stdin")
    parser.add_argument("--schema", type=Path, default=DEFAULT_SCHEMA, help="Alternative schema file")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    failed = 0
    for source in args.reports:
        try:
            errors = report_errors(_read_report(source), args.schema)
        except (OSError, ValueError) as exc:
            # json.JSONDecodeError and UnicodeDecodeError are both ValueErrors.
            print(f"{source}: unreadable: {exc}", file=sys.stderr)
            failed += 1
            continue
        if errors:
            failed += 1
            for line in errors:
                print(f"{source}: {line}", file=sys.stderr)
        else:
            print(f"{source}: ok")
    return 1 if failed else 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
