"""Validation helpers for worm-scan JSON reports."""

from .report_schema import DEFAULT_SCHEMA, ReportSchemaError, report_errors, validate_report

__all__ = [
    "DEFAULT_SCHEMA",
    "ReportSchemaError",
    "report_errors",
    "validate_report",
]
