"""Human-readable summary rendering for $GITHUB_STEP_SUMMARY."""

from __future__ import annotations

from .core import ScanResult


def render_summary(result: ScanResult) -> str:
    """Return a Markdown string with totals and a table of findings."""
    stats = result.statistics

    lines = []
    lines.append("# worm-scan Summary")
    lines.append("")
    lines.append(
        f"Critical: {result.criticals} | Warnings: {result.warnings} | "
        f"Patch distance: {result.patch_distance}"
    )
    lines.append("")
    lines.append("| Metric | Value |")
    lines.append("| --- | --- |")
    lines.append(f"| Packages scanned | {stats.installed_count} |")
    lines.append(f"| Package names scanned | {stats.distinct_names} |")
    lines.append(f"| Advisory package names | {stats.advisory_names} |")
    lines.append(f"| Advisory names installed | {stats.present_count} |")
    lines.append("")
    lines.append("| Level | Package | Installed | Blocked |")
    lines.append("| --- | --- | --- | --- |")

    for finding in result.findings:
        level = finding.level.value.upper()
        lines.append(f"| {level} | {finding.name} | {finding.version} | {finding.against} |")

    if not result.findings:
        lines.append("| OK | No critical or adjacent versions found | n/a | n/a |")

    return "\n".join(lines) + "\n"
