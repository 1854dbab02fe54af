"""Console rendering of scan results.

Colour is decided by rich: it is dropped when output is not a terminal or when
``NO_COLOR`` is set.
"""

from __future__ import annotations

from typing import TextIO

from rich.console import Console
from rich.text import Text

from .core import ScanResult
from .report import AdvisoryPresence


def make_console(file: TextIO | None = None, *, stderr: bool = False) -> Console:
    return Console(file=file, stderr=stderr, highlight=False, markup=False, soft_wrap=True)


def _presence_line(presence: AdvisoryPresence) -> Text:
    affected = ", ".join(presence.affected_versions)
    if presence.omitted:
        affected += f" (+{presence.omitted} more)"
    installed = ", ".join(presence.installed_versions)
    return Text.assemble(
        ("INFO", "cyan"), f" {presence.name} installed {installed}; affected: {affected}"
    )


def print_findings(console: Console, result: ScanResult) -> None:
    """Print one line per finding followed by a summary and statistics."""
    for finding in result.findings:
        subject = f"{finding.name}@{finding.version}"
        if finding.is_critical:
            console.print(
                Text.assemble(("CRITICAL", "bold red"), f": {subject} matches blocked {finding.against}")
            )
        else:
            console.print(
                Text.assemble(
                    ("WARNING", "yellow"),
                    f": {subject} adjacent to blocked {finding.against} "
                    f"(patch distance {result.patch_distance})",
                )
            )

    criticals, warnings = result.criticals, result.warnings
    if not result.findings:
        console.print(Text("No critical or adjacent versions found.", style="green"))
    else:
        summary = f"Summary: {criticals} critical, {warnings} warning{'' if warnings == 1 else 's'}"
        console.print(Text(summary, style="red" if criticals else "yellow"))

    stats = result.statistics
    console.print(f"Scanned {stats.installed_count} packages ({stats.distinct_names} names).")
    console.print(f"DB package names: {stats.advisory_names}")
    console.print(f"DB packages present: {stats.present_count}")
    for presence in stats.present:
        console.print(_presence_line(presence))


def print_error(console: Console, message: str) -> None:
    console.print(Text(f"Error: {message}", style="red"))
