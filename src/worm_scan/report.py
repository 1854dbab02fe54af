"""Report aggregation and schema-friendly output."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any
from collections.abc import Iterable, Mapping, Set

from .config import DEFAULT_MAX_AFFECTED_SHOWN
from .models import Finding, FindingLevel, InstalledPackage
from .parsers.semver import sorted_versions

REPORT_SCHEMA_VERSION = "1"


@dataclass(frozen=True, slots=True)
class AdvisoryPresence:
    """An advisory-listed package name that is actually installed."""

    name: str
    installed_versions: tuple[str, ...]
    affected_versions: tuple[str, ...]
    omitted: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "installedVersions": list(self.installed_versions),
            "affectedVersions": list(self.affected_versions),
            "omittedVersions": self.omitted,
        }


@dataclass(frozen=True, slots=True)
class ScanStatistics:
    """Counts describing the intersection of installed packages and advisories."""

    installed_count: int
    distinct_names: int
    advisory_names: int
    present: tuple[AdvisoryPresence, ...]

    @property
    def present_count(self) -> int:
        return len(self.present)


def summarise(
    installed: Iterable[InstalledPackage],
    advisories: Mapping[str, Set[str]],
    max_affected_shown: int = DEFAULT_MAX_AFFECTED_SHOWN,
) -> ScanStatistics:
    """Derive scan statistics from the installed list and the advisory map.

    Affected versions are listed in ascending order and capped at
    ``max_affected_shown``; ``omitted`` records how many were left out.
    """
    by_name: dict[str, list[str]] = defaultdict(list)
    total = 0
    for package in installed:
        total += 1
        by_name[package.name].append(package.version)

    limit = max(0, max_affected_shown)
    present: list[AdvisoryPresence] = []
    for name in sorted(by_name):
        blocked = advisories.get(name)
        if not blocked:
            continue
        affected = sorted_versions(blocked)
        present.append(
            AdvisoryPresence(
                name=name,
                installed_versions=tuple(sorted_versions(set(by_name[name]))),
                affected_versions=tuple(affected[:limit]),
                omitted=max(0, len(affected) - limit),
            )
        )

    return ScanStatistics(
        installed_count=total,
        distinct_names=len(by_name),
        advisory_names=len(advisories),
        present=tuple(present),
    )


def build_report(
    findings: list[Finding],
    statistics: ScanStatistics,
    patch_distance: int,
) -> dict[str, Any]:
    """Assemble a JSON-serialisable report matching ``report.schema.json``."""
    criticals = sum(1 for f in findings if f.level is FindingLevel.CRITICAL)
    warnings = len(findings) - criticals

    report: dict[str, Any] = {
        "version": REPORT_SCHEMA_VERSION,  # schema requires a string
        "hasFindings": bool(findings),
        "hasCritical": criticals > 0,
        "patchDistance": patch_distance,
        "findings": [f.to_dict() for f in findings],
        "totals": {
            "critical": criticals,
            "warning": warnings,
            "installedPackages": statistics.installed_count,
            "installedNames": statistics.distinct_names,
            "advisoryNames": statistics.advisory_names,
            "advisoryNamesPresent": statistics.present_count,
        },
        "advisoriesPresent": [p.to_dict() for p in statistics.present],
    }

    return report
