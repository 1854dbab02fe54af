"""Classify installed packages against the advisory map.

An installed version that appears verbatim in a package's advisory set is
*critical*. A parsable version sharing major.minor with an advisory version and
within ``patch_distance`` patches of it is a *warning*. Everything else is
clean. At most one finding is produced per installed package.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Set

from .config import coerce_patch_distance
from .models import Finding, FindingLevel, InstalledPackage
from .parsers.semver import parse_semver, sorted_versions, version_sort_key

logger = logging.getLogger(__name__)


def _classify(
    package: InstalledPackage, blocked: Set[str], patch_distance: int
) -> Finding | None:
    if package.version in blocked:
        return Finding(FindingLevel.CRITICAL, package.name, package.version, package.version)

    installed = parse_semver(package.version)
    if installed is None:
        return None

    # Ascending order makes the choice between equally close versions stable.
    for candidate in sorted_versions(blocked):
        if candidate == package.version:
            return Finding(FindingLevel.CRITICAL, package.name, package.version, candidate)
        parsed = parse_semver(candidate)
        if parsed is None:
            continue
        if parsed.major != installed.major or parsed.minor != installed.minor:
            continue
        if abs(parsed.patch - installed.patch) <= patch_distance:
            return Finding(FindingLevel.WARNING, package.name, package.version, candidate)
    return None


def finding_sort_key(finding: Finding) -> tuple:
    return (
        finding.level.rank,
        finding.name,
        version_sort_key(finding.version),
        finding.version,
    )


def scan(
    installed: Iterable[InstalledPackage],
    advisories: Mapping[str, Set[str]],
    patch_distance: int = 1,
) -> list[Finding]:
    """Return findings ordered critical first, then by name and version."""
    distance = coerce_patch_distance(patch_distance)
    findings: list[Finding] = []

    for package in installed:
        blocked = advisories.get(package.name)
        if not blocked:
            continue
        finding = _classify(package, blocked, distance)
        if finding is not None:
            logger.debug("%s %s against %s", finding.level.value, package, finding.against)
            findings.append(finding)

    findings.sort(key=finding_sort_key)
    return findings
