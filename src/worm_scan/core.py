"""Core scanning entrypoints.

This module MUST NOT print or configure logging so it can be driven by the CLI
as well as by other tooling. Transport failures surface as the ingestion
errors (``FeedError``, ``DependencyTreeError``); data shape never does.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

from .config import (
    DEFAULT_ECOSYSTEM,
    DEFAULT_MAX_AFFECTED_SHOWN,
    DEFAULT_PATCH_DISTANCE,
    Settings,
    coerce_patch_distance,
)
from .ingestion import fetch_advisory_feed, normalise_advisories, read_npm_tree
from .matcher import scan
from .models import AdvisoryMap, Finding, InstalledPackage
from .parsers.npm_tree import flatten_packages
from .report import ScanStatistics, summarise

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Everything the presentation layer needs from one scan."""

    findings: list[Finding]
    installed: list[InstalledPackage]
    advisories: AdvisoryMap
    statistics: ScanStatistics
    patch_distance: int

    @property
    def criticals(self) -> int:
        return sum(1 for f in self.findings if f.is_critical)

    @property
    def warnings(self) -> int:
        return len(self.findings) - self.criticals

    @property
    def exit_code(self) -> int:
        return 2 if self.criticals else 0


def evaluate(
    feed: Any,
    tree: Any,
    *,
    patch_distance: int = DEFAULT_PATCH_DISTANCE,
    ecosystem: str = DEFAULT_ECOSYSTEM,
    max_affected_shown: int = DEFAULT_MAX_AFFECTED_SHOWN,
) -> ScanResult:
    """Run the pure matching pipeline over already-decoded inputs."""
    patch_distance = coerce_patch_distance(patch_distance)
    advisories = normalise_advisories(feed, ecosystem=ecosystem)
    installed = flatten_packages(tree)
    findings = scan(installed, advisories, patch_distance)
    statistics = summarise(installed, advisories, max_affected_shown)
    logger.info(
        "Scanned %d packages against %d advisory names: %d findings",
        len(installed),
        len(advisories),
        len(findings),
    )
    return ScanResult(
        findings=findings,
        installed=installed,
        advisories=advisories,
        statistics=statistics,
        patch_distance=patch_distance,
    )


def scan_project(settings: Settings) -> ScanResult:
    """Fetch both inputs concurrently, then evaluate them.

    Raises:
        FeedError: If the advisory feed cannot be fetched or decoded.
        DependencyTreeError: If the dependency tree cannot be obtained.
    """
    with ThreadPoolExecutor(max_workers=2) as pool:
        feed_future = pool.submit(fetch_advisory_feed, settings.data_url)
        tree_future = pool.submit(read_npm_tree, settings.root, settings.resolved_npm_ls_json())
        feed = feed_future.result()
        tree = tree_future.result()

    return evaluate(
        feed,
        tree,
        patch_distance=settings.patch_distance,
        ecosystem=settings.ecosystem,
        max_affected_shown=settings.max_affected_shown,
    )
