"""Data models shared by the parsers, matcher and reporting layer."""

from __future__ import annotations

from .finding import Finding, FindingLevel
from .package import InstalledPackage

# Package name -> known-malicious version strings. Built once, read-only afterwards.
AdvisoryMap = dict[str, frozenset[str]]

__all__ = [
    "AdvisoryMap",
    "Finding",
    "FindingLevel",
    "InstalledPackage",
]
