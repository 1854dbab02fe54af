"""Minimal semver handling: major.minor.patch only.

Supported inputs:
- plain versions (e.g., "1.2.3")
- a single leading "v" ("v1.2.3")
- prerelease suffixes on the patch segment ("1.2.3-beta.1", "1.2.3-rc.1+sha");
  the patch is cut at its first "-" only, so "1.2.3+sha" is unparsable

Anything with fewer than three numeric dot-separated segments is unparsable.
Ranges and prerelease precedence are deliberately not modelled.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any


_NUMERIC = re.compile(r"[0-9]+")


@dataclass(frozen=True, slots=True, order=True)
class ParsedVersion:
    major: int
    minor: int
    patch: int


def _to_int(segment: str) -> int | None:
    if not _NUMERIC.fullmatch(segment):
        return None
    return int(segment)


def parse_semver(value: Any) -> ParsedVersion | None:
    """Return the parsed version, or None when ``value`` is not semver-like."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    if text.startswith("v"):
        text = text[1:]

    parts = text.split(".")
    if len(parts) < 3:
        return None

    patch_segment = parts[2].split("-", 1)[0]
    major = _to_int(parts[0])
    minor = _to_int(parts[1])
    patch = _to_int(patch_segment)
    if major is None or minor is None or patch is None:
        return None
    return ParsedVersion(major=major, minor=minor, patch=patch)


def compare_versions(a: str, b: str) -> int:
    """Order two version strings; parsable ones first, the rest lexically."""
    pa = parse_semver(a)
    pb = parse_semver(b)
    if pa is not None and pb is not None:
        return (pa > pb) - (pa < pb)
    if pa is not None:
        return -1
    if pb is not None:
        return 1
    sa, sb = str(a), str(b)
    return (sa > sb) - (sa < sb)


version_sort_key = cmp_to_key(compare_versions)


def sorted_versions(versions: Any) -> list[str]:
    """Sort versions ascending; the raw string breaks ties between equal parses."""
    return sorted(versions, key=lambda v: (version_sort_key(v), v))
