"""Normalise an advisory feed of unknown shape into an :data:`AdvisoryMap`.

Upstream feeds have used several layouts over time: arrays of records, maps of
package name to versions, wrapper objects such as ``{"packages": [...]}``, and
mixtures of those. Each recognised layout is described by a :class:`ShapeRule`.
Every rule is offered every value, all matching rules fire, and the facts they
yield are unioned. Unrecognised structure is ignored rather than rejected.
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from dataclasses import dataclass
from typing import Any
from collections.abc import Callable, Iterator

from ..models import AdvisoryMap

logger = logging.getLogger(__name__)

DEFAULT_ECOSYSTEM = "npm"

NAME_FIELDS = ("name", "package", "package_name", "packageName", "pkg", "module")
VERSION_FIELD = "version"
VERSION_LIST_FIELDS = ("versions", "affected_versions", "affected")
CONTAINER_KEYS = frozenset(
    {"packages", "data", "malware", "items", "entries", "results", "advisories"}
)
ECOSYSTEM_FIELD = "ecosystem"

# Keys that never name a package when read as ``{name: versions}``.
_RESERVED_KEYS = CONTAINER_KEYS | {VERSION_FIELD, ECOSYSTEM_FIELD, *VERSION_LIST_FIELDS}

_MAX_DEPTH = 16
_VERSION_LIKE = re.compile(r"^v?[0-9]+(?:\.[0-9]+)+")

Fact = tuple[str, str]


@dataclass(frozen=True, slots=True)
class _Context:
    ecosystem: str
    depth: int = 0

    def deeper(self) -> _Context:
        return _Context(ecosystem=self.ecosystem, depth=self.depth + 1)


@dataclass(frozen=True, slots=True)
class ShapeRule:
    """A recognised feed layout: a predicate plus the facts it extracts."""

    name: str
    applies: Callable[[Any], bool]
    extract: Callable[[Any, _Context], Iterator[Fact]]


# ---- value helpers ---------------------------------------------------------------------


def _scalar(value: Any) -> str | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str) and value:
        return value
    return None


def _looks_like_version(value: Any) -> bool:
    return isinstance(value, str) and _VERSION_LIKE.match(value.strip()) is not None


def _is_version_list(value: Any) -> bool:
    return (
        isinstance(value, list)
        and bool(value)
        and all(_looks_like_version(item) for item in value)
    )


def _record_name(record: dict[str, Any]) -> str | None:
    # The first name field present decides, even when its value is unusable.
    for field in NAME_FIELDS:
        if field in record:
            candidate = record[field]
            return candidate if isinstance(candidate, str) and candidate else None
    return None


def _has_version_fields(record: dict[str, Any]) -> bool:
    return VERSION_FIELD in record or any(field in record for field in VERSION_LIST_FIELDS)


def _is_record(value: Any) -> bool:
    return isinstance(value, dict) and _record_name(value) is not None and _has_version_fields(value)


def _is_foreign(record: dict[str, Any], ecosystem: str) -> bool:
    tag = record.get(ECOSYSTEM_FIELD)
    if tag is None:
        return False
    return str(tag).strip().lower() != ecosystem.lower()


def _record_facts(record: dict[str, Any], ctx: _Context, fallback_name: str | None = None) -> Iterator[Fact]:
    if _is_foreign(record, ctx.ecosystem):
        return
    name = _record_name(record) or fallback_name
    if not name:
        return

    single = record.get(VERSION_FIELD)
    candidates: list[Any] = list(single) if isinstance(single, list) else [single]
    for field in VERSION_LIST_FIELDS:
        values = record.get(field)
        if isinstance(values, list):
            candidates.extend(values)

    for candidate in candidates:
        version = _scalar(candidate)
        if version is not None:
            yield name, version


# ---- shape rules -----------------------------------------------------------------------


def _is_sequence(value: Any) -> bool:
    return isinstance(value, list)


def _is_mapping(value: Any) -> bool:
    return isinstance(value, dict) and not _is_record(value)


def _extract_record_sequence(value: list[Any], ctx: _Context) -> Iterator[Fact]:
    for entry in value:
        if _is_record(entry):
            yield from _record_facts(entry, ctx)
        elif isinstance(entry, dict) and _record_name(entry) is None and ctx.depth < _MAX_DEPTH:
            # Map-shaped element inside an otherwise record-shaped array.
            yield from _apply_rules(entry, ctx.deeper())


def _extract_single_record(value: dict[str, Any], ctx: _Context) -> Iterator[Fact]:
    yield from _record_facts(value, ctx)


def _extract_keyed_versions(value: dict[str, Any], ctx: _Context) -> Iterator[Fact]:
    for key, versions in value.items():
        if key in _RESERVED_KEYS or not _is_version_list(versions):
            continue
        for version in versions:
            yield str(key), version


def _extract_keyed_version_string(value: dict[str, Any], ctx: _Context) -> Iterator[Fact]:
    for key, version in value.items():
        if key in _RESERVED_KEYS:
            continue
        if _looks_like_version(version):
            yield str(key), version


def _extract_containers(value: dict[str, Any], ctx: _Context) -> Iterator[Fact]:
    if ctx.depth >= _MAX_DEPTH:
        return
    for key in sorted(CONTAINER_KEYS):
        if key in value:
            yield from _apply_rules(value[key], ctx.deeper())


def _extract_nested_objects(value: dict[str, Any], ctx: _Context) -> Iterator[Fact]:
    for key, inner in value.items():
        if key in _RESERVED_KEYS or not isinstance(inner, dict):
            continue
        if _has_version_fields(inner):
            # {"evil": {"versions": [...]}}: the outer key names the package.
            yield from _record_facts(inner, ctx, fallback_name=str(key))
            continue
        for inner_key, versions in inner.items():
            if _is_version_list(versions):
                for version in versions:
                    yield str(inner_key), version


SHAPE_RULES: tuple[ShapeRule, ...] = (
    ShapeRule("record-sequence", _is_sequence, _extract_record_sequence),
    ShapeRule("single-record", _is_record, _extract_single_record),
    ShapeRule("keyed-versions", _is_mapping, _extract_keyed_versions),
    ShapeRule("keyed-version-string", _is_mapping, _extract_keyed_version_string),
    ShapeRule("container", _is_mapping, _extract_containers),
    ShapeRule("nested-object", _is_mapping, _extract_nested_objects),
)


def _apply_rules(value: Any, ctx: _Context) -> Iterator[Fact]:
    for rule in SHAPE_RULES:
        if rule.applies(value):
            yield from rule.extract(value, ctx)


def normalise_advisories(data: Any, ecosystem: str = DEFAULT_ECOSYSTEM) -> AdvisoryMap:
    """Reduce a decoded advisory feed to ``{package name: frozenset(versions)}``.

    Never raises for any JSON-like input; shapes it does not recognise simply
    contribute nothing.
    """
    collected: dict[str, set[str]] = defaultdict(set)
    facts = 0
    for name, version in _apply_rules(data, _Context(ecosystem=ecosystem)):
        collected[name].add(version)
        facts += 1

    advisories = {name: frozenset(versions) for name, versions in collected.items() if versions}
    logger.debug(
        "Normalised %d advisory facts into %d packages (%d versions)",
        facts,
        len(advisories),
        sum(len(v) for v in advisories.values()),
    )
    return advisories
