"""Flatten ``npm ls --all --json`` output into distinct installed packages."""

from __future__ import annotations

import logging
from typing import Any

from ..models import InstalledPackage
from .semver import version_sort_key

logger = logging.getLogger(__name__)

_ENTER = "enter"
_LEAVE = "leave"


def _node_name(node: dict[str, Any], inferred: str | None) -> str | None:
    name = node.get("name")
    if isinstance(name, str) and name:
        return name
    return inferred or None


def _node_version(node: dict[str, Any]) -> str | None:
    version = node.get("version")
    if isinstance(version, str) and version:
        return version
    return None


def flatten_packages(tree: Any) -> list[InstalledPackage]:
    """Return installed packages sorted by name, then semantic version.

    Nodes are visited depth-first. A node without a resolvable name or version
    is not emitted but its children are still walked. Each (name, version)
    pair appears once no matter how many parents reference it. A node that is
    already on the current traversal path is not re-entered, which breaks
    reference cycles.
    """
    if not isinstance(tree, dict):
        return []

    seen: set[tuple[str, str]] = set()
    results: list[InstalledPackage] = []
    active: set[int] = set()
    walked: set[tuple[int, str | None]] = set()

    root_name = tree.get("name") if isinstance(tree.get("name"), str) else None
    stack: list[tuple[str, Any, str | None]] = [(_ENTER, tree, root_name)]

    while stack:
        action, node, inferred = stack.pop()
        if action == _LEAVE:
            active.discard(id(node))
            continue
        if not isinstance(node, dict):
            continue

        ident = id(node)
        if ident in active:
            logger.debug("Dependency cycle detected at %r; not descending again", inferred)
            continue
        if (ident, inferred) in walked:
            continue
        walked.add((ident, inferred))

        name = _node_name(node, inferred)
        version = _node_version(node)
        if name and version and (name, version) not in seen:
            seen.add((name, version))
            results.append(InstalledPackage(name=name, version=version))

        active.add(ident)
        stack.append((_LEAVE, node, None))
        deps = node.get("dependencies")
        if isinstance(deps, dict):
            # Reversed so the first dependency is visited first.
            for dep_name, child in reversed(list(deps.items())):
                stack.append((_ENTER, child, str(dep_name)))

    results.sort(key=lambda p: (p.name, version_sort_key(p.version), p.version))
    logger.debug("Flattened dependency tree into %d packages", len(results))
    return results
