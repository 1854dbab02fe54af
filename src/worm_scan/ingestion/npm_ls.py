"""Acquire the resolved dependency tree from ``npm ls``."""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

NPM_LS_COMMAND = ("npm", "ls", "--all", "--json")


class DependencyTreeError(RuntimeError):
    """Raised when the dependency tree cannot be obtained or decoded."""


def _decode(text: str, label: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DependencyTreeError(f"Failed to parse JSON from {label}: {exc.msg}") from exc


def _run_npm_ls(cwd: Path) -> str:
    try:
        proc = subprocess.run(
            list(NPM_LS_COMMAND),
            cwd=cwd,
            capture_output=True,
            encoding="utf-8",
            check=False,
        )
    except UnicodeDecodeError as exc:
        raise DependencyTreeError(f"Failed to parse JSON from npm ls: not valid UTF-8 ({exc.reason})") from exc
    except OSError as exc:
        raise DependencyTreeError(f"Failed to spawn npm ls: {exc}") from exc

    if not proc.stdout.strip():
        message = proc.stderr.strip() or "npm ls produced no output"
        raise DependencyTreeError(f"npm ls failed: {message}")
    if proc.returncode != 0:
        # npm ls exits non-zero for missing/invalid peers but still prints the tree.
        logger.warning("npm ls exited with status %d; using its output anyway", proc.returncode)
    return proc.stdout


def read_npm_tree(root: Path, override: Path | None = None) -> Any:
    """Return the decoded ``npm ls --all --json`` tree for the project at ``root``.

    When ``override`` is given the tree is read from that JSON file instead of
    spawning npm.
    """
    if override is not None:
        try:
            text = override.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise DependencyTreeError(
                f"Failed to parse JSON from file {override}: not valid UTF-8 ({exc.reason})"
            ) from exc
        except OSError as exc:
            raise DependencyTreeError(f"Failed to read dependency tree {override}: {exc}") from exc
        return _decode(text, f"file {override}")

    return _decode(_run_npm_ls(root), "npm ls")
