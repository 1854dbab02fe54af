"""Runtime settings for a scan.

Settings are resolved from, in priority order: explicit overrides (CLI flags),
``WORMSCAN_*`` environment variables, then built-in defaults. Validation is
lightweight and raises :class:`ConfigError` with a readable message.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from collections.abc import Mapping

DEFAULT_DATA_URL = "https://malware-list.aikido.dev/malware_predictions.json"
DEFAULT_PATCH_DISTANCE = 1
DEFAULT_ECOSYSTEM = "npm"
DEFAULT_MAX_AFFECTED_SHOWN = 10

DATA_URL_ENV_VAR = "WORMSCAN_DATA_URL"
NPM_LS_JSON_ENV_VAR = "WORMSCAN_NPM_LS_JSON"
PATCH_DISTANCE_ENV_VAR = "WORMSCAN_PATCH_DISTANCE"
ECOSYSTEM_ENV_VAR = "WORMSCAN_ECOSYSTEM"


class ConfigError(RuntimeError):
    """Raised when settings cannot be resolved into a usable configuration."""


def coerce_patch_distance(raw: Any) -> int:
    """Return a non-negative integer threshold, falling back to the default.

    Absent, empty, negative, boolean and non-integer values (``"1.5"``,
    ``"abc"``, ``2.5``) all yield :data:`DEFAULT_PATCH_DISTANCE`.
    """
    if raw is None or isinstance(raw, bool):
        return DEFAULT_PATCH_DISTANCE
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        if not raw.is_integer():
            return DEFAULT_PATCH_DISTANCE
        value = int(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            return DEFAULT_PATCH_DISTANCE
        try:
            value = int(text)
        except ValueError:
            return DEFAULT_PATCH_DISTANCE
    else:
        return DEFAULT_PATCH_DISTANCE
    return value if value >= 0 else DEFAULT_PATCH_DISTANCE


@dataclass(slots=True, frozen=True)
class Settings:
    """Resolved scan configuration."""

    data_url: str = DEFAULT_DATA_URL
    npm_ls_json: Path | None = None
    patch_distance: int = DEFAULT_PATCH_DISTANCE
    ecosystem: str = DEFAULT_ECOSYSTEM
    root: Path = Path(".")
    max_affected_shown: int = DEFAULT_MAX_AFFECTED_SHOWN

    def resolved_npm_ls_json(self) -> Path | None:
        """Return the tree override path, resolved against the project root."""
        if self.npm_ls_json is None:
            return None
        return (self.root / self.npm_ls_json).resolve()


def _pick(override: Any, environ: Mapping[str, str], env_var: str) -> Any:
    if override is not None:
        return override
    value = environ.get(env_var)
    if value is None or value == "":
        return None
    return value


def load_settings(
    *,
    data_url: str | None = None,
    npm_ls_json: Path | str | None = None,
    patch_distance: Any = None,
    ecosystem: str | None = None,
    root: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Build :class:`Settings` from overrides and the environment.

    Args:
        data_url: Advisory feed URL or path; overrides ``WORMSCAN_DATA_URL``.
        npm_ls_json: Saved ``npm ls --all --json`` output; overrides
            ``WORMSCAN_NPM_LS_JSON``.
        patch_distance: Warning threshold; overrides ``WORMSCAN_PATCH_DISTANCE``.
        ecosystem: Advisory ecosystem to keep; overrides ``WORMSCAN_ECOSYSTEM``.
        root: Project directory; defaults to the current directory.
        environ: Environment mapping, defaults to ``os.environ``.

    Raises:
        ConfigError: If the resolved values are unusable.
    """
    env = os.environ if environ is None else environ

    url = _pick(data_url, env, DATA_URL_ENV_VAR) or DEFAULT_DATA_URL
    if not isinstance(url, str) or not url.strip():
        raise ConfigError("Advisory data URL must be a non-empty string")

    tree_path = _pick(npm_ls_json, env, NPM_LS_JSON_ENV_VAR)

    eco = _pick(ecosystem, env, ECOSYSTEM_ENV_VAR) or DEFAULT_ECOSYSTEM
    if not isinstance(eco, str) or not eco.strip():
        raise ConfigError("Ecosystem must be a non-empty string")

    root_path = Path(root) if root is not None else Path.cwd()
    if not root_path.is_dir():
        raise ConfigError(f"Project root is not a directory: {root_path}")

    return Settings(
        data_url=url.strip(),
        npm_ls_json=Path(tree_path) if tree_path else None,
        patch_distance=coerce_patch_distance(_pick(patch_distance, env, PATCH_DISTANCE_ENV_VAR)),
        ecosystem=eco.strip(),
        root=root_path,
    )
