"""Shared pytest fixtures."""

from pathlib import Path

import pytest

from worm_scan.config import (
    DATA_URL_ENV_VAR,
    ECOSYSTEM_ENV_VAR,
    NPM_LS_JSON_ENV_VAR,
    PATCH_DISTANCE_ENV_VAR,
)

FIXTURES = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's shell from leaking into scans or colouring output."""
    for var in (DATA_URL_ENV_VAR, NPM_LS_JSON_ENV_VAR, PATCH_DISTANCE_ENV_VAR, ECOSYSTEM_ENV_VAR):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    monkeypatch.delenv("TTY_COMPATIBLE", raising=False)
    monkeypatch.setenv("NO_COLOR", "1")


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def fixture_url():
    """Return a file:// URL for a fixture file."""

    def _url(name: str) -> str:
        return (FIXTURES / name).as_uri()

    return _url
