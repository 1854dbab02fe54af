"""Advisory feed retrieval helpers."""

from __future__ import annotations

import json
import platform
import sys
from pathlib import Path
from typing import Any
from urllib.parse import urlparse
from urllib.request import url2pathname

import requests
from requests import Response
from tenacity import retry, stop_after_attempt, wait_fixed

from .. import __version__

USER_AGENT = f"worm-scan/{__version__} ({sys.platform}; Python {platform.python_version()})"


class FeedError(RuntimeError):
    """Base error for failures while fetching or decoding the advisory feed."""


class FeedFetchError(FeedError):
    """Raised when the feed cannot be retrieved."""


class FeedParseError(FeedError):
    """Raised when the retrieved feed is not valid JSON."""


@retry(reraise=True, stop=stop_after_attempt(3), wait=wait_fixed(2))
def _http_get(url: str) -> Response:
    return requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=30)


def _file_url_to_path(url: str) -> Path:
    parsed = urlparse(url)
    return Path(url2pathname(parsed.path))


def _read_source(url: str) -> str:
    if url.startswith("http://") or url.startswith("https://"):
        try:
            response = _http_get(url)
        except requests.RequestException as exc:
            raise FeedFetchError(f"Failed to fetch malware data from {url}: {exc}") from exc
        if response.status_code != 200:
            raise FeedFetchError(
                f"Failed to fetch malware data from {url}: "
                f"HTTP {response.status_code} {response.reason or ''}".rstrip()
            )
        return response.text

    path = _file_url_to_path(url) if url.startswith("file://") else Path(url)
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise FeedParseError(
            f"Failed to fetch malware data from {url}: "
            f"Failed to parse JSON from malware list: not valid UTF-8 ({exc.reason})"
        ) from exc
    except OSError as exc:
        raise FeedFetchError(f"Failed to fetch malware data from {url}: {exc}") from exc


def fetch_advisory_feed(url: str) -> Any:
    """Return the decoded advisory feed from an http(s) URL, file URL or path."""
    text = _read_source(url)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise FeedParseError(
            f"Failed to fetch malware data from {url}: "
            f"Failed to parse JSON from malware list: {exc.msg}"
        ) from exc
