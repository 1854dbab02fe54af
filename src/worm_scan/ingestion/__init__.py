"""Utilities for obtaining and normalising the scan inputs."""

from .advisory_feed import (
    USER_AGENT,
    FeedError,
    FeedFetchError,
    FeedParseError,
    fetch_advisory_feed,
)
from .normalise import (
    CONTAINER_KEYS,
    DEFAULT_ECOSYSTEM,
    NAME_FIELDS,
    SHAPE_RULES,
    VERSION_LIST_FIELDS,
    ShapeRule,
    normalise_advisories,
)
from .npm_ls import (
    NPM_LS_COMMAND,
    DependencyTreeError,
    read_npm_tree,
)

__all__ = [
    # Advisory feed retrieval
    "USER_AGENT",
    "FeedError",
    "FeedFetchError",
    "FeedParseError",
    "fetch_advisory_feed",
    # Advisory normalisation
    "CONTAINER_KEYS",
    "DEFAULT_ECOSYSTEM",
    "NAME_FIELDS",
    "SHAPE_RULES",
    "VERSION_LIST_FIELDS",
    "ShapeRule",
    "normalise_advisories",
    # Dependency tree acquisition
    "NPM_LS_COMMAND",
    "DependencyTreeError",
    "read_npm_tree",
]
