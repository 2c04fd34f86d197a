"""Logic for loading and merging resolver configuration files."""

import logging
from pathlib import Path
from typing import Any

import yaml

from contextual_require.deep_merge import deep_merge

logger = logging.getLogger(__name__)

DEFAULT_MAX_SEARCH_DEPTH = 50

DEFAULT_CONFIG: dict[str, Any] = {
    # root name -> slash separated location of the root inside the tree
    "ancestors": {
        "Server": "Server",
        "Client": "Client",
        "Shared": "Shared",
    },
    "aliases": {},
    "ignore_patterns": [],
    "max_search_depth": DEFAULT_MAX_SEARCH_DEPTH,
    "case_sensitive": True,
    "circular_dependency_detection": True,
    "path_marker": "@",
    "debug_logging": False,
    "track_performance": False,
    "instrumentation": False,
}


def load_config(path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file and merge it with defaults."""
    config = DEFAULT_CONFIG.copy()
    if path:
        p = Path(path)
        if not p.exists():
            logger.warning("Config file %s not found, using defaults", p)
            return config
        user_config = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        if not isinstance(user_config, dict):
            msg = f"Config file {p} must contain a mapping at the top level"
            raise ValueError(msg)
        config = deep_merge(config, user_config)
    return config
