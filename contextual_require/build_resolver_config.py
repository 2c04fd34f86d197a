"""Logic for turning a raw configuration dictionary into a ResolverConfig."""

import logging
from typing import Any

from contextual_require.host_tree import HostTree
from contextual_require.ignore_predicate import build_ignore_predicate
from contextual_require.load_config import DEFAULT_MAX_SEARCH_DEPTH
from contextual_require.resolver_config import ResolverConfig

logger = logging.getLogger(__name__)


def locate_node(host: HostTree, root: Any, path: str) -> Any | None:
    """Follow a slash separated chain of child names from `root`."""
    node = root
    for part in (p for p in path.split("/") if p):
        node = next((c for c in host.children(node) if host.name(c) == part), None)
        if node is None:
            return None
    return node


def build_resolver_config(
    raw: dict[str, Any], host: HostTree, tree_root: Any
) -> ResolverConfig:
    """Resolve the configured ancestor locations and freeze the settings.

    Ancestors whose location does not exist in the tree are skipped with a
    warning rather than failing, so one config can serve several places.
    """
    ancestors: dict[str, Any] = {}
    for root_name, location in (raw.get("ancestors") or {}).items():
        node = locate_node(host, tree_root, str(location or root_name))
        if node is None:
            logger.warning(
                "Ancestor '%s' not found at '%s', skipping", root_name, location
            )
            continue
        ancestors[str(root_name)] = node

    aliases = {str(k): str(v) for k, v in (raw.get("aliases") or {}).items()}

    return ResolverConfig(
        ancestors=ancestors,
        aliases=aliases,
        ignore_predicate=build_ignore_predicate(
            host, raw.get("ignore_patterns") or []
        ),
        max_search_depth=int(raw.get("max_search_depth", DEFAULT_MAX_SEARCH_DEPTH)),
        case_sensitive=bool(raw.get("case_sensitive", True)),
        circular_dependency_detection=bool(
            raw.get("circular_dependency_detection", True)
        ),
        path_marker=str(raw.get("path_marker", "@")),
        debug_logging=bool(raw.get("debug_logging", False)),
        track_performance=bool(raw.get("track_performance", False)),
        instrumentation=bool(raw.get("instrumentation", False)),
    )
