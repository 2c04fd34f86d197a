"""Generation of context-bound import functions.

`create_import_generator(host, config)` returns a function that, given the
node of a calling module, yields that module's import function:

    generate = create_import_generator(host, config)
    import_module = generate(script_node)
    types = import_module("@Shared/Types")   # absolute, anchored at Shared
    config = import_module("@Config")        # ambiguous, nearest match wins
    json = import_module("json")             # passthrough to the host

Every generator owns its caches, in-flight set and statistics; import
functions from different generators share nothing.
"""

import logging
import time
from collections.abc import Callable
from typing import Any

from contextual_require.circular_guard import CircularDependencyGuard
from contextual_require.errors import (
    AmbiguousNotFoundError,
    NotAModuleError,
    ResolutionError,
)
from contextual_require.find_primary_root import find_primary_root
from contextual_require.host_tree import HostTree
from contextual_require.import_request import RequestKind, classify_request
from contextual_require.resolution_cache import ResolutionCache
from contextual_require.resolution_stats import ResolutionStats
from contextual_require.resolve_alias import resolve_alias
from contextual_require.resolver_config import ResolverConfig
from contextual_require.split_path import split_path
from contextual_require.tree_search import TreeSearch

logger = logging.getLogger(__name__)

ImportFunction = Callable[[Any], Any]


class ImportGenerator:
    """Produces import functions bound to calling modules."""

    def __init__(self, host: HostTree, config: ResolverConfig) -> None:
        """Initialize the shared cache, guard, search engine and stats."""
        self.host = host
        self.config = config
        self.cache = ResolutionCache(host)
        self.guard = CircularDependencyGuard(host)
        self.search = TreeSearch(
            host,
            config.ignore_predicate,
            config.max_search_depth,
            case_sensitive=config.case_sensitive,
        )
        self.stats = ResolutionStats(
            instrumentation=config.instrumentation,
            track_performance=config.track_performance,
        )
        self.roots = list(config.ancestors.values())

        # First configured spelling wins if two names collide case-insensitively.
        self._roots_by_name: dict[str, Any] = {}
        for name, node in config.ancestors.items():
            self._roots_by_name.setdefault(self.search.normalize(name), node)

    def generate(self, context: Any) -> ImportFunction:
        """Return the import function for the module at `context`."""
        self.cache.context_cache(context)
        if find_primary_root(self.host, context, self.roots) is None:
            logger.warning(
                "%s is not under any configured ancestor; "
                "absolute and ambiguous imports from it are degraded",
                self.host.full_name(context),
            )

        def import_module(target: Any) -> Any:
            return self.resolve(context, target)

        return import_module

    def resolve(self, context: Any, target: Any) -> Any:
        """Resolve and load `target` on behalf of `context`."""
        return self.resolve_with_node(context, target)[1]

    def resolve_with_node(self, context: Any, target: Any) -> tuple[Any | None, Any]:
        """Resolve and load `target`, also returning the node it came from.

        The node is None for passthrough requests, which the host resolves.
        """
        request = classify_request(target, self.config.path_marker)
        start = time.perf_counter()
        self.stats.count("requests")
        try:
            if request.kind is RequestKind.PASSTHROUGH:
                self.stats.count("passthrough")
                return None, self.host.load(request.target)

            if request.kind is RequestKind.DIRECT:
                self.stats.count("direct")
                node = request.target
                if not self.host.is_loadable_module(node):
                    raise NotAModuleError(self.host.full_name(node))
            else:
                node = self.locate(context, request.target)

            return node, self._load(node)
        except ResolutionError:
            self.stats.count("failures")
            raise
        finally:
            self.stats.record_duration(str(target), time.perf_counter() - start)

    def locate(self, context: Any, path: str) -> Any:
        """Find the node a marker-prefixed path refers to from `context`."""
        marker = self.config.path_marker
        resolved = resolve_alias(path, self.config.aliases, marker)
        self._trace("Resolving %s as %s", path, resolved)

        cached = self.cache.lookup(context, resolved)
        if cached is not None:
            node, tier = cached
            self.stats.count(f"{tier}_cache_hits")
            self._trace("%s cache hit for %s", tier, resolved)
            return node

        segments = split_path(resolved, marker)
        if not segments:
            raise AmbiguousNotFoundError(resolved)

        root = self._roots_by_name.get(self.search.normalize(segments[0]))
        if root is not None:
            node = self.search.traverse_absolute(root, segments[1:], resolved)
            if not self.host.is_loadable_module(node):
                raise NotAModuleError(self.host.full_name(node))
            self.stats.count("absolute_resolutions")
            self.cache.store_global(resolved, node)
            return node

        node = self._search_ambiguous(context, segments, resolved)
        self.cache.store_context(context, resolved, node)
        return node

    def _search_ambiguous(self, context: Any, segments: list[str], path: str) -> Any:
        node = self.search.search_for_module(context, segments, self.roots)
        if node is not None:
            self.stats.count("ambiguous_resolutions")
            return node

        # The primary root was already covered by the upward walk.
        primary_root = find_primary_root(self.host, context, self.roots)
        searched_roots = set() if primary_root is None else {primary_root}
        node = self.search.search_roots(self.roots, segments, searched_roots)
        if node is None:
            raise AmbiguousNotFoundError(path)

        self.stats.count("fallback_resolutions")
        self._trace("%s found outside the caller's root", path)
        return node

    def _load(self, node: Any) -> Any:
        self._trace("Loading %s", self.host.full_name(node))
        if not self.config.circular_dependency_detection:
            return self.host.load(node)
        with self.guard.hold(node):
            return self.host.load(node)

    def _trace(self, message: str, *args: Any) -> None:
        if self.config.debug_logging:
            logger.debug(message, *args)

    def dispose(self) -> None:
        """Release the host subscriptions held by the caches."""
        self.cache.dispose()


def create_import_generator(
    host: HostTree, config: ResolverConfig
) -> Callable[[Any], ImportFunction]:
    """Create an isolated generator and return its `generate` method."""
    return ImportGenerator(host, config).generate
