"""Two-tier cache of resolved module nodes with tree-mutation invalidation."""

import logging
from typing import Any

from contextual_require.host_tree import HostTree, Subscription

logger = logging.getLogger(__name__)

CONTEXT_TIER = "context"
GLOBAL_TIER = "global"


class ResolutionCache:
    """Caches the node a request string resolved to.

    The per-context tier holds answers that depended on where the caller sits
    (ambiguous names); it is cleared when the caller moves. The global tier
    holds absolute paths, which mean the same thing from every caller. Either
    way an entry is evicted as soon as its target moves.

    Only nodes are cached; loading still goes through the host so the host's
    own module memoisation stays authoritative.
    """

    def __init__(self, host: HostTree) -> None:
        """Initialize empty tiers bound to the host's change notifications."""
        self.host = host
        self.global_entries: dict[str, Any] = {}
        self.context_entries: dict[Any, dict[str, Any]] = {}

        self._global_subscriptions: dict[str, Subscription] = {}
        self._entry_subscriptions: dict[Any, dict[str, Subscription]] = {}
        self._context_watchers: dict[Any, Subscription] = {}

    def context_cache(self, context: Any) -> dict[str, Any]:
        """Return the context's map, creating it and its watcher on first use."""
        entries = self.context_entries.get(context)
        if entries is None:
            entries = self.context_entries[context] = {}
            self._entry_subscriptions[context] = {}
            self._context_watchers[context] = self.host.on_ancestry_changed(
                context, lambda: self.clear_context(context), once=False
            )
        return entries

    def lookup(self, context: Any, path: str) -> tuple[Any, str] | None:
        """Probe the context tier, then the global tier."""
        entries = self.context_entries.get(context)
        if entries is not None and path in entries:
            return entries[path], CONTEXT_TIER
        if path in self.global_entries:
            return self.global_entries[path], GLOBAL_TIER
        return None

    def store_global(self, path: str, node: Any) -> None:
        """Cache an absolute path for every context."""
        self._dispose(self._global_subscriptions.pop(path, None))
        self.global_entries[path] = node
        self._global_subscriptions[path] = self.host.on_ancestry_changed(
            node, lambda: self.evict_global(path, node), once=True
        )

    def store_context(self, context: Any, path: str, node: Any) -> None:
        """Cache an ambiguous path for one context."""
        entries = self.context_cache(context)
        subscriptions = self._entry_subscriptions[context]
        self._dispose(subscriptions.pop(path, None))
        entries[path] = node
        subscriptions[path] = self.host.on_ancestry_changed(
            node, lambda: self.evict_context(context, path, node), once=True
        )

    def evict_global(self, path: str, node: Any) -> None:
        """Drop a global entry if it still points at `node`."""
        if self.global_entries.get(path) is node:
            del self.global_entries[path]
            self._dispose(self._global_subscriptions.pop(path, None))
            logger.debug("Evicted global cache entry %s", path)

    def evict_context(self, context: Any, path: str, node: Any) -> None:
        """Drop a context entry if it still points at `node`."""
        entries = self.context_entries.get(context)
        if entries is not None and entries.get(path) is node:
            del entries[path]
            self._dispose(self._entry_subscriptions[context].pop(path, None))
            logger.debug("Evicted context cache entry %s", path)

    def clear_context(self, context: Any) -> None:
        """Drop every entry of a context whose own position changed.

        A context removed from the tree is forgotten entirely, watcher
        included; importing from it again starts a fresh map.
        """
        entries = self.context_entries.get(context)
        if entries:
            entries.clear()
            subscriptions = self._entry_subscriptions[context]
            for subscription in subscriptions.values():
                subscription.dispose()
            subscriptions.clear()
            logger.debug("Cleared context cache for %s", self.host.full_name(context))

        if context in self.context_entries and self.host.parent(context) is None:
            self.release_context(context)

    def release_context(self, context: Any) -> None:
        """Forget a context's map and stop watching it."""
        self.context_entries.pop(context, None)
        for subscription in self._entry_subscriptions.pop(context, {}).values():
            subscription.dispose()
        self._dispose(self._context_watchers.pop(context, None))
        logger.debug("Released context %s", self.host.full_name(context))

    def dispose(self) -> None:
        """Release every host subscription and empty both tiers."""
        for subscription in self._global_subscriptions.values():
            subscription.dispose()
        for subscriptions in self._entry_subscriptions.values():
            for subscription in subscriptions.values():
                subscription.dispose()
        for watcher in self._context_watchers.values():
            watcher.dispose()
        self._global_subscriptions.clear()
        self._entry_subscriptions.clear()
        self._context_watchers.clear()
        self.global_entries.clear()
        self.context_entries.clear()

    @staticmethod
    def _dispose(subscription: Subscription | None) -> None:
        if subscription is not None:
            subscription.dispose()
