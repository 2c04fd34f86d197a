"""Reference implementation of the HostTree protocol over Instance trees."""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from contextual_require.change_signal import Connection
from contextual_require.instance import Instance

logger = logging.getLogger(__name__)


class InstanceTreeHost:
    """Host tree backed by in-memory Instance nodes.

    Loading a module runs its source once and memoises the value, the way a
    script runtime caches `require` results. String requests that are not
    handled by the resolver are looked up in `packages`.
    """

    def __init__(self, packages: dict[str, Any] | None = None) -> None:
        """Initialize the host with an optional registry of named packages."""
        self.packages = dict(packages or {})
        self.loaded: dict[Instance, Any] = {}
        self.load_count = 0

    def name(self, node: Instance) -> str:
        """Return the node's name."""
        return node.name

    def children(self, node: Instance) -> Sequence[Instance]:
        """Return a snapshot of the node's children."""
        return tuple(node.children)

    def parent(self, node: Instance) -> Instance | None:
        """Return the node's parent."""
        return node.parent

    def is_loadable_module(self, node: Any) -> bool:
        """Check if the node is a module instance."""
        return isinstance(node, Instance) and node.is_module

    def full_name(self, node: Any) -> str:
        """Return the node's dotted name, or its repr for foreign objects."""
        if isinstance(node, Instance):
            return node.full_name()
        return repr(node)

    def on_ancestry_changed(
        self, node: Instance, callback: Callable[[], None], *, once: bool
    ) -> Connection:
        """Subscribe to the node's ancestry-changed signal."""
        return node.ancestry_changed.connect(callback, once=once)

    def load(self, target: Instance | str) -> Any:
        """Load a module node, or a named package for passthrough strings."""
        if isinstance(target, str):
            if target not in self.packages:
                msg = f"Unknown module '{target}'"
                raise LookupError(msg)
            return self.packages[target]

        if not self.is_loadable_module(target):
            msg = f"'{target.full_name()}' is not a module"
            raise TypeError(msg)

        if target in self.loaded:
            return self.loaded[target]

        logger.debug("Loading module %s", target.full_name())
        self.load_count += 1
        source = target.source
        # Failed loads are not memoised so a fixed module can be retried.
        value = source(target) if callable(source) else source
        self.loaded[target] = value
        return value
