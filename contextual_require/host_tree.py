"""Protocols describing what the resolver needs from the host tree."""

from collections.abc import Callable, Sequence
from typing import Any, Protocol


class Subscription(Protocol):
    """Handle returned by an ancestry-change registration."""

    def dispose(self) -> None:
        """Stop receiving notifications. Safe to call more than once."""
        ...


class HostTree(Protocol):
    """Host-side view of the container tree.

    Nodes are opaque to the resolver: they only need to be hashable so they
    can key caches and sets. Every other question goes through this protocol.
    """

    def name(self, node: Any) -> str:
        """Return the node's own name."""
        ...

    def children(self, node: Any) -> Sequence[Any]:
        """Return the node's children in enumeration order."""
        ...

    def parent(self, node: Any) -> Any | None:
        """Return the node's parent, or None for a detached or top node."""
        ...

    def is_loadable_module(self, node: Any) -> bool:
        """Return True if the host can load the node."""
        ...

    def load(self, target: Any) -> Any:
        """Run the host's own load primitive on a node or passthrough string."""
        ...

    def full_name(self, node: Any) -> str:
        """Return a dotted name for diagnostics."""
        ...

    def on_ancestry_changed(
        self, node: Any, callback: Callable[[], None], *, once: bool
    ) -> Subscription:
        """Call `callback` whenever the node (or one of its ancestors) moves."""
        ...
