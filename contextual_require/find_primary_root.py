"""Utility for locating the configured root a context lives under."""

from collections.abc import Iterable
from typing import Any

from contextual_require.host_tree import HostTree


def find_primary_root(host: HostTree, context: Any, roots: Iterable[Any]) -> Any | None:
    """Walk up from `context` (inclusive) to the nearest configured root."""
    root_set = set(roots)
    node = context
    while node is not None:
        if node in root_set:
            return node
        node = host.parent(node)
    return None
