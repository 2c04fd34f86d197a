"""Search algorithms over the host container tree.

Two strategies are provided. `bfs_find_path` matches path segments breadth
first from an anchor and tolerates grouping folders that the path does not
name. `search_for_module` looks for a bare name below the caller, then below
each of its ancestors in turn until a configured root has been searched.
"""

import logging
from collections import deque
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from contextual_require.errors import SegmentNotFoundError
from contextual_require.host_tree import HostTree
from contextual_require.ignore_predicate import is_ignored
from contextual_require.load_config import DEFAULT_MAX_SEARCH_DEPTH
from contextual_require.normalize_name import normalize_name

logger = logging.getLogger(__name__)


class TreeSearch:
    """Stateless search helpers bound to one host and one set of options."""

    def __init__(
        self,
        host: HostTree,
        ignore_predicate: Callable[[Any], bool] | None = None,
        max_search_depth: int = DEFAULT_MAX_SEARCH_DEPTH,
        *,
        case_sensitive: bool = True,
    ) -> None:
        """Initialize the search with the host tree and traversal options."""
        self.host = host
        self.ignore_predicate = ignore_predicate
        self.max_search_depth = max_search_depth
        self.case_sensitive = case_sensitive

    def normalize(self, name: str) -> str:
        """Normalize a name for comparison."""
        return normalize_name(name, case_sensitive=self.case_sensitive)

    def names_match(self, node: Any, name: str) -> bool:
        """Check a node's name against a requested name."""
        return self.normalize(self.host.name(node)) == self.normalize(name)

    def is_ignored(self, node: Any) -> bool:
        """Check if traversal should skip `node`."""
        return is_ignored(self.host, node, self.ignore_predicate)

    # -----------------------------
    # Anchored breadth-first match
    # -----------------------------

    def bfs_find_path(self, root: Any, segments: Sequence[str]) -> Any | None:
        """Find the module named by `segments` anywhere below `root`.

        The queue holds (node, segment index, depth). A child matching the
        current segment advances the index; any other child is queued with
        the same index, so unnamed grouping folders can sit between the
        named segments. The first loadable match in breadth-first child
        order wins.
        """
        if not segments:
            return None

        last = len(segments) - 1
        queue: deque[tuple[Any, int, int]] = deque([(root, 0, 0)])
        visited = {root}

        while queue:
            node, index, depth = queue.popleft()
            if depth >= self.max_search_depth:
                # Breadth first: everything still queued is at least this deep.
                logger.debug(
                    "Depth cap %d reached searching for %s",
                    self.max_search_depth,
                    "/".join(segments),
                )
                return None

            for child in self.host.children(node):
                if child in visited or self.is_ignored(child):
                    continue
                visited.add(child)

                if self.names_match(child, segments[index]):
                    if index == last:
                        if self.host.is_loadable_module(child):
                            return child
                        queue.append((child, index, depth + 1))
                    else:
                        queue.append((child, index + 1, depth + 1))
                else:
                    queue.append((child, index, depth + 1))

        return None

    # -----------------------------
    # Downward search with upward walk
    # -----------------------------

    def search_down(
        self, node: Any, target_name: str, searched: set[Any], depth: int = 0
    ) -> Any | None:
        """Depth-first search of `node`'s subtree for a module named `target_name`.

        Direct children are checked before descending, so a module next to the
        caller beats a deeper one. `searched` is the memo for one upward step.
        Subtrees are visited in child order using an explicit stack.
        """
        stack: list[tuple[Any, int]] = [(node, depth)]
        while stack:
            current, current_depth = stack.pop()
            if current in searched or current_depth >= self.max_search_depth:
                continue
            searched.add(current)

            children = [
                child
                for child in self.host.children(current)
                if not self.is_ignored(child)
            ]
            for child in children:
                matches = self.names_match(child, target_name)
                if matches and self.host.is_loadable_module(child):
                    return child

            # Reversed so the first child is popped first.
            stack.extend((child, current_depth + 1) for child in reversed(children))
        return None

    def search_for_module(
        self, origin: Any, segments: Sequence[str], ancestors: Iterable[Any]
    ) -> Any | None:
        """Search below `origin`, then below each parent, up to a root.

        The walk stops after the first configured ancestor has been searched.
        An origin that is not under any configured ancestor finds nothing.
        """
        if not segments:
            return None

        boundary = set(ancestors)
        if not self._has_boundary_ancestor(origin, boundary):
            logger.debug(
                "%s is not under any configured ancestor", self.host.full_name(origin)
            )
            return None

        node = origin
        while node is not None:
            if len(segments) == 1:
                found = self.search_down(node, segments[0], set())
            else:
                found = self.bfs_find_path(node, segments)
            if found is not None:
                return found
            if node in boundary:
                return None
            node = self.host.parent(node)
        return None

    def _has_boundary_ancestor(self, origin: Any, boundary: set[Any]) -> bool:
        node = origin
        while node is not None:
            if node in boundary:
                return True
            node = self.host.parent(node)
        return False

    # -----------------------------
    # Multi-root search
    # -----------------------------

    def search_roots(
        self,
        candidate_roots: Iterable[Any],
        segments: Sequence[str],
        searched_roots: set[Any] | None = None,
    ) -> Any | None:
        """Return the first hit of `bfs_find_path` across the roots, in order."""
        searched_roots = set() if searched_roots is None else searched_roots
        for root in candidate_roots:
            if root in searched_roots:
                continue
            searched_roots.add(root)
            found = self.bfs_find_path(root, segments)
            if found is not None:
                return found
        return None

    # -----------------------------
    # Absolute traversal
    # -----------------------------

    def find_child(self, node: Any, name: str) -> Any | None:
        """Strict child lookup: exact name, then a lower-cased scan if allowed."""
        children = self.host.children(node)
        for child in children:
            if self.host.name(child) == name:
                return child
        if not self.case_sensitive:
            lowered = name.lower()
            for child in children:
                if self.host.name(child).lower() == lowered:
                    return child
        return None

    def traverse_absolute(self, root: Any, segments: Sequence[str], path: str) -> Any:
        """Walk `segments` child by child from `root`."""
        node = root
        for segment in segments:
            child = self.find_child(node, segment)
            if child is None:
                raise SegmentNotFoundError(segment, self.host.full_name(node), path)
            node = child
        return node
