"""In-memory container node used by the reference host tree."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from contextual_require.change_signal import Signal


@dataclass(eq=False)
class Instance:
    """A named node in a container tree.

    Identity is the node itself, so instances can key dictionaries and sets
    even when two of them share a name.
    """

    name: str
    is_module: bool = False
    source: Any = None  # loaded value, or a callable producing it
    parent: "Instance | None" = field(default=None, repr=False)
    children: list["Instance"] = field(default_factory=list, repr=False)
    ancestry_changed: Signal = field(default_factory=Signal, repr=False)

    def add_child(self, child: "Instance") -> "Instance":
        """Parent `child` under this node and return it."""
        child.set_parent(self)
        return child

    def set_parent(self, new_parent: "Instance | None") -> None:
        """Move this node, notifying it and every descendant."""
        if new_parent is self.parent:
            return
        if new_parent is self or (
            new_parent is not None and self.is_ancestor_of(new_parent)
        ):
            msg = f"Cannot parent '{self.full_name()}' under its own descendant"
            raise ValueError(msg)

        if self.parent is not None:
            self.parent.children.remove(self)
        self.parent = new_parent
        if new_parent is not None:
            new_parent.children.append(self)

        for node in [self, *self.descendants()]:
            node.ancestry_changed.fire()

    def is_ancestor_of(self, other: "Instance") -> bool:
        """Check if this node appears in `other`'s parent chain."""
        node = other.parent
        while node is not None:
            if node is self:
                return True
            node = node.parent
        return False

    def descendants(self) -> Iterator["Instance"]:
        """Yield every node below this one, depth first."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find_first_child(self, name: str) -> "Instance | None":
        """Return the first direct child with the given name."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def find_by_path(self, path: str) -> "Instance | None":
        """Follow a slash separated chain of child names from this node."""
        node: Instance | None = self
        for part in (p for p in path.split("/") if p):
            if node is None:
                return None
            node = node.find_first_child(part)
        return node

    def full_name(self) -> str:
        """Return the dotted path from the top of the tree."""
        parts = []
        node: Instance | None = self
        while node is not None:
            parts.append(node.name)
            node = node.parent
        return ".".join(reversed(parts))
