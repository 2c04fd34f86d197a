"""Logic for detecting modules that require themselves while loading."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from contextual_require.errors import CircularDependencyError
from contextual_require.host_tree import HostTree


class CircularDependencyGuard:
    """Tracks the modules currently being loaded."""

    def __init__(self, host: HostTree) -> None:
        """Initialize an empty in-flight set."""
        self.host = host
        self._in_flight: set[Any] = set()

    @property
    def in_flight(self) -> frozenset[Any]:
        """Return a snapshot of the modules being loaded."""
        return frozenset(self._in_flight)

    @contextmanager
    def hold(self, node: Any) -> Iterator[None]:
        """Mark `node` as loading for the duration of the block.

        The mark is removed on every exit path, including a failing load, so
        one broken module cannot poison later requests for it.
        """
        if node in self._in_flight:
            raise CircularDependencyError(self.host.full_name(node))
        self._in_flight.add(node)
        try:
            yield
        finally:
            self._in_flight.discard(node)
