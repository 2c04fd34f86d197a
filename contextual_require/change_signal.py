"""Minimal observer primitive used for ancestry-change notifications."""

from collections.abc import Callable


class Connection:
    """A single callback registered on a Signal."""

    def __init__(
        self, signal: "Signal", callback: Callable[[], None], *, once: bool
    ) -> None:
        """Bind the callback to its signal."""
        self.signal = signal
        self.callback = callback
        self.once = once
        self.connected = True

    def dispose(self) -> None:
        """Disconnect from the signal."""
        if self.connected:
            self.connected = False
            self.signal.disconnect(self)


class Signal:
    """Ordered list of callbacks fired synchronously."""

    def __init__(self) -> None:
        """Create a signal with no listeners."""
        self.connections: list[Connection] = []

    def connect(
        self, callback: Callable[[], None], *, once: bool = False
    ) -> Connection:
        """Register a callback and return its connection handle."""
        connection = Connection(self, callback, once=once)
        self.connections.append(connection)
        return connection

    def disconnect(self, connection: Connection) -> None:
        """Remove a connection if it is still registered."""
        if connection in self.connections:
            self.connections.remove(connection)

    def fire(self) -> None:
        """Call every connected callback in registration order."""
        # Callbacks may connect or dispose while we iterate.
        for connection in list(self.connections):
            if not connection.connected:
                continue
            if connection.once:
                connection.dispose()
            connection.callback()

    def __len__(self) -> int:
        """Return the number of live connections."""
        return len(self.connections)
