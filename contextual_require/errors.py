"""Exceptions raised while resolving contextual imports."""


class ResolutionError(Exception):
    """Base class for every failure surfaced by a generated import function."""


class SegmentNotFoundError(ResolutionError):
    """Raised when an absolute path names a child that does not exist."""

    def __init__(self, segment: str, search_root: str, path: str) -> None:
        """Record the missing segment and the node it was looked up under."""
        self.segment = segment
        self.search_root = search_root
        self.path = path
        super().__init__(
            f"Could not find '{segment}' in '{search_root}' while resolving '{path}'"
        )


class NotAModuleError(ResolutionError):
    """Raised when a resolved or directly referenced node cannot be loaded."""

    def __init__(self, node_name: str) -> None:
        """Record the offending node."""
        self.node_name = node_name
        super().__init__(f"'{node_name}' is not a loadable module")


class AmbiguousNotFoundError(ResolutionError):
    """Raised when a bare name is missing from every configured root."""

    def __init__(self, path: str) -> None:
        """Record the request that could not be found."""
        self.path = path
        super().__init__(f"Module '{path}' not found in any valid ancestor")


class CircularDependencyError(ResolutionError):
    """Raised when a module is requested again while it is still loading."""

    def __init__(self, node_name: str) -> None:
        """Record the module that closed the cycle."""
        self.node_name = node_name
        super().__init__(f"Circular dependency detected while loading '{node_name}'")
