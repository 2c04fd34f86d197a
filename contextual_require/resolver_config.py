"""Immutable configuration snapshot handed to an import generator."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from contextual_require.load_config import DEFAULT_MAX_SEARCH_DEPTH


@dataclass(frozen=True)
class ResolverConfig:
    """Settings shared by every import function of one generator."""

    ancestors: Mapping[str, Any] = field(default_factory=dict)  # root name -> node
    aliases: Mapping[str, str] = field(default_factory=dict)
    ignore_predicate: Callable[[Any], bool] | None = None
    max_search_depth: int = DEFAULT_MAX_SEARCH_DEPTH
    case_sensitive: bool = True
    circular_dependency_detection: bool = True
    path_marker: str = "@"
    debug_logging: bool = False
    track_performance: bool = False
    instrumentation: bool = False

    def __post_init__(self) -> None:
        """Freeze the mappings so later edits by the caller cannot leak in."""
        object.__setattr__(self, "ancestors", MappingProxyType(dict(self.ancestors)))
        object.__setattr__(self, "aliases", MappingProxyType(dict(self.aliases)))
        if self.max_search_depth < 0:
            msg = f"max_search_depth must be >= 0, got {self.max_search_depth}"
            raise ValueError(msg)
        if not self.path_marker:
            msg = "path_marker must not be empty"
            raise ValueError(msg)
