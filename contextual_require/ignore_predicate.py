"""Logic for deciding which nodes tree searches skip."""

import logging
import re
from collections.abc import Callable, Iterable
from typing import Any

from contextual_require.host_tree import HostTree

logger = logging.getLogger(__name__)

# Package indexes hold vendored copies of dependencies and are never searched.
INDEX_FOLDER_NAME = "_Index"


def compile_name_matchers(patterns: Iterable[str]) -> list[Callable[[str], bool]]:
    """Compile regex patterns into name matchers.

    An invalid pattern falls back to a case-insensitive exact name comparison.
    """
    matchers: list[Callable[[str], bool]] = []
    for pattern in patterns:
        try:
            regex = re.compile(pattern)
        except re.error:
            logger.warning(
                "Invalid ignore pattern %r, falling back to exact match", pattern
            )
            lowered = pattern.lower()
            matchers.append(lambda name, lowered=lowered: name.lower() == lowered)
        else:
            matchers.append(lambda name, regex=regex: regex.search(name) is not None)
    return matchers


def build_ignore_predicate(
    host: HostTree, patterns: Iterable[str]
) -> Callable[[Any], bool] | None:
    """Build a node predicate accepting nodes whose name matches any pattern."""
    matchers = compile_name_matchers(patterns)
    if not matchers:
        return None

    def predicate(node: Any) -> bool:
        name = host.name(node)
        return any(match(name) for match in matchers)

    return predicate


def is_ignored(
    host: HostTree, node: Any, predicate: Callable[[Any], bool] | None
) -> bool:
    """Check the built-in `_Index` exclusion, then the user predicate."""
    if host.name(node) == INDEX_FOLDER_NAME:
        return True
    return predicate is not None and predicate(node)
