"""Classification of the argument passed to a generated import function."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class RequestKind(Enum):
    """How an import request is dispatched."""

    PASSTHROUGH = "passthrough"  # plain string, handed to the host untouched
    DIRECT = "direct"  # node reference
    PATH = "path"  # marker-prefixed string, absolute or ambiguous


@dataclass(frozen=True)
class ImportRequest:
    """An import argument tagged with its kind."""

    kind: RequestKind
    target: Any


def classify_request(target: Any, marker: str = "@") -> ImportRequest:
    """Tag `target` once so the resolver never re-inspects its type."""
    if isinstance(target, str):
        if target.startswith(marker):
            return ImportRequest(RequestKind.PATH, target)
        return ImportRequest(RequestKind.PASSTHROUGH, target)
    return ImportRequest(RequestKind.DIRECT, target)
