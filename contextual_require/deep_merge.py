"""Logic for deep merging configuration dictionaries."""

from typing import Any

ADDITIVE_KEYS = frozenset({"ignore_patterns"})
REPLACED_KEYS = frozenset({"ancestors"})


def deep_merge(base: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries.

    - Mappings are merged recursively, so user aliases extend the defaults.
    - 'ancestors' is replaced wholesale: the roots are an exact set.
    - Lists in 'update' replace lists in 'base'.
    - 'ignore_patterns' is additive.
    """
    result = base.copy()
    for key, value in update.items():
        current = result.get(key)
        if (
            key not in REPLACED_KEYS
            and isinstance(current, dict)
            and isinstance(value, dict)
        ):
            result[key] = deep_merge(current, value)
        elif (
            key in ADDITIVE_KEYS
            and isinstance(current, list)
            and isinstance(value, list)
        ):
            # Additive merge, deduplicated and sorted
            result[key] = sorted({*current, *value})
        else:
            result[key] = value
    return result
