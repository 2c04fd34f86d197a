"""Logic for substituting the first segment of an absolute path with its alias."""

from collections.abc import Mapping


def resolve_alias(
    path: str, aliases: Mapping[str, str] | None, marker: str = "@"
) -> str:
    """Rewrite an alias-prefixed path into its canonical form.

    Only the first segment is looked up and the substitution happens once:
    alias values are never themselves re-resolved. Paths without the marker,
    or whose first segment is not an alias, are returned unchanged.
    """
    if not aliases or not path.startswith(marker):
        return path

    first, sep, rest = path[len(marker) :].partition("/")
    if first not in aliases:
        return path

    replacement = aliases[first]
    if replacement.startswith(marker):
        replacement = replacement[len(marker) :]
    replacement = replacement.rstrip("/")
    return f"{marker}{replacement}{sep}{rest}"
