"""Utility for comparing node names under the configured case sensitivity."""


def normalize_name(name: str, *, case_sensitive: bool) -> str:
    """Return the form of `name` used for comparisons."""
    return name if case_sensitive else name.lower()
