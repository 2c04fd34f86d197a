"""Utility for splitting an absolute request into path segments."""


def split_path(path: str, marker: str = "@") -> list[str]:
    """Strip the marker and return the non-empty `/` separated segments."""
    if path.startswith(marker):
        path = path[len(marker) :]
    return [segment for segment in path.split("/") if segment]
