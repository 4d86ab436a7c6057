"""
Utility functions for mvfinder.

Usage:
    from mvfinder.utils import ensure_directory, format_count
"""

from pathlib import Path


def ensure_directory(path: Path) -> Path:
    """
    Ensure a directory exists, creating it and its parents if necessary.

    Returns:
        The same path (for chaining).

    Raises:
        OSError: If the directory cannot be created.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def format_count(count: int, singular: str, plural: str | None = None) -> str:
    """
    Format a count with the right noun form.

    Examples:
        format_count(1, "artist")  # "1 artist"
        format_count(3, "video")   # "3 videos"
    """
    noun = singular if count == 1 else (plural or f"{singular}s")
    return f"{count} {noun}"
