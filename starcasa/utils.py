"""
Utility functions for StarCasa.
"""

from typing import Optional, Tuple


def pluralise(number: int, singular: str, plural: str) -> str:
    """
    Pluralise a word based on a count.

    Args:
        number: The count
        singular: Word to use when the count is one
        plural: Word to use otherwise

    Returns:
        String such as ``"1 image"`` or ``"1,234 images"``
    """
    if number == 1:
        return f"{number} {singular}"
    return f"{number:,} {plural}"


def parse_semantic_version(version_string: Optional[str]) -> Optional[Tuple[int, int, int]]:
    """
    Parse a ``major.minor.patch`` version string.

    Args:
        version_string: Version text, optionally prefixed with ``v``

    Returns:
        Tuple of (major, minor, patch), or None if the text is not a version
    """
    if not version_string or not version_string.strip():
        return None

    parts = version_string.strip().lstrip('vV').split('.')
    if len(parts) != 3:
        return None

    try:
        major, minor, patch = (int(p) for p in parts)
    except ValueError:
        return None

    if major < 0 or minor < 0 or patch < 0:
        return None
    return major, minor, patch


def format_version(version_string: str) -> str:
    """Normalise a version for display, e.g. ``"1.2"`` becomes ``"1.2.0"``."""
    parts = (version_string or "0").split('.')[:3]
    while len(parts) < 3:
        parts.append("0")
    return '.'.join(parts)
