"""
Reading Picasa ``.picasa.ini`` sidecar files.
"""

import os
from typing import Iterable, Iterator, List, Optional

SIDECAR_FILENAME = ".picasa.ini"
STAR_LINE = "star=yes"


def find_sidecar(directory: str) -> Optional[str]:
    """
    Look for the sidecar file directly inside a directory.

    Args:
        directory: Directory to check (not searched recursively)

    Returns:
        Path to the sidecar if present, None otherwise
    """
    path = os.path.join(directory, SIDECAR_FILENAME)
    if os.path.isfile(path):
        return path
    return None


def iter_starred_sections(lines: Iterable[str]) -> Iterator[str]:
    """
    Yield the section name for every ``star=yes`` line found inside a section.

    Only a whole trimmed line equal to ``star=yes`` counts; other keys are
    ignored. Lines before the first header belong to no section.

    Args:
        lines: Lines of a sidecar file

    Yields:
        Section names (image file names relative to the sidecar's directory)
    """
    current_section = ""

    for line in lines:
        trimmed = line.strip()

        if not trimmed or trimmed.startswith(';'):
            continue

        if trimmed.startswith('[') and trimmed.endswith(']'):
            current_section = trimmed[1:-1]
            continue

        if current_section and trimmed.lower() == STAR_LINE:
            yield current_section


def read_starred_sections(sidecar_path: str) -> List[str]:
    """
    Read a sidecar file and return its starred sections in file order.

    Args:
        sidecar_path: Path to the ``.picasa.ini`` file

    Returns:
        List of starred section names, possibly with repeats

    Raises:
        OSError: If the file cannot be read
    """
    # utf-8-sig drops a leading BOM
    with open(sidecar_path, 'r', encoding='utf-8-sig', errors='replace') as f:
        return list(iter_starred_sections(f))
