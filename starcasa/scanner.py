"""
Directory scanning and starred image collection.
"""

import os
from dataclasses import dataclass
from typing import Iterator

from requests.structures import CaseInsensitiveDict

from .config import AppConfig
from .image_processor import ImageProcessor
from .logging_setup import get_logger
from .sidecar import find_sidecar, read_starred_sections

logger = get_logger(__name__)

EXCLUDED_DIRECTORY = ".picasaoriginals"


@dataclass
class ScanStats:
    """Class to track scanning statistics."""
    directories_visited: int = 0
    sidecars_read: int = 0
    starred_found: int = 0
    skipped_missing: int = 0
    skipped_unreadable: int = 0


def _log_walk_error(error: OSError) -> None:
    logger.warning(f"Skipping unreadable directory '{error.filename}': {error.strerror or error}")


def walk_directories(root: str) -> Iterator[str]:
    """
    Recursively yield a root directory and all of its subdirectories.

    Directories named ``.picasaoriginals`` (any case) are pruned together with
    everything below them. Directories that cannot be listed are logged and
    skipped.

    Args:
        root: Directory to start from

    Yields:
        Directory paths, the root first
    """
    for dirpath, dirnames, _ in os.walk(root, onerror=_log_walk_error):
        dirnames[:] = [d for d in dirnames if d.lower() != EXCLUDED_DIRECTORY]
        yield dirpath


class StarScanner:
    """Walks the input directories and collects starred images by orientation."""

    def __init__(self, config: AppConfig):
        """
        Initialize the scanner.

        Args:
            config: Application configuration
        """
        self.config = config
        self.image_processor = ImageProcessor(config)
        # Image path -> orientation label, in discovery order
        self.starred_images: CaseInsensitiveDict = CaseInsensitiveDict()
        self.stats = ScanStats()

    def scan(self) -> CaseInsensitiveDict:
        """
        Scan every configured input directory.

        Returns:
            Mapping of starred image path to orientation label
        """
        for root in self.config.input_dirs:
            root = os.path.abspath(root)
            logger.info(f"Processing directory: {root}")
            for directory in walk_directories(root):
                self.process_directory(directory)

        return self.starred_images

    def process_directory(self, directory: str) -> int:
        """
        Record the starred images listed in a directory's sidecar file.

        Args:
            directory: Directory that may contain a ``.picasa.ini``

        Returns:
            Number of starred images recorded from this directory
        """
        self.stats.directories_visited += 1

        sidecar_path = find_sidecar(directory)
        if not sidecar_path:
            return 0

        try:
            sections = read_starred_sections(sidecar_path)
        except OSError as e:
            logger.warning(f"Unable to read '{sidecar_path}': {str(e)}")
            return 0

        self.stats.sidecars_read += 1
        total_found = 0

        for section in sections:
            full_path = os.path.join(directory, section)

            if self.config.check_exists and not os.path.isfile(full_path):
                logger.debug(f"Starred image does not exist: {full_path}")
                self.stats.skipped_missing += 1
                continue

            orientation = self.image_processor.get_orientation(full_path)
            if not orientation:
                self.stats.skipped_unreadable += 1
                continue

            self.starred_images[full_path] = orientation
            total_found += 1

        self.stats.starred_found += total_found

        if total_found > 0:
            logger.info(f"Found {total_found} starred in '{directory}'")
        else:
            logger.debug(f"Found no starred in '{directory}'")

        return total_found
