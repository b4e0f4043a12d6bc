"""
Write the per-orientation file lists.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Mapping

from .logging_setup import get_logger

logger = get_logger(__name__)


@dataclass
class WriteReport:
    """Outcome of writing the output files."""
    written: Dict[str, int] = field(default_factory=dict)
    failures: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


class OutputWriter:
    """Class to write starred image lists to their output files."""

    def __init__(self, output_files: Mapping[str, str]):
        """
        Initialize the output writer.

        Args:
            output_files: Orientation label -> output path, in declaration order
        """
        self.output_files = output_files

    @staticmethod
    def path_key(path: str) -> str:
        """Key under which two output paths name the same file on this platform."""
        return os.path.normcase(os.path.abspath(path))

    def distinct_paths(self) -> List[str]:
        """Output paths with duplicates removed, first one kept."""
        seen = set()
        paths = []
        for path in self.output_files.values():
            if not path or not path.strip():
                continue
            key = self.path_key(path)
            if key not in seen:
                seen.add(key)
                paths.append(path)
        return paths

    def remove_existing(self, report: WriteReport) -> None:
        """
        Delete any existing output files so the run starts from empty files.

        Args:
            report: Report that failed deletions are recorded in
        """
        for path in self.distinct_paths():
            if not os.path.exists(path):
                continue
            try:
                os.remove(path)
            except OSError as e:
                logger.error(f"Unable to delete existing output file {path}: {str(e)}")
                key = self.path_key(path)
                for orientation, target in self.output_files.items():
                    if target and self.path_key(target) == key:
                        report.failures[orientation] = str(e)

    def write(self, starred_images: Mapping[str, str]) -> WriteReport:
        """
        Write each orientation's starred images to its output file.

        Targets sharing a path are appended in declaration order.

        Args:
            starred_images: Image path -> orientation label, in discovery order

        Returns:
            WriteReport with counts per orientation and any failures
        """
        report = WriteReport()
        self.remove_existing(report)

        for orientation, file_path in self.output_files.items():
            if not file_path or not file_path.strip():
                continue

            if orientation in report.failures:
                continue

            matches = [
                path for path, label in starred_images.items()
                if label.lower() == orientation.lower()
            ]

            if not matches:
                logger.info(f"No {orientation} starred images found.")
                report.written[orientation] = 0
                continue

            try:
                with open(file_path, 'a', encoding='utf-8') as f:
                    for path in matches:
                        f.write(path + '\n')
            except OSError as e:
                logger.error(f"Unable to write {orientation} starred images to {file_path}: {str(e)}")
                report.failures[orientation] = str(e)
                continue

            report.written[orientation] = len(matches)
            logger.info(f"Wrote out {orientation} starred images ({len(matches)}) to {file_path}")

        return report
