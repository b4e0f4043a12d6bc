#!/usr/bin/env python3
"""
Example 1: Scan-Only Mode

This example scans folders for starred photos and prints how many of each
orientation were found, without writing any output files.
"""

import os
import sys
import argparse
from collections import Counter
from pathlib import Path

# Add the parent directory to sys.path to import the package
sys.path.insert(0, str(Path(__file__).parent.parent))

from starcasa.config import AppConfig
from starcasa.logging_setup import setup_logging
from starcasa.scanner import StarScanner


def scan_only_example():
    """Scan-only mode example."""
    parser = argparse.ArgumentParser(description="Scan-only example for StarCasa")
    parser.add_argument("input_dirs", nargs="+", help="Folders to scan for .picasa.ini files")
    parser.add_argument("--check", action="store_true", help="Skip starred photos that no longer exist")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    for directory in args.input_dirs:
        if not os.path.isdir(directory):
            print(f"Error: Directory not found: {directory}")
            return 1

    # Output paths are never written here, they only select classification
    config = AppConfig(
        input_dirs=args.input_dirs,
        output_files={"portrait": "-", "landscape": "-", "square": "-"},
        check_exists=args.check,
        debug_mode=args.debug,
    )
    setup_logging(config)

    scanner = StarScanner(config)
    starred_images = scanner.scan()

    counts = Counter(starred_images.values())

    print("\nScan complete!")
    print(f"Directories scanned: {scanner.stats.directories_visited}")
    print(f"Sidecar files read: {scanner.stats.sidecars_read}")
    print(f"Starred photos: {len(starred_images)}")
    for orientation in ("portrait", "landscape", "square"):
        print(f"  {orientation}: {counts.get(orientation, 0)}")

    if scanner.stats.skipped_unreadable:
        print(f"\n{scanner.stats.skipped_unreadable} starred photos could not be opened. See the log for details.")

    return 0


if __name__ == "__main__":
    sys.exit(scan_only_example())
