"""
Command-line interface for StarCasa.
"""

import argparse
import datetime
import sys
from typing import List, Optional

from . import __version__
from .config import (
    AppConfig,
    ConfigError,
    ORIENTATION_ALL,
    ORIENTATION_LANDSCAPE,
    ORIENTATION_PORTRAIT,
    ORIENTATION_SQUARE,
    get_app_data_path,
    load_config,
    validate_config,
)
from .logging_setup import get_log_dir, get_logger, setup_logging
from .output_writer import OutputWriter
from .scanner import StarScanner
from .update_check import check_latest_release
from .utils import format_version, pluralise

logger = get_logger(__name__)


class OutputTargetAction(argparse.Action):
    """Collect orientation output files in the order they appear on the command line."""

    def __call__(self, parser, namespace, values, option_string=None):
        targets = getattr(namespace, self.dest, None)
        if targets is None:
            targets = {}
        targets[self.const] = values
        setattr(namespace, self.dest, targets)


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="starcasa",
        description="Generate a report of starred photos in Picasa.",
        epilog=f"Logs are written to {get_log_dir(AppConfig())}",
    )

    parser.add_argument(
        "input_dirs",
        nargs="*",
        help="Directories to scan (recursively) for .picasa.ini files"
    )

    for short, orientation, help_text in (
        ("-p", ORIENTATION_PORTRAIT, "Output file path for portrait images"),
        ("-l", ORIENTATION_LANDSCAPE, "Output file path for landscape images"),
        ("-s", ORIENTATION_SQUARE, "Output file path for square images"),
        ("-a", ORIENTATION_ALL, "Output file path for all starred images"),
    ):
        parser.add_argument(
            short, f"--{orientation}",
            dest="output_files",
            action=OutputTargetAction,
            const=orientation,
            metavar="FILE",
            help=help_text
        )

    parser.add_argument(
        "-c", "--check",
        action="store_true",
        help="Check if starred images exist (much slower)"
    )

    parser.add_argument(
        "--config",
        help="Path to a JSON configuration file with default settings"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show verbose output on the console as well as in the log"
    )

    parser.add_argument(
        "--log-dir",
        help="Override the folder log files are written to"
    )

    parser.add_argument(
        "--no-update-check",
        action="store_true",
        help="Don't check GitHub for a newer release"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {format_version(__version__)}"
    )

    return parser


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: Arguments to parse, defaults to sys.argv

    Returns:
        Parsed arguments namespace
    """
    return build_parser().parse_args(argv)


def build_config(args: argparse.Namespace) -> AppConfig:
    """
    Build the run configuration from an optional config file and the CLI.

    Output files given on the command line replace any from the config file.

    Args:
        args: Parsed arguments

    Returns:
        Application configuration
    """
    config = load_config(args.config) if args.config else AppConfig()

    if args.input_dirs:
        config.input_dirs = list(args.input_dirs)
    if args.output_files:
        config.output_files = dict(args.output_files)
    if args.check:
        config.check_exists = True
    if args.debug:
        config.debug_mode = True
    if args.log_dir:
        config.log_dir = args.log_dir
    if args.no_update_check:
        config.check_for_updates = False

    return config


def print_banner() -> None:
    """Print the program banner."""
    year = datetime.date.today().year
    print(f"StarCasa v{format_version(__version__)}, Copyright © 2025-{year} Richard Lawrence")
    print("Generate a report of starred photos in Picasa.")
    print("https://github.com/mrsilver76/starcasa\n")
    print("This program comes with ABSOLUTELY NO WARRANTY. This is free software,")
    print("and you are welcome to redistribute it under certain conditions; see")
    print("the documentation for details.")
    print()


def run_cli(argv: Optional[List[str]] = None) -> int:
    """
    Run the command-line interface.

    Args:
        argv: Arguments to parse, defaults to sys.argv

    Returns:
        Exit code (0 for success, 1 if the report could not be written, 2 for usage errors)
    """
    if argv is None:
        argv = sys.argv[1:]

    args = parse_arguments(argv)

    try:
        config = build_config(args)
        validate_config(config)
    except (ConfigError, RuntimeError) as e:
        build_parser().print_usage(sys.stderr)
        print(f"Error: {str(e)}", file=sys.stderr)
        return 2

    try:
        setup_logging(config)
        print_banner()

        logger.info("Starting StarCasa...")
        logger.debug(f"Parsed arguments: {' '.join(argv)}")

        for orientation, path in config.output_files.items():
            logger.info(f"Writing out {orientation} starred images to {path}")

        scanner = StarScanner(config)
        starred_images = scanner.scan()

        report = OutputWriter(config.output_files).write(starred_images)

        logger.info(f"StarCasa finished. Total starred images found: {len(starred_images)}")
        stats = scanner.stats
        logger.debug(
            f"Scanned {pluralise(stats.directories_visited, 'directory', 'directories')}, "
            f"read {pluralise(stats.sidecars_read, 'sidecar', 'sidecars')}, "
            f"skipped {stats.skipped_missing} missing and {stats.skipped_unreadable} unreadable images"
        )

        if config.check_for_updates:
            newer = check_latest_release(config, __version__, get_app_data_path())
            if newer:
                print()
                print(f" A new version ({newer}) is available! You are using {format_version(__version__)}")
                print(f"    Get it from https://www.github.com/{config.github_repo}/")

        if not report.ok:
            logger.error(f"Failed to write {pluralise(len(report.failures), 'output', 'outputs')}: "
                         f"{', '.join(report.failures)}")
            return 1

        return 0

    except Exception as e:
        logger.error(f"StarCasa failed: {str(e)}")
        if config.debug_mode:
            import traceback
            logger.error(f"Traceback: {traceback.format_exc()}")
        return 1
