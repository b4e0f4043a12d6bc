"""
Check GitHub for a newer StarCasa release.

The result is cached in ``versionCheck.ini`` so the network is only touched
once every few days.
"""

import configparser
import datetime
import os
from typing import Optional, Tuple

import requests

from .config import AppConfig
from .logging_setup import get_logger
from .utils import format_version, parse_semantic_version

logger = get_logger(__name__)

CACHE_FILENAME = "versionCheck.ini"
CACHE_SECTION = "Version"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


def load_cache(cache_path: str) -> configparser.ConfigParser:
    """Load the version check cache, returning an empty one if it is missing or broken."""
    # Keep key case as written
    parser = configparser.ConfigParser()
    parser.optionxform = str
    if os.path.exists(cache_path):
        try:
            parser.read(cache_path, encoding='utf-8')
        except (configparser.Error, OSError) as e:
            logger.debug(f"Ignoring unreadable version cache {cache_path}: {str(e)}")
            parser = configparser.ConfigParser()
            parser.optionxform = str
    if not parser.has_section(CACHE_SECTION):
        parser.add_section(CACHE_SECTION)
    return parser


def needs_check(cache: configparser.ConfigParser, interval_days: int,
                now: Optional[datetime.datetime] = None) -> bool:
    """
    Decide whether the cached release information has expired.

    Args:
        cache: Loaded version cache
        interval_days: Days between checks
        now: Current UTC time, for testing

    Returns:
        True if GitHub should be asked again
    """
    now = now or _utcnow()
    checked = cache.get(CACHE_SECTION, "LatestReleaseChecked", fallback="")
    try:
        last_checked = datetime.datetime.strptime(checked, TIMESTAMP_FORMAT)
    except ValueError:
        return True
    return (now - last_checked).total_seconds() >= interval_days * 86400


def fetch_latest_version(repo: str, current_version: str,
                         timeout: float) -> Optional[Tuple[Optional[str], str]]:
    """
    Ask GitHub for the latest release tag.

    Args:
        repo: ``owner/name`` of the GitHub repository
        current_version: Running version, sent in the User-Agent
        timeout: Request timeout in seconds

    Returns:
        Tuple of (version or None, UTC timestamp) if GitHub answered at all,
        None if it could not be reached
    """
    url = f"https://api.github.com/repos/{repo}/releases/latest"
    headers = {"User-Agent": f"{repo.replace('/', '.')}/{format_version(current_version)}"}

    try:
        response = requests.get(url, headers=headers, timeout=timeout)
    except requests.RequestException as e:
        logger.debug(f"Release check failed: {str(e)}")
        return None

    timestamp = _utcnow().strftime(TIMESTAMP_FORMAT)

    if not response.ok:
        # Still counts as checked
        logger.debug(f"Release check returned HTTP {response.status_code}")
        return None, timestamp

    try:
        tag = response.json().get("tag_name")
    except (ValueError, AttributeError):
        tag = None

    if not tag or not isinstance(tag, str):
        return None, timestamp

    return tag.lstrip('vV'), timestamp


def check_latest_release(config: AppConfig, current_version: str, cache_dir: str) -> Optional[str]:
    """
    Report a newer release if one is known.

    Args:
        config: Application configuration
        current_version: Running version
        cache_dir: Folder holding ``versionCheck.ini``

    Returns:
        The newer version string, or None if up to date or unknown
    """
    cache_path = os.path.join(cache_dir, CACHE_FILENAME)
    cache = load_cache(cache_path)

    if needs_check(cache, config.update_check_interval_days):
        latest = fetch_latest_version(config.github_repo, current_version, config.update_check_timeout)
        if latest is not None:
            version, timestamp = latest
            cache.set(CACHE_SECTION, "LatestReleaseChecked", timestamp)
            if version:
                cache.set(CACHE_SECTION, "LatestReleaseVersion", version)
            try:
                os.makedirs(cache_dir, exist_ok=True)
                with open(cache_path, 'w', encoding='utf-8') as f:
                    cache.write(f)
            except OSError as e:
                logger.debug(f"Unable to save version cache {cache_path}: {str(e)}")

    cached = cache.get(CACHE_SECTION, "LatestReleaseVersion", fallback="")
    cached_version = parse_semantic_version(cached)
    running_version = parse_semantic_version(format_version(current_version))

    if cached_version and running_version and cached_version > running_version:
        return '.'.join(str(p) for p in cached_version)
    return None
