"""
Classify starred images by orientation.
"""

from typing import Optional
from PIL import Image, UnidentifiedImageError

from .config import (
    AppConfig,
    ORIENTATION_ALL,
    ORIENTATION_LANDSCAPE,
    ORIENTATION_PORTRAIT,
    ORIENTATION_SQUARE,
)
from .logging_setup import get_logger

logger = get_logger(__name__)


def classify_dimensions(width: int, height: int) -> str:
    """
    Classify pixel dimensions as landscape, portrait or square.

    Args:
        width: Image width in pixels
        height: Image height in pixels

    Returns:
        Orientation label
    """
    if width > height:
        return ORIENTATION_LANDSCAPE
    if width < height:
        return ORIENTATION_PORTRAIT
    return ORIENTATION_SQUARE


class ImageProcessor:
    """Class to determine the orientation of image files."""

    def __init__(self, config: AppConfig):
        """
        Initialize the image processor.

        Args:
            config: Application configuration
        """
        self.config = config

    def get_orientation(self, path: str) -> Optional[str]:
        """
        Determine the orientation label of an image.

        When an ``all`` output is configured the file is never opened and the
        label is always ``all``.

        Args:
            path: Path to the image file

        Returns:
            Orientation label, or None if the image could not be loaded
        """
        if self.config.all_target:
            return ORIENTATION_ALL

        try:
            # Image.open only reads the header, which is enough for the size
            with Image.open(path) as img:
                width, height = img.size
        except (OSError, UnidentifiedImageError, ValueError, Image.DecompressionBombError) as e:
            logger.error(f"Error loading '{path}': {str(e)}")
            return None

        return classify_dimensions(width, height)
