"""
Image utilities for the inspection report engine.
Handles image decoding, intrinsic-size lookup and target-box scaling.
"""

import io
from typing import Tuple

from PIL import Image

from inspection_report.exceptions import ImageDecodeError
from utils.config import config
from utils.logger import setup_logger

logger = setup_logger(__name__, level=config.log_level, component="IMAGE_UTILS")


def load_image(data: bytes, label: str = "image") -> Image.Image:
    """
    Decode image bytes into a fully loaded PIL image.

    Args:
        data: Encoded image bytes (PNG, JPEG, ...)
        label: Name used in error messages

    Returns:
        PIL Image object

    Raises:
        ImageDecodeError: If the bytes are empty or not a decodable image
    """
    if not data:
        raise ImageDecodeError("no image data", ref_label=label)

    try:
        img = Image.open(io.BytesIO(data))
        img.load()  # Force load to catch truncated images
    except Exception as e:
        raise ImageDecodeError(str(e), ref_label=label) from e

    logger.debug(f"Loaded {label}: size: {img.size}, mode: {img.mode}")
    return img


class ImageDecoder:
    """Resolves the intrinsic pixel size of an ImageRef."""

    def size(self, image_ref) -> Tuple[int, int]:
        """
        Return (width, height) in pixels.

        The bytes are always decoded so corrupt data fails here, where the
        caller can substitute a placeholder, instead of inside the backend.
        A size declared on the ref takes precedence over the decoded one.

        Raises:
            ImageDecodeError: If the image cannot be decoded
        """
        img = load_image(image_ref.data, label=image_ref.label)
        width, height = img.size
        if width <= 0 or height <= 0:
            raise ImageDecodeError(f"degenerate size {img.size}", ref_label=image_ref.label)
        if image_ref.has_size:
            return image_ref.width, image_ref.height
        return width, height


def scale_to_height(
    src_width: float,
    src_height: float,
    target_height: float,
    max_width: float
) -> Tuple[float, float]:
    """
    Scale to a fixed height preserving aspect ratio, capping the width.

    Returns:
        (width, height) where height == target_height and
        width == min(target_height * src_width / src_height, max_width)
    """
    aspect = src_width / src_height
    return min(target_height * aspect, max_width), target_height


def fit_within(
    src_width: float,
    src_height: float,
    box_width: float,
    box_height: float
) -> Tuple[float, float]:
    """Largest (width, height) with the source aspect ratio that fits the box."""
    scale = min(box_width / src_width, box_height / src_height)
    return src_width * scale, src_height * scale
