"""Batch checks applied after intake and before any upload starts."""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Sequence

from PIL import Image, UnidentifiedImageError

from image_relay.errors import InvalidImageContent, TooManyImages
from image_relay.intake.models import NormalizedImage

logger = logging.getLogger(__name__)


def verify_image_content(image: NormalizedImage) -> str:
    """Check that the bytes decode as an image and return Pillow's format name."""

    try:
        with Image.open(BytesIO(image.content)) as img:
            img.verify()
            image_format = img.format or "unknown"
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
        raise InvalidImageContent(image.filename, str(exc)) from exc
    return image_format


def check_batch(
    images: Sequence[NormalizedImage],
    *,
    max_images: int,
    verify_content: bool = False,
) -> None:
    """Reject batches that are too large or, optionally, hold non-image data."""

    if len(images) > max_images:
        raise TooManyImages(len(images), max_images)
    if verify_content:
        for image in images:
            image_format = verify_image_content(image)
            logger.debug("Verified %s as %s", image.filename, image_format)
