"""Concurrent fan-out of image uploads."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Sequence

from image_relay.intake.models import NormalizedImage
from image_relay.services.results import AggregateResponse, UploadResult

logger = logging.getLogger(__name__)

Uploader = Callable[[NormalizedImage], Awaitable[UploadResult]]


async def relay_images(upload: Uploader, images: Sequence[NormalizedImage]) -> AggregateResponse:
    """Upload every image at once and wait for all of them.

    ``upload`` must not raise; a failed image never cancels its siblings.
    Results keep the order of ``images``.
    """

    results = await asyncio.gather(*(upload(image) for image in images))
    aggregate = AggregateResponse.from_results(results)
    logger.info(
        "Relayed %d images, %d failed",
        len(aggregate.results),
        aggregate.failed_count,
    )
    return aggregate
