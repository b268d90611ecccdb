"""Tests for concurrent fan-out and result aggregation."""

from __future__ import annotations

import asyncio

import pytest

from image_relay.intake.models import NormalizedImage
from image_relay.services.relay import relay_images
from image_relay.services.results import AggregateResponse, UploadFailure, UploadSuccess


def _images(count: int) -> list[NormalizedImage]:
    return [NormalizedImage(filename=f"img-{index}.jpg", content=b"x") for index in range(count)]


@pytest.mark.asyncio
async def test_results_keep_input_order_when_completion_order_differs() -> None:
    async def upload(image: NormalizedImage):
        index = int(image.filename.split("-")[1].split(".")[0])
        await asyncio.sleep(0.01 * (5 - index))
        return UploadSuccess(url=f"https://cdn/{image.filename}", remote_filename=image.filename, size_bytes=1)

    aggregate = await relay_images(upload, _images(5))

    assert [result.remote_filename for result in aggregate.results] == [f"img-{i}.jpg" for i in range(5)]


@pytest.mark.asyncio
async def test_uploads_run_concurrently() -> None:
    started = 0
    all_started = asyncio.Event()

    async def upload(image: NormalizedImage):
        nonlocal started
        started += 1
        if started == 3:
            all_started.set()
        await asyncio.wait_for(all_started.wait(), timeout=1)
        return UploadSuccess(url="u", remote_filename=image.filename, size_bytes=1)

    aggregate = await relay_images(upload, _images(3))

    assert aggregate.all_succeeded


@pytest.mark.asyncio
async def test_failure_does_not_cancel_siblings() -> None:
    async def upload(image: NormalizedImage):
        if image.filename == "img-0.jpg":
            return UploadFailure(message="boom")
        await asyncio.sleep(0.01)
        return UploadSuccess(url="u", remote_filename=image.filename, size_bytes=1)

    aggregate = await relay_images(upload, _images(3))

    assert len(aggregate.results) == 3
    assert aggregate.failed_count == 1
    assert aggregate.status_code == 207


def test_all_success_payload() -> None:
    aggregate = AggregateResponse.from_results(
        [UploadSuccess(url="https://cdn/a", remote_filename="a.jpg", size_bytes=10)],
    )

    assert aggregate.status_code == 200
    assert aggregate.to_dict() == {
        "message": "All images uploaded successfully",
        "results": [{"success": True, "url": "https://cdn/a", "filename": "a.jpg", "size": 10}],
        "count": 1,
    }


def test_partial_payload_counts_failures() -> None:
    aggregate = AggregateResponse.from_results(
        [
            UploadFailure(message="first"),
            UploadSuccess(url="https://cdn/b", remote_filename="b.jpg", size_bytes=2),
            UploadFailure(message="third"),
        ],
    )

    payload = aggregate.to_dict()

    assert aggregate.status_code == 207
    assert payload["message"] == "Some uploads failed"
    assert payload["failedCount"] == 2
    assert "count" not in payload
    assert payload["results"][0] == {"success": False, "error": "first"}
