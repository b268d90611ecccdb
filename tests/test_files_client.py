"""Tests for the Shopify Files upload client."""

from __future__ import annotations

import httpx
import pytest

from image_relay.config.settings import Settings
from image_relay.intake.models import NormalizedImage
from image_relay.services.results import UploadFailure, UploadSuccess
from image_relay.shopify.files_client import MALFORMED_RESPONSE, ShopifyFilesClient


def _client(settings: Settings, handler) -> ShopifyFilesClient:
    return ShopifyFilesClient(settings.shopify_config(), transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_upload_success_sends_expected_request(settings: Settings, fake_shopify, png_bytes: bytes) -> None:
    client = _client(settings, fake_shopify)
    image = NormalizedImage(filename="photo.png", content=png_bytes, content_type="image/png")

    result = await client.upload(image)
    await client.close()

    assert isinstance(result, UploadSuccess)
    assert result.remote_filename == "photo.png"
    assert result.url == "https://cdn.shopify.com/s/files/photo.png"

    request = fake_shopify.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://demo-store.myshopify.com/admin/api/2024-01/files.json"
    assert request.headers["X-Shopify-Access-Token"] == "shpat_test_token"
    assert request.headers["Accept"] == "application/json"
    content_type = request.headers["Content-Type"]
    assert content_type.startswith("multipart/form-data; boundary=")
    boundary = content_type.split("boundary=", 1)[1].encode("ascii")
    assert request.content.startswith(b"--" + boundary + b"\r\n")
    assert request.content.endswith(b"\r\n--" + boundary + b"--\r\n")
    assert png_bytes in request.content
    assert result.size_bytes == len(request.content)


@pytest.mark.asyncio
async def test_error_status_becomes_failure(settings: Settings) -> None:
    client = _client(settings, lambda request: httpx.Response(403, text="Forbidden"))

    result = await client.upload(NormalizedImage(filename="a.jpg", content=b"jpg"))
    await client.close()

    assert result == UploadFailure(message="Shopify API error: 403 - Forbidden")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"file": {"url": "https://cdn/x"}}),
        httpx.Response(200, json={"files": []}),
        httpx.Response(200, text="<html>not json</html>"),
    ],
)
async def test_malformed_success_payload(settings: Settings, response: httpx.Response) -> None:
    client = _client(settings, lambda request: response)

    result = await client.upload(NormalizedImage(filename="a.jpg", content=b"jpg"))
    await client.close()

    assert result == UploadFailure(message=MALFORMED_RESPONSE)


@pytest.mark.asyncio
async def test_network_error_becomes_failure(settings: Settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(settings, handler)

    result = await client.upload(NormalizedImage(filename="a.jpg", content=b"jpg"))
    await client.close()

    assert result == UploadFailure(message="connection refused")


@pytest.mark.asyncio
async def test_timeout_without_text_reports_class_name(settings: Settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("", request=request)

    client = _client(settings, handler)

    result = await client.upload(NormalizedImage(filename="a.jpg", content=b"jpg"))
    await client.close()

    assert result == UploadFailure(message="ReadTimeout")


@pytest.mark.asyncio
async def test_ping_uses_shop_endpoint(settings: Settings) -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json={"shop": {"name": "Demo"}})

    client = _client(settings, handler)

    assert await client.ping()
    await client.close()
    assert seen == ["https://demo-store.myshopify.com/admin/api/2024-01/shop.json"]
