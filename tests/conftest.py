"""Shared fixtures: settings, sample images and a fake Shopify Files API."""

from __future__ import annotations

import base64
import re
from io import BytesIO
from typing import Callable

import httpx
import pytest
from PIL import Image

from image_relay.config.settings import Settings

_FILENAME = re.compile(rb'filename="([^"]*)"')


def make_png(color: str = "red") -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (2, 2), color).save(buffer, format="PNG")
    return buffer.getvalue()


def png_data_url(color: str = "red") -> str:
    return "data:image/png;base64," + base64.b64encode(make_png(color)).decode("ascii")


class FakeShopify:
    """Stands in for ``files.json``; rejects bodies containing ``fail_marker``."""

    def __init__(self, fail_marker: bytes = b"FAIL-ME") -> None:
        self.fail_marker = fail_marker
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = request.content
        if self.fail_marker in body:
            return httpx.Response(422, text='{"errors":"file rejected"}')
        match = _FILENAME.search(body)
        key = match.group(1).decode("utf-8") if match else "unknown"
        return httpx.Response(
            201,
            json={
                "file": {
                    "url": f"https://cdn.shopify.com/s/files/{key}",
                    "key": key,
                    "size": len(body),
                },
            },
        )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        shopify_store="https://demo-store.myshopify.com/",
        shopify_access_token="shpat_test_token",
    )


@pytest.fixture
def fake_shopify() -> FakeShopify:
    return FakeShopify()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def data_url_factory() -> Callable[[str], str]:
    return png_data_url
