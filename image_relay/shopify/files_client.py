"""Async client for the Shopify Admin Files endpoint."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from image_relay.config.settings import ShopifyConfig
from image_relay.intake.models import NormalizedImage
from image_relay.metrics.prometheus_exporter import upload_seconds, uploads_total
from image_relay.services.results import UploadFailure, UploadResult, UploadSuccess
from image_relay.shopify.multipart import MultipartEncoder

logger = logging.getLogger(__name__)

MALFORMED_RESPONSE = "malformed platform response"


class ShopifyFile(BaseModel):
    """File descriptor returned by ``files.json``."""

    url: str
    key: str
    size: int


class ShopifyFileResponse(BaseModel):
    file: ShopifyFile


class ShopifyFilesClient:
    """Uploads one image per call and reports the outcome instead of raising."""

    def __init__(
        self,
        config: ShopifyConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._client = httpx.AsyncClient(
            timeout=config.request_timeout,
            transport=transport,
            headers={
                "X-Shopify-Access-Token": config.access_token,
                "Accept": "application/json",
            },
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""

        await self._client.aclose()

    async def upload(self, image: NormalizedImage) -> UploadResult:
        """Send ``image`` to Shopify; every failure becomes an ``UploadFailure``."""

        started = time.perf_counter()
        try:
            result = await self._upload(image)
        except httpx.HTTPError as exc:
            logger.warning("Network error uploading %s: %r", image.filename, exc)
            result = UploadFailure(message=str(exc) or exc.__class__.__name__)
        except Exception as exc:
            logger.exception("Unexpected error uploading %s", image.filename)
            result = UploadFailure(message=str(exc) or exc.__class__.__name__)
        finally:
            upload_seconds.observe(time.perf_counter() - started)

        uploads_total.labels(outcome="success" if result.success else "failure").inc()
        return result

    async def _upload(self, image: NormalizedImage) -> UploadResult:
        encoder = MultipartEncoder()
        body = encoder.add_file_part("file", image.filename, image.content_type, image.content)
        response = await self._client.post(
            self._config.files_url,
            content=body,
            headers={"Content-Type": encoder.content_type},
        )

        if not response.is_success:
            message = f"Shopify API error: {response.status_code} - {response.text}"
            logger.warning("Upload of %s rejected: %s", image.filename, message)
            return UploadFailure(message=message)

        return self._parse_success(response, image.filename)

    @staticmethod
    def _parse_success(response: httpx.Response, filename: str) -> UploadResult:
        try:
            payload: Any = response.json()
            parsed = ShopifyFileResponse.model_validate(payload)
        except (ValueError, ValidationError):
            logger.error("Unexpected Shopify response for %s: %s", filename, response.text[:500])
            return UploadFailure(message=MALFORMED_RESPONSE)

        logger.info("Uploaded %s to %s", filename, parsed.file.url)
        return UploadSuccess(
            url=parsed.file.url,
            remote_filename=parsed.file.key,
            size_bytes=parsed.file.size,
        )

    async def ping(self) -> bool:
        """Return ``True`` when the shop endpoint accepts our credentials."""

        response = await self._client.get(self._config.shop_url)
        return response.is_success
