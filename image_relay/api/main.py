"""FastAPI entrypoint and HTTP routes."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from image_relay.config.settings import Settings, get_settings
from image_relay.errors import ConfigurationMissing, ImageRelayError
from image_relay.intake import NormalizedImage, check_batch, read_data_url_batch, read_form_files
from image_relay.metrics.prometheus_exporter import render_latest, requests_total
from image_relay.monitoring.logging import configure_logging
from image_relay.services.relay import relay_images
from image_relay.shopify.files_client import ShopifyFilesClient

logger = logging.getLogger(__name__)

UPLOAD_PATH = "/api/upload-images"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


async def read_images(request: Request, max_images: int) -> list[NormalizedImage]:
    """Pick the intake variant from the request content type.

    The multipart parser stops as soon as a request carries more than
    ``max_images`` files.
    """

    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith("multipart/form-data"):
        return await read_form_files(request, max_files=max_images)
    return read_data_url_batch(await request.body())


def create_app(
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Initialise the FastAPI application.

    Shopify settings are validated here, once. A missing store or token does not
    stop the app from starting: preflight requests still succeed and uploads
    answer 500 until the deployment is fixed.
    """

    settings = settings or get_settings()

    shopify_client: ShopifyFilesClient | None = None
    config_error: str | None = None
    try:
        shopify_client = ShopifyFilesClient(settings.shopify_config(), transport=transport)
    except ConfigurationMissing as exc:
        config_error = exc.error
        logger.warning("Uploads disabled: %s", config_error)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        if shopify_client is not None:
            await shopify_client.close()

    app = FastAPI(
        title="Image Relay API",
        version="0.1.0",
        docs_url="/docs" if settings.environment != "prod" else None,
        redoc_url="/redoc" if settings.environment != "prod" else None,
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    @app.exception_handler(ImageRelayError)
    async def relay_error_handler(_: Request, exc: ImageRelayError) -> JSONResponse:
        requests_total.labels(status=str(exc.status_code)).inc()
        return JSONResponse(exc.to_payload(), status_code=exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 405:
            payload = {"error": "Method not allowed"}
        else:
            payload = {"error": str(exc.detail)}
        return JSONResponse(payload, status_code=exc.status_code, headers=exc.headers)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple health endpoint used for readiness probes."""

        return {"status": "ok"}

    @app.get("/metrics", tags=["system"])
    async def metrics() -> Response:
        payload, media_type = render_latest()
        return Response(content=payload, media_type=media_type)

    @app.options(UPLOAD_PATH, tags=["uploads"])
    async def upload_preflight() -> Response:
        return Response(status_code=200)

    @app.post(UPLOAD_PATH, tags=["uploads"])
    async def upload_images(request: Request) -> JSONResponse:
        """Forward every image in the request to Shopify Files."""

        if shopify_client is None:
            raise ConfigurationMissing(config_error or "Shopify credentials not configured.")

        try:
            images = await read_images(request, settings.max_images_per_request)
            check_batch(
                images,
                max_images=settings.max_images_per_request,
                verify_content=settings.verify_image_content,
            )
            aggregate = await relay_images(shopify_client.upload, images)
        except ImageRelayError:
            raise
        except Exception as exc:
            logger.exception("Upload request failed")
            requests_total.labels(status="500").inc()
            return JSONResponse(
                {"error": "Internal server error", "message": str(exc)},
                status_code=500,
            )

        requests_total.labels(status=str(aggregate.status_code)).inc()
        return JSONResponse(aggregate.to_dict(), status_code=aggregate.status_code)

    return app


configure_logging()
app = create_app()
