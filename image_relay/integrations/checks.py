"""Connectivity checks for the Shopify Admin API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

from image_relay.config.settings import Settings, get_settings
from image_relay.errors import ConfigurationMissing
from image_relay.shopify.files_client import ShopifyFilesClient


@dataclass(slots=True)
class IntegrationCheckResult:
    """Structured result describing the integration check outcome."""

    name: str
    success: bool
    message: str


async def _run_check(
    name: str,
    factory: Callable[[], Awaitable[bool]],
    success_message: str,
) -> IntegrationCheckResult:
    try:
        result = await factory()
    except Exception as exc:  # pragma: no cover - reported, not raised
        return IntegrationCheckResult(name=name, success=False, message=str(exc))

    if result:
        return IntegrationCheckResult(name=name, success=True, message=success_message)
    return IntegrationCheckResult(
        name=name,
        success=False,
        message="Service responded with non-success status.",
    )


async def check_shopify(settings: Settings | None = None) -> IntegrationCheckResult:
    """Request ``shop.json`` with the configured token and return the result."""

    settings = settings or get_settings()
    try:
        config = settings.shopify_config()
    except ConfigurationMissing as exc:
        return IntegrationCheckResult(name="Shopify", success=False, message=str(exc))

    client = ShopifyFilesClient(config)

    async def _ping() -> bool:
        try:
            return await client.ping()
        finally:
            await client.close()

    return await _run_check(
        name="Shopify",
        factory=_ping,
        success_message=f"Shopify store {config.store_domain} is reachable.",
    )


async def run_all_checks() -> list[IntegrationCheckResult]:
    """Execute all integration checks concurrently."""

    return list(await asyncio.gather(check_shopify()))
