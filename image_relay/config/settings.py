"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from image_relay.errors import ConfigurationMissing, InvalidConfiguration

_TRUTHY = {"1", "true", "yes", "on"}


def _load_env_file(path: str = ".env") -> None:
    """Populate os.environ from the provided .env file if it exists."""

    env_path = Path(path)
    if not env_path.exists():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


def normalise_store_domain(store: str) -> str:
    """Strip the scheme and trailing slash from a configured store address."""

    return re.sub(r"^https?://", "", store.strip()).rstrip("/")


@dataclass(frozen=True, slots=True)
class ShopifyConfig:
    """Validated connection details for the Shopify Admin API."""

    store_domain: str
    access_token: str
    api_version: str = "2024-01"
    request_timeout: float = 30.0

    @property
    def files_url(self) -> str:
        return f"https://{self.store_domain}/admin/api/{self.api_version}/files.json"

    @property
    def shop_url(self) -> str:
        return f"https://{self.store_domain}/admin/api/{self.api_version}/shop.json"


@dataclass(frozen=True, slots=True)
class Settings:
    """Centralised project settings based on OS environment variables."""

    environment: str = "dev"
    log_level: str = "INFO"

    shopify_store: str = ""
    shopify_access_token: str = ""
    shopify_api_version: str = "2024-01"
    shopify_request_timeout: float = 30.0

    max_images_per_request: int = 50
    verify_image_content: bool = False

    def shopify_config(self) -> ShopifyConfig:
        """Return validated Shopify settings or raise ``ConfigurationMissing``."""

        store_domain = normalise_store_domain(self.shopify_store)
        if not store_domain or not self.shopify_access_token:
            raise ConfigurationMissing(
                "Shopify credentials not configured. "
                "Please set SHOPIFY_STORE and SHOPIFY_ACCESS_TOKEN environment variables.",
            )
        return ShopifyConfig(
            store_domain=store_domain,
            access_token=self.shopify_access_token,
            api_version=self.shopify_api_version,
            request_timeout=self.shopify_request_timeout,
        )


def _env_number(name: str, default: str, cast: type[int] | type[float]) -> int | float:
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError as exc:
        raise InvalidConfiguration(name, raw, cast.__name__) from exc


def _build_settings() -> Settings:
    _load_env_file()

    return Settings(
        environment=os.getenv("ENVIRONMENT", "dev"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        shopify_store=os.getenv("SHOPIFY_STORE", ""),
        shopify_access_token=os.getenv("SHOPIFY_ACCESS_TOKEN", ""),
        shopify_api_version=os.getenv("SHOPIFY_API_VERSION", "2024-01"),
        shopify_request_timeout=_env_number("SHOPIFY_REQUEST_TIMEOUT", "30", float),
        max_images_per_request=_env_number("MAX_IMAGES_PER_REQUEST", "50", int),
        verify_image_content=os.getenv("VERIFY_IMAGE_CONTENT", "false").strip().lower() in _TRUTHY,
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance to avoid re-reading configuration."""

    return _build_settings()
