"""Prometheus exporter helpers."""

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest


uploads_total = Counter(
    "image_relay_uploads_total",
    "Images forwarded to Shopify, by outcome.",
    ["outcome"],
)

requests_total = Counter(
    "image_relay_requests_total",
    "Upload requests answered, by HTTP status.",
    ["status"],
)

upload_seconds = Histogram(
    "image_relay_upload_seconds",
    "Time spent on a single Shopify file upload.",
)


def render_latest() -> tuple[bytes, str]:
    """Return the exposition payload and its content type."""

    return generate_latest(), CONTENT_TYPE_LATEST
