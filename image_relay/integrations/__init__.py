"""Integration check helpers."""

from .checks import (
    IntegrationCheckResult,
    check_shopify,
    run_all_checks,
)

__all__ = [
    "IntegrationCheckResult",
    "check_shopify",
    "run_all_checks",
]
