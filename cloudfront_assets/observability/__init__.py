"""Logging setup shared by the library and its command line."""

from __future__ import annotations

from cloudfront_assets.observability.logging import (
    CorrelationIdFilter,
    configure_logging,
)

__all__ = ["CorrelationIdFilter", "configure_logging"]
