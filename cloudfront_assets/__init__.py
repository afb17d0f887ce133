"""Serve static assets from a CDN-fronted bucket with content-derived keys."""

from __future__ import annotations

from cloudfront_assets.config import ConfigurationError, Settings, configure
from cloudfront_assets.request import RequestContext
from cloudfront_assets.services.asset_index import AssetIndex, RemoteAssetIndex
from cloudfront_assets.services.css_rewriter import (
    RewrittenStylesheet,
    StylesheetRewriter,
    iter_stylesheets,
)
from cloudfront_assets.services.exclusions import SourceExclusions
from cloudfront_assets.services.hosts import (
    HostSelector,
    LiteralHost,
    ResolverHost,
    ShardedHost,
)
from cloudfront_assets.services.keys import AssetKeyCache, key_for_path
from cloudfront_assets.services.rewriter import (
    AssetPathRewriter,
    LiteralStrategy,
    RewriteResult,
    TimestampStrategy,
)

__all__ = [
    "AssetIndex",
    "AssetKeyCache",
    "AssetPathRewriter",
    "ConfigurationError",
    "HostSelector",
    "LiteralHost",
    "LiteralStrategy",
    "RemoteAssetIndex",
    "RequestContext",
    "ResolverHost",
    "RewriteResult",
    "RewrittenStylesheet",
    "Settings",
    "ShardedHost",
    "SourceExclusions",
    "StylesheetRewriter",
    "TimestampStrategy",
    "configure",
    "iter_stylesheets",
    "key_for_path",
]
