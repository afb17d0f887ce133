"""Rewrite a single asset reference to its CDN or local URL."""

from __future__ import annotations

import os
import stat as stat_module
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from cloudfront_assets.config import Settings
from cloudfront_assets.request import RequestContext
from cloudfront_assets.services.asset_index import RemoteAssetIndex
from cloudfront_assets.services.exclusions import SourceExclusions
from cloudfront_assets.services.hosts import HostSelector
from cloudfront_assets.services.keys import AssetKeyCache
from cloudfront_assets.utils.paths import resolve_source


@dataclass(frozen=True)
class RewriteResult:
    url: str
    rewritten: bool = False

    def __str__(self) -> str:
        return self.url


class LocalAssetStrategy(ABC):
    """How an asset that is not on the CDN is referenced."""

    @abstractmethod
    def local_path(self, source: str, stat: os.stat_result) -> str: ...


class LiteralStrategy(LocalAssetStrategy):
    def local_path(self, source: str, stat: os.stat_result) -> str:
        return source


class TimestampStrategy(LocalAssetStrategy):
    """Append ``?<mtime>`` so browsers still refetch edited local files."""

    def local_path(self, source: str, stat: os.stat_result) -> str:
        return f"{source}?{int(stat.st_mtime)}"


class AssetPathRewriter:
    def __init__(
        self,
        settings: Settings,
        index: RemoteAssetIndex,
        *,
        selector: HostSelector | None = None,
        exclusions: SourceExclusions | None = None,
        key_cache: AssetKeyCache | None = None,
        local_strategy: LocalAssetStrategy | None = None,
    ):
        self.settings = settings
        self.index = index
        self.selector = selector or HostSelector(settings)
        self.exclusions = exclusions or SourceExclusions(settings.exclude_patterns)
        self.key_cache = key_cache or AssetKeyCache(settings.key_cache_size)
        if local_strategy is None:
            local_strategy = (
                TimestampStrategy() if settings.timestamp_fallback else LiteralStrategy()
            )
        self.local_strategy = local_strategy

    def is_remote(self, path: Path, source: str) -> bool:
        return (
            self.settings.enabled
            and not self.exclusions.is_excluded(source)
            and path in self.index
        )

    def rewrite(
        self,
        source: str,
        request: RequestContext | None = None,
        force_ssl: bool = False,
    ) -> RewriteResult:
        path = resolve_source(self.settings.public_root, source)
        try:
            stat = path.stat()
        except OSError:
            return RewriteResult(source)
        if not stat_module.S_ISREG(stat.st_mode):
            return RewriteResult(source)

        if not source.startswith("/"):
            source = "/" + source

        if not self.is_remote(path, source):
            host = self.selector.asset_host(source, request, False, force_ssl)
            return RewriteResult(host + self.local_strategy.local_path(source, stat))

        key = self.key_cache.get(path, self.settings.key_prefix, stat)
        if not key:
            return RewriteResult(source)
        host = self.selector.asset_host(source, request, True, force_ssl)
        return RewriteResult(f"{host}/{key}{source}", rewritten=True)

    def asset_url(
        self,
        source: str,
        request: RequestContext | None = None,
        force_ssl: bool = False,
    ) -> str:
        return self.rewrite(source, request, force_ssl).url
