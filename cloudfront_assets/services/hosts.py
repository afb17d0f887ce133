"""Choose the base URL an asset is served from."""

from __future__ import annotations

import posixpath
import zlib
from urllib.parse import urlsplit
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from cloudfront_assets.request import RequestContext
from cloudfront_assets.utils.paths import strip_query

if TYPE_CHECKING:
    from cloudfront_assets.config import Settings

HostResolver = Callable[[str, Union[RequestContext, None]], str]


@dataclass(frozen=True)
class LiteralHost:
    name: str

    def resolve(self, source: str, request: RequestContext | None, scheme: str) -> str:
        return f"{scheme}://{self.name}"


@dataclass(frozen=True)
class ShardedHost:
    """A host template such as ``assets-%d.example.com``.

    The shard is derived from the asset path, so one asset always maps to
    the same hostname and browsers can keep it cached.
    """

    template: str
    shard_count: int = 4

    def shard_for(self, source: str) -> int:
        # query and fragment do not change which file is served
        path = "/" + strip_query(source).lstrip("/")
        return zlib.crc32(path.encode("utf-8")) % self.shard_count

    def resolve(self, source: str, request: RequestContext | None, scheme: str) -> str:
        return f"{scheme}://{self.template % self.shard_for(source)}"


@dataclass(frozen=True)
class ResolverHost:
    # The resolver returns a complete base URL, scheme included.
    resolver: HostResolver

    def resolve(self, source: str, request: RequestContext | None, scheme: str) -> str:
        return self.resolver(source, request)


CdnHost = Union[LiteralHost, ShardedHost, ResolverHost]


def parse_host(
    cname: str | None,
    resolver: HostResolver | None = None,
    shard_count: int = 4,
) -> CdnHost | None:
    if resolver is not None:
        return ResolverHost(resolver)
    if not cname:
        return None
    if "%d" in cname:
        return ShardedHost(cname, shard_count)
    return LiteralHost(cname)


def _extension(source: str) -> str:
    return posixpath.splitext(strip_query(source))[1].lstrip(".").lower()


class HostSelector:
    """Pure host-selection policy over an immutable ``Settings``."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.cdn_host = settings.cdn_host

    def fallback_host(self, scheme: str) -> str:
        host = self.settings.asset_host_without_cdn
        if not host:
            return ""
        if "//" not in host:
            host = "//" + host
        # any configured scheme is replaced by the computed one
        parts = urlsplit(host)
        return f"{scheme}://{parts.netloc}{parts.path.rstrip('/')}"

    def bucket_base(self, scheme: str) -> str:
        return f"{scheme}://{self.settings.bucket_host}"

    def asset_host(
        self,
        source: str,
        request: RequestContext | None = None,
        is_remote: bool = False,
        force_ssl: bool = False,
    ) -> str:
        ssl = force_ssl or (request is not None and request.ssl)
        scheme = "https" if ssl else "http"

        if not is_remote or not self.settings.enabled:
            return self.fallback_host(scheme)

        if self.cdn_host is None:
            host = self.bucket_base(scheme)
        else:
            host = self.cdn_host.resolve(source, request, scheme)

        extension = _extension(source)
        if extension == "css" and ssl and self.settings.ssl_prefix:
            return f"{host}/{self.settings.ssl_prefix}"
        if (
            request is not None
            and request.accepts_gzip
            and self.settings.gzip_prefix
            and extension in self.settings.gzip_extensions
        ):
            return f"{host}/{self.settings.gzip_prefix}"
        if self.settings.plain_prefix:
            return f"{host}/{self.settings.plain_prefix}"
        return host
