"""Per-request signals that influence which asset host is used."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass

from starlette.requests import Request

# Netscape 4 mangles gzip responses; IE announces itself as Mozilla/4 but copes.
_NETSCAPE4_RE = re.compile(r"^Mozilla/4")
_MSIE_RE = re.compile(r"\bMSIE\b")


def _is_secure_request(request: Request) -> bool:
    # Honor reverse proxy headers if present
    xf_proto = request.headers.get("x-forwarded-proto")
    if xf_proto:
        return "https" in xf_proto
    return request.url.scheme == "https"


@dataclass(frozen=True)
class RequestContext:
    ssl: bool = False
    user_agent: str = ""
    accept_encoding: str = ""

    @classmethod
    def from_headers(
        cls, headers: Mapping[str, str], *, ssl: bool = False
    ) -> RequestContext:
        lowered = {k.lower(): v for k, v in headers.items()}
        return cls(
            ssl=ssl,
            user_agent=lowered.get("user-agent", ""),
            accept_encoding=lowered.get("accept-encoding", ""),
        )

    @classmethod
    def from_request(cls, request: Request) -> RequestContext:
        return cls(
            ssl=_is_secure_request(request),
            user_agent=request.headers.get("user-agent", ""),
            accept_encoding=request.headers.get("accept-encoding", ""),
        )

    @property
    def accepts_gzip(self) -> bool:
        """True when the client both asks for gzip and can be trusted with it."""
        if "gzip" not in self.accept_encoding.lower():
            return False
        ua = self.user_agent
        return not (_NETSCAPE4_RE.search(ua) and not _MSIE_RE.search(ua))
