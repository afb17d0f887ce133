"""Point ``url(...)`` references inside stylesheets at the CDN.

This is a regex-driven text substitution, not a CSS parser. Anything
outside a matching ``url(...)`` token is copied through untouched, line
endings included. Nested parentheses and escaped characters inside the
token are not understood.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from cloudfront_assets.config import Settings
from cloudfront_assets.services.rewriter import AssetPathRewriter
from cloudfront_assets.utils.paths import path_for_url, public_relative

logger = logging.getLogger(__name__)

# matches optional quoted url(<path>#fragment?query)
URL_RE = re.compile(
    r"""url\(["']?([^)?#"']+)(#[^"')]*)?(\?[^"')]*)?["']?\)""",
    re.IGNORECASE,
)

# scheme-qualified (http:, data:, ...) or protocol-relative references
_EXTERNAL_RE = re.compile(r"^(?:[a-z][a-z0-9+.-]*:|//)", re.IGNORECASE)


@dataclass
class RewrittenStylesheet:
    """Temporary file holding a rewritten stylesheet. The caller deletes it."""

    path: Path
    source: Path
    text: str

    def cleanup(self) -> None:
        self.path.unlink(missing_ok=True)

    def __enter__(self) -> RewrittenStylesheet:
        return self

    def __exit__(self, *exc_info) -> None:
        self.cleanup()


class StylesheetRewriter:
    def __init__(self, rewriter: AssetPathRewriter):
        self.rewriter = rewriter
        self.settings: Settings = rewriter.settings

    def rewrite_text(
        self, text: str, stylesheet_path: Path, force_ssl: bool = False
    ) -> str:
        stylesheet_path = Path(os.path.abspath(stylesheet_path))
        return URL_RE.sub(
            lambda match: self._rewrite_link(match, stylesheet_path, force_ssl),
            text,
        )

    def rewrite_stylesheet(
        self, stylesheet_path: Path | str, force_ssl: bool = False
    ) -> RewrittenStylesheet:
        """Rewrite ``stylesheet_path`` into a new temporary file.

        The temporary file is flushed and closed before this returns.
        """
        source = Path(stylesheet_path)
        with source.open(encoding="utf-8", newline="") as fh:
            contents = fh.read()
        rewritten = self.rewrite_text(contents, source, force_ssl)

        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="",
            prefix="cfah-css-",
            suffix=".css",
            delete=False,
        ) as tmp:
            tmp.write(rewritten)
            tmp.flush()
            os.fsync(tmp.fileno())
        return RewrittenStylesheet(Path(tmp.name), source, rewritten)

    def _rewrite_link(
        self, match: re.Match[str], stylesheet_path: Path, force_ssl: bool
    ) -> str:
        asset_link = match.group(0)
        url = match.group(1).strip()
        fragment = match.group(2) or ""
        query = match.group(3) or ""

        if not url or _EXTERNAL_RE.match(url):
            logger.debug("Leaving external reference alone: %s", asset_link)
            return asset_link

        public_root = self.settings.public_root
        path = path_for_url(url, stylesheet_path, public_root)
        relative = public_relative(path, public_root)
        if relative is None:
            logger.warning("Reference outside the asset root: %s", asset_link)
            return asset_link

        selector = self.rewriter.selector
        if not self.rewriter.is_remote(path, relative):
            host = selector.asset_host(relative, None, False, force_ssl)
            return f"url({host}{relative}{fragment}{query})"

        if path.is_file():
            key = self.rewriter.key_cache.get(path, self.settings.key_prefix)
            host = selector.asset_host(relative, None, True, force_ssl)
            return f"url({host}/{key}{relative}{fragment}{query})"

        logger.warning("Could not extract path: %s", path)
        return asset_link


def iter_stylesheets(settings: Settings) -> Iterator[Path]:
    """Every ``*.css`` file below the stylesheets directory."""
    root = settings.stylesheets_root
    if not root.is_dir():
        return iter(())
    return iter(sorted(root.rglob("*.css")))
