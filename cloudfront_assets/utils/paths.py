"""Map asset references onto files below the asset root."""

from __future__ import annotations

import os
from pathlib import Path


def strip_query(source: str) -> str:
    return source.split("?", 1)[0].split("#", 1)[0]


def resolve_source(public_path: Path, source: str) -> Path:
    """Absolute local path for a root-relative asset reference."""
    relative = strip_query(source).lstrip("/")
    return Path(os.path.normpath(public_path / relative))


def path_for_url(url: str, stylesheet_path: Path, public_path: Path) -> Path:
    if url.startswith("/"):
        # absolute to public path
        return resolve_source(public_path, url)
    # relative to the stylesheet
    return Path(os.path.normpath(stylesheet_path.parent / url))


def public_relative(path: Path, public_path: Path) -> str | None:
    """``/``-prefixed path of ``path`` below ``public_path``, or None outside it."""
    try:
        relative = path.relative_to(public_path)
    except ValueError:
        return None
    return "/" + relative.as_posix()
