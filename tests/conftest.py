"""Shared fixtures: a small public asset tree and settings pointing at it."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from cloudfront_assets.config import Settings
from cloudfront_assets.services.asset_index import AssetIndex
from cloudfront_assets.services.rewriter import AssetPathRewriter

TESTS_ROOT = Path(__file__).parent

STYLESHEET_LINES = [
    "body { background-image: url(/images/image.png); }",
    "body { background-image: url('/images/image.png'); }",
    'body { background-image: url("/images/image.png"); }',
    "body { background-image: url(../images/image.png); }",
    "body { background-image: url('../images/image.png'); }",
    'body { background-image: url("../images/image.png"); }',
    "body { background-image: url(/images/image.png#223145); }",
    "body { background-image: url(/strange_asset/image.png#223145); }",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep CLOUDFRONT_ASSETS_* variables from the host out of the tests."""
    for name in list(os.environ):
        if name.startswith("CLOUDFRONT_ASSETS_"):
            monkeypatch.delenv(name)


@pytest.fixture
def public(tmp_path) -> Path:
    root = tmp_path / "public"
    (root / "images").mkdir(parents=True)
    (root / "javascripts").mkdir()
    (root / "stylesheets").mkdir()
    (root / "strange_asset").mkdir()

    (root / "images" / "image.png").write_bytes(b"")
    (root / "javascripts" / "application.js").write_bytes(b"hello")
    (root / "strange_asset" / "image.png").write_bytes(b"")
    (root / "stylesheets" / "style.css").write_text(
        "\n".join(STYLESHEET_LINES) + "\n", encoding="utf-8"
    )
    return root


@pytest.fixture
def make_settings(public):
    def _make(**overrides) -> Settings:
        values = {
            "enabled": True,
            "cname": "assethost.com",
            "bucket": "bucketname",
            "key_prefix": "",
            "public_path": public,
            "asset_host_without_cdn": "www.example.com",
            "timestamp_fallback": False,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def settings(make_settings) -> Settings:
    return make_settings()


@pytest.fixture
def index(public) -> AssetIndex:
    return AssetIndex(
        [
            public / "images" / "image.png",
            public / "javascripts" / "application.js",
        ]
    )


@pytest.fixture
def rewriter(settings, index) -> AssetPathRewriter:
    return AssetPathRewriter(settings, index)


@pytest.fixture
def stylesheet_lines() -> list[str]:
    return list(STYLESHEET_LINES)
