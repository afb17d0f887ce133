"""Tests for cloudfront_assets/services/asset_index.py and exclusions."""

from __future__ import annotations

import pytest

from cloudfront_assets.services.asset_index import AssetIndex
from cloudfront_assets.services.exclusions import SourceExclusions


class TestAssetIndex:
    def test_membership_accepts_str_and_path(self, public):
        """Both str and Path lookups hit the same entry."""
        image = public / "images" / "image.png"
        index = AssetIndex([image])
        assert image in index
        assert str(image) in index
        assert public / "images" / "other.png" not in index

    def test_paths_are_normalized(self, public):
        """Dot segments are collapsed before lookup."""
        index = AssetIndex([public / "images" / "image.png"])
        assert public / "stylesheets" / ".." / "images" / "image.png" in index

    def test_non_path_is_not_member(self):
        assert 42 not in AssetIndex(["/tmp/a.png"])

    def test_refresh_replaces_contents(self, public):
        """Refresh swaps in a whole new snapshot."""
        index = AssetIndex([public / "images" / "image.png"])
        index.refresh([public / "javascripts" / "application.js"])
        assert public / "images" / "image.png" not in index
        assert public / "javascripts" / "application.js" in index
        assert len(index) == 1

    def test_from_asset_dirs(self, public):
        """Only files under the recognized asset dirs are published."""
        index = AssetIndex.from_asset_dirs(public, ["images", "javascripts", "stylesheets"])
        assert public / "images" / "image.png" in index
        assert public / "javascripts" / "application.js" in index
        assert public / "stylesheets" / "style.css" in index
        assert public / "strange_asset" / "image.png" not in index

    def test_from_asset_dirs_skips_missing_dirs(self, public):
        """Configured dirs that do not exist are ignored."""
        index = AssetIndex.from_asset_dirs(public, ["images", "fonts"])
        assert list(index) == [str(public / "images" / "image.png")]

    def test_from_manifest(self, public, tmp_path):
        """Root-relative, relative and absolute entries all resolve."""
        manifest = tmp_path / "uploaded.yml"
        manifest.write_text(
            "- /images/image.png\n"
            "- javascripts/application.js\n"
            f"- {public / 'stylesheets' / 'style.css'}\n"
        )
        index = AssetIndex.from_manifest(manifest, public)
        assert len(index) == 3
        assert public / "images" / "image.png" in index
        assert public / "javascripts" / "application.js" in index
        assert public / "stylesheets" / "style.css" in index

    def test_from_json_manifest(self, public, tmp_path):
        """A JSON array is accepted as a manifest."""
        manifest = tmp_path / "uploaded.json"
        manifest.write_text('["/images/image.png"]')
        assert public / "images" / "image.png" in AssetIndex.from_manifest(manifest, public)

    def test_manifest_with_bom_and_crlf(self, public, tmp_path):
        """Manifests written on Windows still load."""
        manifest = tmp_path / "uploaded.yml"
        manifest.write_bytes(b"\xef\xbb\xbf- /images/image.png\r\n- /javascripts/application.js\r\n")
        index = AssetIndex.from_manifest(manifest, public)
        assert len(index) == 2
        assert public / "images" / "image.png" in index

    def test_empty_manifest(self, public, tmp_path):
        """An empty manifest gives an empty index."""
        manifest = tmp_path / "uploaded.yml"
        manifest.write_text("")
        assert len(AssetIndex.from_manifest(manifest, public)) == 0

    def test_manifest_must_be_a_list(self, public, tmp_path):
        """A mapping is rejected."""
        manifest = tmp_path / "uploaded.yml"
        manifest.write_text("images: [image.png]\n")
        with pytest.raises(ValueError):
            AssetIndex.from_manifest(manifest, public)


class TestSourceExclusions:
    def test_no_patterns(self):
        assert SourceExclusions().is_excluded("/images/image.png") is False

    def test_glob_match(self):
        """Patterns match root-relative sources."""
        exclusions = SourceExclusions(["images/*.svg"])
        assert exclusions.is_excluded("/images/logo.svg") is True
        assert exclusions.is_excluded("/images/logo.png") is False

    def test_leading_slash_in_pattern(self):
        """Leading slashes in patterns are ignored."""
        assert SourceExclusions(["/javascripts/*"])("/javascripts/app.js") is True

    def test_query_is_ignored(self):
        """Cache-busting queries do not defeat an exclusion."""
        assert SourceExclusions(["images/*.svg"]).is_excluded("/images/a.svg?v=1") is True
