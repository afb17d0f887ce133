"""Which local files have been published to remote storage."""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Protocol

from cloudfront_assets.utils.yaml_loader import load_yaml

logger = logging.getLogger(__name__)


class RemoteAssetIndex(Protocol):
    def __contains__(self, path: object) -> bool: ...


def _normalize(path: Path | str) -> str:
    return os.path.abspath(path)


class AssetIndex:
    """Set of absolute local paths known to exist in the bucket.

    The uploader owns the contents and may :meth:`refresh` them at any
    time; readers only ever see a complete snapshot.
    """

    def __init__(self, paths: Iterable[Path | str] = ()):
        self._lock = threading.Lock()
        self._paths: frozenset[str] = frozenset(_normalize(p) for p in paths)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, os.PathLike)):
            return False
        return _normalize(path) in self._paths

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._paths))

    def refresh(self, paths: Iterable[Path | str]) -> None:
        snapshot = frozenset(_normalize(p) for p in paths)
        with self._lock:
            self._paths = snapshot
        logger.info("Remote asset index refreshed with %d paths", len(snapshot))

    @classmethod
    def from_asset_dirs(cls, public_path: Path, asset_dirs: Iterable[str]) -> AssetIndex:
        """Every file under the recognized asset directories."""
        paths: list[Path] = []
        for name in asset_dirs:
            directory = public_path / name
            if not directory.is_dir():
                continue
            paths.extend(p for p in directory.rglob("*") if p.is_file())
        return cls(paths)

    @classmethod
    def from_manifest(cls, manifest: Path, public_path: Path) -> AssetIndex:
        """Load a YAML/JSON list of published paths.

        Relative entries are taken relative to ``public_path``.
        """
        data = load_yaml(manifest) or []
        if not isinstance(data, list):
            raise ValueError(f"Asset manifest must be a list of paths: {manifest}")
        paths = []
        for entry in data:
            entry = str(entry)
            if os.path.isabs(entry) and Path(entry).is_relative_to(public_path):
                paths.append(Path(entry))
            else:
                paths.append(public_path / entry.lstrip("/"))
        return cls(paths)
