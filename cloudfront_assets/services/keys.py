"""Content-derived cache-busting keys for local asset files."""

from __future__ import annotations

import hashlib
import os
import threading
from collections import OrderedDict
from pathlib import Path

KEY_LENGTH = 9


def key_for_path(path: Path | str, prefix: str = "") -> str:
    """Return ``prefix`` + the first nine hex chars of the file's MD5.

    Identical bytes always give the identical key, wherever the file lives.
    Raises ``FileNotFoundError`` when ``path`` does not exist.
    """
    digest = hashlib.md5(  # nosec B324 - used for non-security fingerprinting
        Path(path).read_bytes(),
        usedforsecurity=False,
    ).hexdigest()
    return f"{prefix}{digest[:KEY_LENGTH]}"


class AssetKeyCache:
    """Bounded LRU memo around :func:`key_for_path`.

    Entries are keyed on the file's mtime and size as well as its path, so
    an edited file gets a fresh key without restarting the process.
    """

    def __init__(self, maxsize: int = 1024):
        self.maxsize = maxsize
        self._entries: OrderedDict[tuple, str] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def get(
        self, path: Path | str, prefix: str = "", stat: os.stat_result | None = None
    ) -> str:
        if self.maxsize <= 0:
            return key_for_path(path, prefix)
        stat = stat or os.stat(path)
        cache_key = (os.fspath(path), stat.st_mtime_ns, stat.st_size, prefix)
        with self._lock:
            key = self._entries.get(cache_key)
            if key is not None:
                self._entries.move_to_end(cache_key)
                return key
        key = key_for_path(path, prefix)
        with self._lock:
            self._entries[cache_key] = key
            self._entries.move_to_end(cache_key)
            while len(self._entries) > self.maxsize:
                self._entries.popitem(last=False)
        return key

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
