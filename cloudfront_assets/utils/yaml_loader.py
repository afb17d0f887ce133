"""YAML loading for credential files and upload manifests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def load_yaml(path: Path) -> Any:
    """Parse a credentials file or upload manifest; JSON documents load too.

    Manifests are often produced on other platforms, so a UTF-8 BOM and
    CRLF/CR line endings are accepted. Raises ``FileNotFoundError`` for a
    missing file and ``yaml.YAMLError`` for unparseable content.
    """
    text = path.read_bytes().decode("utf-8-sig")
    return yaml.safe_load(text.replace("\r\n", "\n").replace("\r", "\n"))


def load_section(path: Path, section: str) -> Any:
    """Return ``data[section]`` when the file is keyed by section, else the whole document."""
    data = load_yaml(path)
    if isinstance(data, dict) and isinstance(data.get(section), dict):
        return data[section]
    return data
