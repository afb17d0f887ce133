"""Asset hosting settings, validated once when they are applied."""

from __future__ import annotations

import json
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import (
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from cloudfront_assets.services.hosts import CdnHost, parse_host
from cloudfront_assets.utils.yaml_loader import load_section


class ConfigurationError(RuntimeError):
    """Raised when the asset hosting setup cannot be used."""


@dataclass(frozen=True)
class S3Credentials:
    access_key_id: str
    secret_access_key: str


def load_s3_config(path: Path, environment: str) -> S3Credentials:
    """Read storage credentials, optionally nested under an environment key."""
    if not path.is_file():
        raise ValueError(f"s3_config file not found: {path}")
    try:
        data = load_section(path, environment)
    except yaml.YAMLError as exc:
        raise ValueError(f"s3_config is not valid YAML: {path}") from exc
    except OSError as exc:
        raise ValueError(f"s3_config could not be read: {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"s3_config has no settings for {environment!r}: {path}")
    missing = [
        key
        for key in ("access_key_id", "secret_access_key")
        if not isinstance(data.get(key), str) or not data[key].strip()
    ]
    if missing:
        raise ValueError(f"s3_config is missing {', '.join(missing)}: {path}")
    return S3Credentials(data["access_key_id"], data["secret_access_key"])


class Settings(BaseSettings):
    """Process-wide asset hosting configuration. Immutable once built."""

    model_config = SettingsConfigDict(
        env_prefix="CLOUDFRONT_ASSETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    enabled: bool = False

    # CDN host: literal name, "%d" shard template, or a resolver callable
    cname: str | None = None
    host_resolver: Callable[..., str] | None = Field(default=None, exclude=True)
    shard_count: int = 4

    # Storage
    bucket: str | None = None
    storage_domain: str = "s3.amazonaws.com"
    s3_config: Path | None = None
    environment: str = "development"

    # URL layout
    key_prefix: str = ""
    plain_prefix: str = ""
    ssl_prefix: str = ""
    gzip_prefix: str = "gz"
    gzip_extensions: Annotated[list[str], NoDecode] = ["js", "css"]

    # Local assets
    public_path: Path = Path("public")
    stylesheets_dir: Path | None = None
    asset_dirs: Annotated[list[str], NoDecode] = [
        "images",
        "javascripts",
        "stylesheets",
    ]
    asset_host_without_cdn: str = ""
    exclude_patterns: Annotated[list[str], NoDecode] = []
    timestamp_fallback: bool = True
    key_cache_size: int = 1024

    # Observability
    log_level: str = "INFO"

    @field_validator(
        "gzip_extensions", "asset_dirs", "exclude_patterns", mode="before"
    )
    @classmethod
    def parse_list(
        cls, value: str | list[str] | tuple[str, ...] | None, info: ValidationInfo
    ) -> list[str]:
        """Accept ``js,css`` or ``["js", "css"]`` for the list settings.

        Extensions lose any leading dot and are lowercased (``.JS`` -> ``js``);
        asset directory names lose surrounding slashes.
        """
        if value is None:
            return []
        if isinstance(value, str):
            raw = value.strip()
            items: list = []
            if raw.startswith("["):
                try:
                    items = json.loads(raw)
                except json.JSONDecodeError:
                    items = raw.strip("[]").split(",")
            elif raw:
                items = raw.split(",")
        else:
            items = list(value)

        cleaned = [str(item).strip().strip("\"'") for item in items]
        if info.field_name == "gzip_extensions":
            cleaned = [item.lstrip(".").lower() for item in cleaned]
        elif info.field_name == "asset_dirs":
            cleaned = [item.strip("/") for item in cleaned]
        return [item for item in cleaned if item]

    @model_validator(mode="after")
    def check_storage(self) -> Settings:
        if self.enabled and not self.bucket:
            raise ValueError("bucket must be set when CDN hosting is enabled")
        if self.shard_count < 1:
            raise ValueError("shard_count must be at least 1")
        if self.s3_config is not None:
            load_s3_config(self.s3_config, self.environment)
        return self

    @property
    def cdn_host(self) -> CdnHost | None:
        return parse_host(self.cname, self.host_resolver, self.shard_count)

    @property
    def bucket_host(self) -> str:
        return f"{self.bucket}.{self.storage_domain}"

    @property
    def public_root(self) -> Path:
        """Absolute, normalised asset root."""
        return Path(os.path.abspath(self.public_path))

    @property
    def stylesheets_root(self) -> Path:
        if self.stylesheets_dir is not None:
            return Path(os.path.abspath(self.stylesheets_dir))
        return self.public_root / "stylesheets"


def configure(**overrides: Any) -> Settings:
    """Build settings from the environment plus ``overrides``.

    Any validation problem is fatal: the process must not serve assets
    with a broken hosting setup.
    """
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc
