"""weblist configuration, Pydantic BaseSettings loaded from env and .env."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    app_name: str = "weblist"
    debug: bool = False
    log_level: str = "INFO"

    # Network
    host: str = "127.0.0.1"
    port: int = 8080
    shutdown_grace_seconds: int = 5

    # Served tree
    root_dir: str = "."
    exclude: Annotated[list[str], NoDecode] = []
    recursive_mtime: bool = False
    binary_cache_size: int = 1000  # 0 disables the cache

    # Auth: an empty password disables authentication entirely
    auth: str = ""
    auth_user: str = "weblist"
    session_secret: str = ""  # generated at startup when empty
    session_ttl_seconds: int = 24 * 3600
    csrf_ttl_seconds: int = 5 * 60
    insecure_cookies: bool = False

    # Login throttling (per remote address)
    login_rate_per_second: float = 5.0
    login_burst: int = 5
    login_bucket_ttl_seconds: int = 10 * 60

    # General request throttling (per remote address, 0 disables)
    request_rate_per_second: float = 50.0
    request_burst: int = 50

    # Optional features
    enable_multi_select: bool = False
    enable_upload: bool = False
    upload_max_size: int = 64 * 1024 * 1024
    upload_overwrite: bool = False

    # Presentation
    title: str = ""
    theme: str = "light"
    hide_footer: bool = False
    custom_footer: str = ""
    brand_name: str = ""
    brand_color: str = ""

    @property
    def auth_enabled(self) -> bool:
        return bool(self.auth)

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        env_prefix="WEBLIST_",
        extra="ignore",
    )

    @field_validator("exclude", mode="before")
    @classmethod
    def assemble_exclude(cls, value: list[str] | str | None) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            if value.startswith("["):
                return json.loads(value)
            return [p.strip() for p in value.split(",") if p.strip()]
        return value

    @field_validator("theme")
    @classmethod
    def check_theme(cls, value: str) -> str:
        value = value.lower()
        if value not in ("light", "dark"):
            raise ValueError("theme must be 'light' or 'dark'")
        return value

    @field_validator("brand_color")
    @classmethod
    def normalize_brand_color(cls, value: str) -> str:
        if value and not value.startswith("#"):
            return "#" + value
        return value

    @model_validator(mode="after")
    def _resolve_root(self) -> "Settings":
        """Ensure the served root is absolute."""
        self.root_dir = str(Path(self.root_dir).expanduser().resolve())
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
