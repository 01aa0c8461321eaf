"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (JUMBLEPROXY__SERVER__PORT=9000)
  2. jumbleproxy.yaml       (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional; all fields have sensible defaults. The GitHub
token is normally supplied through ``JUMBLEPROXY__GITHUB__TOKEN``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, SecretStr
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_CACHE_DIR = platformdirs.user_cache_dir("jumbleproxy")
_DEFAULT_DB_PATH = str(Path(_DEFAULT_CACHE_DIR) / "previews.db")


def _find_config_file() -> str | None:
    """Return the path of the first jumbleproxy.yaml found, or None."""
    candidates = [
        Path("jumbleproxy.yaml"),
        Path(platformdirs.user_config_dir("jumbleproxy")) / "jumbleproxy.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    shutdown_grace_seconds: int = 10


class CorsSettings(BaseModel):
    allow_origin: str = "*"


class GitHubSettings(BaseModel):
    token: SecretStr | None = None
    api_url: str = "https://api.github.com"
    timeout_seconds: float | None = 30.0


class ForwarderSettings(BaseModel):
    # None disables the timeout entirely
    timeout_seconds: float | None = 30.0
    follow_redirects: bool = True


class CacheSettings(BaseModel):
    ttl_seconds: int = 3600
    db_path: str = _DEFAULT_DB_PATH
    cleanup_interval_minutes: int = 30


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: JUMBLEPROXY__CACHE__TTL_SECONDS=600
        env_prefix="JUMBLEPROXY__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    server: ServerSettings = ServerSettings()
    cors: CorsSettings = CorsSettings()
    github: GitHubSettings = GitHubSettings()
    forwarder: ForwarderSettings = ForwarderSettings()
    cache: CacheSettings = CacheSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
