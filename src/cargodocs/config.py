"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (CARGODOCS__SERVER__TRANSPORT=http)
  2. cargodocs.yaml         (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional. All fields have sensible defaults.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

CACHE_FILE_NAME = "docs-rs-mcp-cache.json"
_DEFAULT_CACHE_PATH = str(Path(tempfile.gettempdir()) / CACHE_FILE_NAME)


def _find_config_file() -> str | None:
    """Return the path of the first cargodocs.yaml found, or None."""
    candidates = [
        Path("cargodocs.yaml"),
        Path(platformdirs.user_config_dir("cargodocs")) / "cargodocs.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ServerSettings(BaseModel):
    transport: Literal["stdio", "http"] = "stdio"
    host: str = "127.0.0.1"
    port: int = 8080
    auth_enabled: bool = True
    auth_key: str = ""


class CacheSettings(BaseModel):
    # Shared by every server process on the machine; last writer wins.
    path: str = _DEFAULT_CACHE_PATH
    cleanup_interval_hours: int = Field(default=6, ge=1)


class ToolchainSettings(BaseModel):
    cargo_executable: str = "cargo"


class SearchSettings(BaseModel):
    default_limit: int = Field(default=50, ge=1)
    max_limit: int = Field(default=500, ge=1)


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: CARGODOCS__SERVER__PORT=9090
        env_prefix="CARGODOCS__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    server: ServerSettings = ServerSettings()
    cache: CacheSettings = CacheSettings()
    toolchain: ToolchainSettings = ToolchainSettings()
    search: SearchSettings = SearchSettings()
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
