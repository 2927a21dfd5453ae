"""Configuration management using Pydantic Settings.

This module provides type-safe configuration with automatic environment
variable loading and validation.

The configuration is organized into logical groups:
- DatabaseConfig: Database connection and pooling settings
- LoggingConfig: Logging levels, files, and debugging options
- CacheConfig: Cache backend selection and per-entity TTLs (seconds)
- PaginationConfig: Default and maximum page sizes for listings
- PluginConfig: Plugin UI content fetching
- ComponentConfig: Derived component links (Sonar dashboard)
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseModel):
    """Database connection and pooling configuration."""

    url: str = "sqlite+aiosqlite:///data/db/devportal.db"
    echo: bool = False
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 1800


class LoggingConfig(BaseModel):
    """Logging configuration for console and file output."""

    console_level: str = "INFO"
    file_level: str = "DEBUG"
    log_file: Path = Path("devportal.log")
    real_time_debug: bool = True


class CacheTTLConfig(BaseModel):
    """Per-entity cache lifetimes in seconds."""

    landscape_list: float = 300.0
    landscape_by_id: float = 300.0
    landscape_by_name: float = 300.0
    landscape_search: float = 120.0
    landscape_by_project: float = 300.0
    component_list: float = 300.0
    component_by_id: float = 300.0
    component_health: float = 30.0
    team: float = 600.0
    component: float = 600.0
    plugin: float = 300.0
    user: float = 300.0
    default: float = 300.0


class CacheConfig(BaseModel):
    """Cache backend selection and housekeeping."""

    backend: Literal["memory", "none"] = "memory"
    enabled: bool = True
    default_ttl: float = 300.0
    max_entries: int = 10_000
    ttl: CacheTTLConfig = CacheTTLConfig()


class PaginationConfig(BaseModel):
    """Pagination defaults applied by the service layer."""

    default_page_size: int = 20
    max_page_size: int = 100
    team_components_page_size: int = 100


class PluginConfig(BaseModel):
    """Plugin UI content fetching configuration."""

    content_timeout: float = 30.0
    default_provider: str = "github"
    content_type: str = "text/typescript"


class ComponentConfig(BaseModel):
    """Component view enrichment configuration."""

    sonar_dashboard_url: str = "https://sonar.tools.sap/dashboard?id="


class Settings(BaseSettings):
    """Main application settings with environment variable support.

    Environment variables can be set using flat naming or nested naming:
    - Flat: DATABASE_URL, CONSOLE_LOG_LEVEL, CACHE_BACKEND
    - Nested: DATABASE__URL, LOGGING__CONSOLE_LEVEL, CACHE__BACKEND

    The .env file is automatically loaded for development convenience.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Nested configuration groups
    database: DatabaseConfig = DatabaseConfig()
    logging: LoggingConfig = LoggingConfig()
    cache: CacheConfig = CacheConfig()
    pagination: PaginationConfig = PaginationConfig()
    plugins: PluginConfig = PluginConfig()
    components: ComponentConfig = ComponentConfig()

    # Top-level settings
    data_dir: Path = Path("data")

    @model_validator(mode="before")
    @classmethod
    def transform_flat_env_vars(cls, data: Any) -> Any:
        """Transform flat environment variables to nested structure.

        Handles flat env vars (DATABASE_URL) and maps them to the
        nested structure expected by the models (database.url).
        """
        if not isinstance(data, dict):
            return data

        transformed: dict[str, dict[str, Any]] = {}

        group_mappings = {
            "database": {
                "database_url": "url",
                "database_echo": "echo",
                "database_pool_size": "pool_size",
                "database_max_overflow": "max_overflow",
                "database_pool_timeout": "pool_timeout",
                "database_pool_recycle": "pool_recycle",
            },
            "logging": {
                "console_log_level": "console_level",
                "file_log_level": "file_level",
                "log_file": "log_file",
                "log_real_time_debug": "real_time_debug",
            },
            "cache": {
                "cache_backend": "backend",
                "cache_enabled": "enabled",
                "cache_default_ttl": "default_ttl",
                "cache_max_entries": "max_entries",
            },
            "plugins": {
                "plugin_content_timeout": "content_timeout",
                "plugin_default_provider": "default_provider",
            },
            "components": {
                "sonar_dashboard_url": "sonar_dashboard_url",
            },
        }
        for group, mapping in group_mappings.items():
            for env_key, field_key in mapping.items():
                if env_key in data:
                    transformed.setdefault(group, {})[field_key] = data.pop(env_key)

        # Flat values win over defaults but merge with nested values
        for group, values in transformed.items():
            existing = data.get(group)
            if isinstance(existing, dict):
                data[group] = {**existing, **values}
            else:
                data[group] = values

        return data


# Singleton instance for application use
settings = Settings()
