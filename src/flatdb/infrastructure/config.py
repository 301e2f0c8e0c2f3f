"""Configuration management for the data manager."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Capacity of one catalog record; limits below may only tighten it.
CATALOG_MAX_COLUMNS = 128
CATALOG_NAME_BYTES = 128


class StorageConfig(BaseModel):
    """Storage configuration."""

    data_dir: Path = Field(default=Path("data"), description="Directory holding catalog and row stores")
    catalog_file: str = Field(
        default="__tables_data.dat", min_length=1, description="Schema catalog file name"
    )
    temp_prefix: str = Field(
        default="__database_Temporary_",
        min_length=1,
        description="Prefix of temporary row stores built by UPDATE/DELETE",
    )
    encoding: str = Field(default="utf-8", description="Text encoding of row store files")

    @property
    def catalog_path(self) -> Path:
        """Full path of the schema catalog file."""
        return self.data_dir / self.catalog_file


class LimitsConfig(BaseModel):
    """Validation bounds for schemas and rows."""

    max_columns: int = Field(
        default=CATALOG_MAX_COLUMNS,
        ge=1,
        le=CATALOG_MAX_COLUMNS,
        description="Maximum number of columns per table",
    )
    max_name_bytes: int = Field(
        default=CATALOG_NAME_BYTES - 1,
        ge=1,
        le=CATALOG_NAME_BYTES - 1,
        description="Maximum UTF-8 length of table and column names",
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="console", description="Log format")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="flatdb", description="Service name for tracing")
    metrics_port: int = Field(default=8001, ge=1, le=65535, description="Prometheus metrics port")


class Config(BaseSettings):
    """Main configuration for the data manager."""

    model_config = SettingsConfigDict(
        env_prefix="FLATDB_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    storage: StorageConfig = Field(default_factory=StorageConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    def ensure_directories(self) -> None:
        """Ensure the data directory exists."""
        self.storage.data_dir.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    config = Config()
    config.ensure_directories()
    return config
