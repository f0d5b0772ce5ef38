"""Configuration for the application."""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineConfig(BaseSettings):
    """Configuration for rule evaluation."""

    model_config = SettingsConfigDict(env_prefix="AUTOMON_", env_file=".env", extra="ignore")

    identifier_prefix: str = Field(default="s", description="Letter prepended to sensor commands in expressions")
    identifier_matching: Literal["strict", "coarse"] = Field(
        default="strict", description="How identifiers are extracted from rule text (strict or coarse)"
    )
    coarse_token_width: int = Field(default=4, ge=1, description="Command code width used by coarse matching")
    min_sensor_updates: int = Field(default=1, ge=0, description="Updates every sensor must report before evaluation")

    @field_validator("identifier_prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        """Prefix must be a single letter or underscore so identifiers stay valid."""
        if len(v) != 1 or not (v.isalpha() or v == "_"):
            raise ValueError(f"identifier_prefix must be a single non-numeric letter, got {v!r}")
        return v


class LoggingConfig(BaseSettings):
    """Configuration for logging."""

    model_config = SettingsConfigDict(env_prefix="LOG_", env_file=".env", extra="ignore")

    level: str = Field(default="INFO", description="Minimum level for console output")
    file: str | None = Field(default=None, description="Optional log file path")
    rotation: str = Field(default="100 MB", description="Log file rotation threshold")
    retention: str = Field(default="30 days", description="How long rotated files are kept")
    compression: str = Field(default="zip", description="Compression for rotated files")


class AppConfig(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    engine: EngineConfig = Field(default_factory=EngineConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
