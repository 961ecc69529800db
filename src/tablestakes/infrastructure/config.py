"""Configuration management for tablestakes."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class IOConfig(BaseModel):
    """Delimited file I/O configuration."""

    encoding: str = Field(default="utf-8", description="Text encoding for table files")
    delimiter: str = Field(
        default="\t", min_length=1, max_length=1, description="Field delimiter"
    )

    @field_validator("delimiter")
    @classmethod
    def _reject_newline(cls, value: str) -> str:
        if value in ("\n", "\r"):
            raise ValueError("delimiter cannot be a line terminator")
        return value


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="console", description="Log format")


class Config(BaseSettings):
    """Main configuration for tablestakes."""

    model_config = SettingsConfigDict(
        env_prefix="TABLESTAKES_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    io: IOConfig = Field(default_factory=IOConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
