"""Host settings read from environment variables.

These flags choose what the composition root registers; they are read once
at start-up. Example: ``API_BOILERPLATE_DISTRIBUTED_CACHE=redis``.
"""

from pathlib import Path
from typing import List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApplicationSettings(BaseSettings):
    """Feature flags and host configuration."""

    model_config = SettingsConfigDict(
        env_prefix="API_BOILERPLATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = Field("Development", description="Hosting environment name")
    log_level: str = Field("INFO", description="Logging level")
    log_file: Optional[Path] = Field(None, description="Optional rotating log file")
    cors_enabled: bool = Field(True, description="Register cross-origin policies")
    distributed_cache: Literal["memory", "redis"] = Field(
        "memory", description="Backend of the shared distributed cache"
    )
    redis_url: str = Field("redis://localhost:6379/0", description="Redis connection URL")
    redis_key_prefix: str = Field("api-boilerplate:", description="Prefix of every cache key in Redis")
    config_files: List[Path] = Field(
        default_factory=lambda: [Path("config/appsettings.yaml")],
        description="Configuration files merged in order",
    )

    @field_validator("log_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid logging level. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    def environment_config_file(self) -> Path:
        """Per-environment override next to the first configuration file."""
        base = self.config_files[0] if self.config_files else Path("config/appsettings.yaml")
        return base.with_name(f"{base.stem}.{self.environment.lower()}{base.suffix}")
