"""
Engine configuration using Pydantic Settings.
"""

from functools import lru_cache
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FlagSettings(BaseSettings):
    """Feature flag engine settings."""

    model_config = SettingsConfigDict(
        env_prefix="FLAGKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json", description="json or text")

    # Composite strategies
    max_composite_depth: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum nesting depth for composite strategies",
    )

    # Validation
    large_list_threshold: int = Field(
        default=10000,
        ge=1,
        description="User ID list size that triggers a segment suggestion",
    )

    # Percentage rollouts
    default_stickiness: list[str] = Field(
        default=["user_id", "session_id"],
        min_length=1,
        description="Context attributes tried in order for bucketing",
    )

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        allowed = {"json", "text"}
        if v not in allowed:
            raise ValueError(f"log_format must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level = v.upper()
        if level not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return level


@lru_cache
def get_settings() -> FlagSettings:
    """Get cached settings instance."""
    return FlagSettings()
