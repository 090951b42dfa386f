"""
Configuration management using Pydantic for the print preview service.
Provides type-safe configuration with validation and environment variable support.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from common.constants import APIConstants, PipelineConstants, SessionConstants, SystemConstants

logger = logging.getLogger(__name__)


class PipelineConfig(BaseSettings):
    """Image pipeline limits."""

    max_upload_bytes: int = Field(
        default=PipelineConstants.MAX_UPLOAD_BYTES,
        ge=1,
        description="Maximum accepted upload size in bytes",
    )
    max_dimension: int = Field(
        default=PipelineConstants.MAX_DIMENSION,
        ge=PipelineConstants.MIN_DIMENSION,
        le=10000,
        description="Maximum output width and height in pixels",
    )
    brightness_delta: int = Field(
        default=PipelineConstants.BRIGHTNESS_DELTA,
        ge=0,
        le=PipelineConstants.CHANNEL_MAX,
        description="Amount added to each channel by the bright filter",
    )
    encode_quality: float = Field(
        default=PipelineConstants.ENCODE_QUALITY,
        ge=0.0,
        le=1.0,
        description="JPEG quality on a [0, 1] scale",
    )

    model_config = SettingsConfigDict(env_prefix="PREVIEW_PIPELINE_", extra="ignore")


class SessionConfig(BaseSettings):
    """Image session storage configuration."""

    max_sessions: int = Field(
        default=SessionConstants.DEFAULT_MAX_SESSIONS,
        ge=SessionConstants.MIN_SESSIONS,
        le=SessionConstants.MAX_SESSIONS,
        description="Maximum number of image sessions kept in memory",
    )

    model_config = SettingsConfigDict(env_prefix="PREVIEW_SESSION_", extra="ignore")


class APIConfig(BaseSettings):
    """API configuration."""

    host: str = Field(default=APIConstants.DEFAULT_HOST, description="API host address")
    port: int = Field(default=APIConstants.DEFAULT_PORT, ge=1, le=65535, description="API port")
    cors_enabled: bool = Field(default=True, description="Enable CORS")
    cors_origins: List[str] = Field(default=["*"], description="CORS allowed origins")

    model_config = SettingsConfigDict(env_prefix="PREVIEW_API_", extra="ignore")


class SystemConfig(BaseSettings):
    """System configuration."""

    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default=SystemConstants.LOG_LEVEL_DEFAULT, description="Logging level")
    log_file: Optional[str] = Field(default=None, description="Log file path")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    model_config = SettingsConfigDict(env_prefix="PREVIEW_SYSTEM_", extra="ignore")


class Settings(BaseSettings):
    """Main application settings."""

    # Sub-configurations
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    api: APIConfig = Field(default_factory=APIConfig)
    system: SystemConfig = Field(default_factory=SystemConfig)

    # Environment
    environment: str = Field(
        default="production", description="Environment (development, staging, production)"
    )

    # Config file support
    config_file: Optional[str] = Field(default=None, description="Path to YAML config file")

    @model_validator(mode="before")
    @classmethod
    def load_config_file(cls, values):
        """Load configuration from YAML file if specified."""
        if not isinstance(values, dict):
            return values

        config_file = values.get("config_file") or os.getenv("PREVIEW_CONFIG_FILE")

        if config_file and Path(config_file).exists():
            import yaml

            try:
                with open(config_file, "r") as f:
                    file_config = yaml.safe_load(f)
                    if file_config:
                        # Merge file config with values (env vars take precedence)
                        for key, value in file_config.items():
                            if key not in values or values[key] is None:
                                values[key] = value
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config file {config_file}: {e}")

        return values

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value."""
        valid_envs = ["development", "staging", "production", "test"]
        if v not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of {valid_envs}")
        return v

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        return self.model_dump(exclude_none=True)

    def save_to_file(self, path: str) -> None:
        """Save current configuration to YAML file."""
        import yaml

        config_dict = self.to_dict()
        with open(path, "w") as f:
            yaml.dump(config_dict, f, default_flow_style=False)

    model_config = SettingsConfigDict(
        env_prefix="PREVIEW_",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings object with validated configuration
    """
    return Settings()


# Convenience function to reload settings (clears cache)
def reload_settings() -> Settings:
    """
    Reload settings, clearing the cache.

    Returns:
        Fresh Settings object
    """
    get_settings.cache_clear()
    return get_settings()
