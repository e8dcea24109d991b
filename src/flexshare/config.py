"""Configuration file loading and validation."""

import logging
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, available_timezones

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from .consts import LOG_FILE_DEFAULT, MAX_PATCH_DEPTH_DEFAULT, TEMPLATE_CACHE_SIZE_DEFAULT
from .errors import ConfigException

logger = logging.getLogger(__name__)


class RenderConfig(BaseModel):
    """Template rendering configuration."""

    max_patch_depth: int = Field(default=MAX_PATCH_DEPTH_DEFAULT, ge=1, le=256)
    cache_size: int = Field(default=TEMPLATE_CACHE_SIZE_DEFAULT, ge=0)


class WebConfig(BaseModel):
    """Web service configuration."""

    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, ge=1, le=65535)
    reload: bool = Field(default=False)


class Config(BaseSettings):
    """Application configuration."""

    language: str = Field(default="en")
    timezone: str = Field(default="UTC")
    log_file: str = Field(default=LOG_FILE_DEFAULT)
    templates_dir: Optional[str] = None

    render: RenderConfig = Field(default_factory=RenderConfig)
    web: WebConfig = Field(default_factory=WebConfig)

    model_config = SettingsConfigDict(
        env_prefix="FLEXSHARE_",
        env_nested_delimiter="__",
    )

    @field_validator("timezone", mode="before")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        if v not in available_timezones():
            raise ValueError(
                f"Invalid timezone configuration: '{v}'. "
                "Please use a valid IANA timezone identifier"
            )
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls),
        )

    @classmethod
    def load_from_file(cls, config_path: str) -> "Config":
        """Load configuration from specified path."""
        path = Path(config_path)
        if not path.exists():
            raise ConfigException(f"Configuration file not found: {config_path}")

        class _Config(cls):
            model_config = SettingsConfigDict(
                toml_file=str(path),
                env_prefix="FLEXSHARE_",
                env_nested_delimiter="__",
            )

        try:
            return _Config()
        except ValidationError as e:
            error_lines = ["Configuration validation failed:"]
            for error in e.errors():
                loc = " -> ".join(str(item) for item in error["loc"])
                error_lines.append(f"  - {loc}: {error['msg']}")
            raise ConfigException("\n".join(error_lines)) from e
        except ValueError as e:
            raise ConfigException(f"Invalid TOML syntax in {config_path}: {e}") from e

    @classmethod
    def load_or_default(cls, config_path: str | None) -> "Config":
        """Load ``config_path`` when it exists, otherwise use env and defaults."""
        if config_path and Path(config_path).exists():
            return cls.load_from_file(config_path)
        logger.debug("No configuration file at %s, using defaults", config_path)
        try:
            return cls()
        except ValidationError as e:
            raise ConfigException(f"Configuration validation failed: {e}") from e

    def get_timezone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)
