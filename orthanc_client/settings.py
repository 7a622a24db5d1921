"""
Configuration settings for the Orthanc client.

This module provides a settings class with support for loading configuration
from TOML files and environment variables. The Client constructor never reads
these settings on its own; use ``Client.from_settings`` to build a client
from them.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

DEFAULT_TIMEOUT = 600.0


class Settings(BaseSettings):
    """Main settings class for the Orthanc client.

    Values come from ``ORTHANC_*`` environment variables first, then from
    ``orthanc.toml`` and ``orthanc.custom.toml`` in the working directory.
    """

    model_config = SettingsConfigDict(
        toml_file=["orthanc.toml", "orthanc.custom.toml"], env_prefix="ORTHANC_", extra="ignore"
    )

    # Server settings
    server: str = "http://localhost:8042"
    username: str | None = None
    password: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    log_requests: bool = False

    # Logging settings
    log_level: str = "INFO"
    log_to_file: bool = False
    log_dir: str | None = None  # If None, will use ~/.orthanc_client/logs
    log_rotation: str = "20 MB"
    log_retention: str = "1 week"
    log_format: str | None = None  # Use default if None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the sources for settings.

        Priority order: constructor arguments, environment variables, then TOML config files
        """
        return init_settings, env_settings, TomlConfigSettingsSource(settings_cls)

    @property
    def has_auth(self) -> bool:
        """Whether both halves of the Basic credentials are configured."""
        return self.username is not None and self.password is not None

    def get_log_dir(self) -> Path:
        """Get the log directory path.

        Returns:
            Path to the log directory. Uses log_dir if specified,
            otherwise ``~/.orthanc_client/logs``.
        """
        if self.log_dir:
            return Path(self.log_dir)
        return Path.home() / ".orthanc_client" / "logs"


@lru_cache
def get_settings() -> Settings:
    """Get the settings instance, with caching.

    Returns:
        Cached Settings instance
    """
    return Settings()
