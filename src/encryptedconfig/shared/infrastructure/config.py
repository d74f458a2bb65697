"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables and .env file.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = Field(default="development", description="Environment (development/production)")
    log_level: str = Field(default="INFO", description="Logging level")
    log_redaction_enabled: bool = Field(default=True, description="Redact secret-looking values in logs")

    # Metatron
    metatron_enabled: str = Field(
        default="true",
        description="Enable flag; empty means enabled, anything but 'true' disables",
    )
    metatron_namespaces: str = Field(
        default="",
        description="Comma-separated namespaces resolved in addition to the root namespace",
    )
    metatron_reverse_profiles: bool = Field(
        default=False,
        description="Load the last active profile first instead of in declared order",
    )

    # Host environment
    spring_profiles_active: str = Field(
        default="",
        description="Comma-separated active profiles",
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env.lower() == "development"

    @property
    def is_metatron_enabled(self) -> bool:
        """Empty string counts as the default (enabled)."""
        flag = self.metatron_enabled
        return flag == "" or flag.lower() == "true"

    @property
    def namespaces(self) -> List[str]:
        """
        Namespaces to resolve, in declaration order.

        The root namespace ("") is always first. Every other entry is
        normalized to start with "/" and empty entries are dropped.

        Example:
            >>> Settings(metatron_namespaces="foo,,/bar").namespaces
            ['', '/foo', '/bar']
        """
        namespaces = [""]
        for entry in self.metatron_namespaces.split(","):
            if not entry:
                continue
            namespaces.append(entry if entry.startswith("/") else "/" + entry)
        return namespaces

    @property
    def active_profiles(self) -> List[str]:
        return [p.strip() for p in self.spring_profiles_active.split(",") if p.strip()]


# Global settings instance
settings = Settings()
