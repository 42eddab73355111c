"""Configuration settings for the relationship network editor."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import model_validator
from pathlib import Path


class Settings(BaseSettings):
    """Application configuration settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra fields from .env
    )

    # Canonical snapshot shipped with the project
    SNAPSHOT_PATH: Path = Path("data/network.sqlite")

    # Exported snapshots
    EXPORT_DIR: Path = Path("exports")
    EXPORT_PREFIX: str = "network"
    EXPORT_SUFFIX: str = ".sqlite"

    # Character defaults
    DEFAULT_CHARACTER_COLOR: str = "#ffd700"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Reports
    REPORT_PATH: Path = Path(".project/network_report.md")

    @model_validator(mode="after")
    def resolve_settings(self):
        """Normalize settings values."""
        if not self.EXPORT_SUFFIX.startswith("."):
            self.EXPORT_SUFFIX = f".{self.EXPORT_SUFFIX}"

        self.LOG_LEVEL = self.LOG_LEVEL.upper()

        if not self.DEFAULT_CHARACTER_COLOR:
            self.DEFAULT_CHARACTER_COLOR = "#ffd700"

        return self


# Global settings instance
settings = Settings()
