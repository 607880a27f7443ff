"""Organizer configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.types import SizeThresholds, TimeAttribute


class OrganizerSettings(BaseSettings):
    """Defaults loaded from ``FILE_ORGANIZER_*`` environment variables."""

    time_attribute: TimeAttribute = TimeAttribute.CREATION
    small_mb: int = Field(default=1, ge=0, description="Small threshold in MB")
    medium_mb: int = Field(default=10, ge=0, description="Medium threshold in MB")
    workers: int = Field(default=1, ge=1, description="Worker threads")

    @property
    def thresholds(self) -> SizeThresholds:
        """Size thresholds in bytes."""
        return SizeThresholds.from_megabytes(self.small_mb, self.medium_mb)

    model_config = SettingsConfigDict(
        env_prefix="FILE_ORGANIZER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unrelated entries in .env
    )


def get_settings() -> OrganizerSettings:
    """Load settings from the environment."""
    return OrganizerSettings()
