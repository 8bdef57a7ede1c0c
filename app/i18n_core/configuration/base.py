"""Shared base classes for settings modules."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class I18nBaseSettings(BaseSettings):
    """Base class for i18n-core settings.

    All settings classes inherit from this class to ensure consistent
    configuration behavior (env file loading, case sensitivity, and
    construction by field name in tests and factories).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )
