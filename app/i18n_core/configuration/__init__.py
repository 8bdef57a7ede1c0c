"""Configuration module - public API.

Centralized configuration for i18n-core using Pydantic BaseSettings.

Exports:
    settings: Singleton Settings instance (main configuration object)
    Settings: Main settings class (for testing/overrides)
    I18nSettings: Translation core settings (for building instances)
    InterpolationSettings: Placeholder syntax settings
    LoadRetrySettings: Backend retry policy settings

Example:
    ```python
    from i18n_core.configuration import I18nSettings

    i18n_settings = I18nSettings(fallback_lng=["en"], ns=["common"])
    ```
"""

from i18n_core.configuration.i18n import (
    I18nSettings,
    InterpolationSettings,
    LoadRetrySettings,
)
from i18n_core.configuration.settings import Settings, settings

__all__ = [
    "settings",
    "Settings",
    "I18nSettings",
    "InterpolationSettings",
    "LoadRetrySettings",
]
