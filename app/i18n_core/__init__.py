"""i18n-core - translation resolution with fallback languages and async loading."""

from i18n_core.i18n import I18n, create_i18n
from i18n_core.configuration import I18nSettings

__all__ = ["I18n", "I18nSettings", "create_i18n"]
