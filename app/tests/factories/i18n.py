"""Test data factories for i18n testing.

Provides deterministic builders for:
- I18nSettings
- Resource bundles
- Pre-populated ResourceStore / Translator / I18n instances
"""

from typing import Any, Dict, Optional

from i18n_core.configuration import I18nSettings
from i18n_core.events import DiagnosticsChannel
from i18n_core.i18n import (
    I18n,
    Interpolator,
    LanguageUtils,
    PluralResolver,
    PostProcessorRegistry,
    ResourceStore,
    Translator,
)


def make_settings(**overrides: Any) -> I18nSettings:
    """Create I18nSettings with test-friendly defaults.

    Defaults: fallback chain ["en"], one "common" namespace, no retry delay.
    """
    values: Dict[str, Any] = {
        "fallback_lng": ["en"],
        "ns": ["common"],
        "default_ns": "common",
        "retry": {"max_retries": 2, "base_delay_seconds": 0, "max_delay_seconds": 0},
    }
    values.update(overrides)
    return I18nSettings(**values)


def make_resources() -> Dict[str, Dict[str, Dict[str, Any]]]:
    """Bundles for en, en-US, fr and ru in the "common" namespace."""
    return {
        "en": {
            "common": {
                "greeting": "Hello {{name}}",
                "farewell": "Goodbye",
                "item": "{{count}} item",
                "item_plural": "{{count}} items",
                "friend": "A friend",
                "friend_male": "A boyfriend",
                "friend_female": "A girlfriend",
                "friend_male_plural": "{{count}} boyfriends",
                "friend_female_plural": "{{count}} girlfriends",
                "nav": {"home": "Home", "about": "About us"},
                "list": ["one", "two", "{{name}}"],
                "nested": "Say: $t(farewell)",
                "welcome": "$t(greeting, {\"name\": \"{{user}}\"})!",
                "loop": "again $t(loop)",
                "fanout": "$t(fanout)$t(fanout)$t(fanout)$t(fanout)",
                "ping": "ping $t(pong)",
                "pong": "pong $t(ping)",
                "html": "Value: {{value}}",
            },
        },
        "en-US": {
            "common": {"color": "color"},
        },
        "fr": {
            "common": {
                "greeting": "Bonjour {{name}}",
                "item": "{{count}} article",
                "item_plural": "{{count}} articles",
            },
        },
        "ru": {
            "common": {
                "apple_0": "{{count}} яблоко",
                "apple_1": "{{count}} яблока",
                "apple_2": "{{count}} яблок",
            },
        },
    }


def make_store(
    settings: Optional[I18nSettings] = None,
    resources: Optional[Dict[str, Dict[str, Dict[str, Any]]]] = None,
    diagnostics: Optional[DiagnosticsChannel] = None,
) -> ResourceStore:
    return ResourceStore(
        make_resources() if resources is None else resources,
        settings or make_settings(),
        diagnostics,
    )


def make_translator(
    settings: Optional[I18nSettings] = None,
    resources: Optional[Dict[str, Dict[str, Dict[str, Any]]]] = None,
    lng: Optional[str] = "en",
    diagnostics: Optional[DiagnosticsChannel] = None,
    post_processors: Optional[PostProcessorRegistry] = None,
) -> Translator:
    """Create a Translator over in-memory resources, language already set."""
    settings = settings or make_settings()
    language_utils = LanguageUtils(settings)
    translator = Translator(
        make_store(settings, resources, diagnostics),
        language_utils,
        PluralResolver(language_utils, settings.plural_separator, settings.compatibility_json),
        Interpolator(settings.interpolation, diagnostics=diagnostics),
        settings,
        post_processors,
        diagnostics,
    )
    translator.change_language(lng)
    return translator


def make_i18n(**kwargs: Any) -> I18n:
    """Create an I18n instance with test settings (not initialized)."""
    settings = kwargs.pop("settings", None) or make_settings()
    return I18n(settings, **kwargs)
