"""Tests for i18n_core.configuration module."""

import pytest
from pydantic import ValidationError

from i18n_core.configuration import I18nSettings, InterpolationSettings, LoadRetrySettings, Settings


class TestI18nSettings:
    """Tests for I18nSettings."""

    def test_defaults(self):
        settings = I18nSettings()
        assert settings.fallback_lng == ["dev"]
        assert settings.ns == ["translation"]
        assert settings.default_ns == "translation"
        assert settings.lookup_order == "namespace"
        assert settings.interpolation.max_nesting_depth == 10

    def test_fallback_string_becomes_list(self):
        assert I18nSettings(fallback_lng="en").fallback_lng == ["en"]

    def test_fallback_false_disables_chain(self):
        assert I18nSettings(fallback_lng=False).fallback_lng == []

    def test_fallback_mapping(self):
        settings = I18nSettings(fallback_lng={"de-CH": ["fr"], "default": ["en"]})
        assert settings.fallback_lng["default"] == ["en"]

    def test_separator_false(self):
        assert I18nSettings(key_separator=False).key_separator is False

    def test_empty_separator_rejected(self):
        with pytest.raises(ValidationError):
            I18nSettings(ns_separator="")

    def test_empty_namespaces_rejected(self):
        with pytest.raises(ValidationError):
            I18nSettings(ns=[])

    def test_invalid_lookup_order_rejected(self):
        with pytest.raises(ValidationError):
            I18nSettings(lookup_order="random")

    def test_environment_aliases(self, monkeypatch):
        monkeypatch.setenv("I18N_LNG", "fr-CA")
        monkeypatch.setenv("I18N_NS", '["common", "admin"]')
        settings = I18nSettings()
        assert settings.lng == "fr-CA"
        assert settings.ns == ["common", "admin"]


class TestInterpolationSettings:
    """Tests for InterpolationSettings."""

    def test_empty_delimiter_rejected(self):
        with pytest.raises(ValidationError):
            InterpolationSettings(prefix="")

    def test_depth_must_be_positive(self):
        with pytest.raises(ValidationError):
            InterpolationSettings(max_nesting_depth=0)


class TestLoadRetrySettings:
    """Tests for LoadRetrySettings."""

    @pytest.mark.parametrize("attempt,expected", [(1, 0.25), (2, 0.5), (3, 1.0), (6, 5.0)])
    def test_delay_for(self, attempt, expected):
        assert LoadRetrySettings().delay_for(attempt) == expected

    def test_negative_retries_rejected(self):
        with pytest.raises(ValidationError):
            LoadRetrySettings(max_retries=-1)


class TestSettings:
    """Tests for the application settings aggregator."""

    def test_is_production(self):
        assert Settings(ENVIRONMENT="Production").is_production is True
        assert Settings(ENVIRONMENT="development").is_production is False

    def test_i18n_subsettings_instantiated(self):
        assert isinstance(Settings().i18n, I18nSettings)


class TestFalseFromEnvironment:
    """Tests for disabling separators and joining through environment variables."""

    @pytest.mark.parametrize("raw", ["false", "False"])
    def test_separators(self, monkeypatch, raw):
        monkeypatch.setenv("I18N_KEY_SEPARATOR", raw)
        monkeypatch.setenv("I18N_NS_SEPARATOR", raw)
        settings = I18nSettings()
        assert settings.key_separator is False
        assert settings.ns_separator is False

    @pytest.mark.parametrize("raw", ["false", "FALSE", ""])
    def test_join_arrays(self, monkeypatch, raw):
        monkeypatch.setenv("I18N_JOIN_ARRAYS", raw)
        assert I18nSettings().join_arrays is False

    def test_join_arrays_string(self, monkeypatch):
        monkeypatch.setenv("I18N_JOIN_ARRAYS", " / ")
        assert I18nSettings().join_arrays == " / "

    def test_custom_separator(self, monkeypatch):
        monkeypatch.setenv("I18N_KEY_SEPARATOR", "#")
        assert I18nSettings().key_separator == "#"
