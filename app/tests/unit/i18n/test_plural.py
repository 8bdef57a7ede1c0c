"""Tests for i18n_core.i18n.plural module."""

import pytest

from i18n_core.i18n import ConfigurationError, LanguageUtils, PluralResolver, PluralRule
from i18n_core.i18n.plural import PLURAL_SELECTORS, build_rules
from tests.factories.i18n import make_settings


@pytest.fixture
def resolver():
    return PluralResolver(LanguageUtils(make_settings()))


@pytest.fixture
def v1_resolver():
    return PluralResolver(LanguageUtils(make_settings()), compatibility_json="v1")


class TestPluralResolver:
    """Tests for PluralResolver suffix selection."""

    @pytest.mark.parametrize("count,expected", [(0, "_plural"), (1, ""), (2, "_plural"), (1.5, "_plural")])
    def test_english(self, resolver, count, expected):
        """English has singular and plural forms."""
        assert resolver.get_suffix("en", count) == expected

    @pytest.mark.parametrize("count,expected", [(0, ""), (1, ""), (2, "_plural")])
    def test_french_zero_is_singular(self, resolver, count, expected):
        """French treats 0 as singular."""
        assert resolver.get_suffix("fr", count) == expected

    @pytest.mark.parametrize("count,expected", [(1, "_0"), (3, "_1"), (5, "_2"), (11, "_2"), (21, "_0"), (22, "_1")])
    def test_russian_v2_indexes(self, resolver, count, expected):
        """Multi-form languages use the category index."""
        assert resolver.get_suffix("ru", count) == expected

    @pytest.mark.parametrize("count,expected", [(1, ""), (3, "_plural_2"), (5, "_plural_5")])
    def test_russian_v1_numbers(self, v1_resolver, count, expected):
        """v1 uses the category number with a plural marker."""
        assert v1_resolver.get_suffix("ru", count) == expected

    def test_two_form_identical_in_v1(self, v1_resolver):
        assert v1_resolver.get_suffix("en", 1) == ""
        assert v1_resolver.get_suffix("en", 2) == "_plural"

    def test_single_form_language(self, resolver):
        """Languages without plurals never add a suffix."""
        assert resolver.get_suffix("ja", 5) == ""
        assert resolver.needs_plural("ja") is False
        assert resolver.needs_plural("en") is True

    def test_region_tag_uses_language_rule(self, resolver):
        assert resolver.get_suffix("ru-RU", 5) == "_2"

    def test_exact_region_rule_wins(self, resolver):
        """pt-BR has its own rule (0 is singular) unlike pt."""
        assert resolver.get_suffix("pt-BR", 0) == ""
        assert resolver.get_suffix("pt", 0) == "_plural"

    def test_unknown_language_uses_default_rule(self, resolver):
        assert resolver.get_suffix("xx", 1) == ""
        assert resolver.get_suffix("xx", 3) == "_plural"

    def test_negative_counts_use_absolute_value(self, resolver):
        assert resolver.get_suffix("en", -1) == ""

    def test_custom_separator(self):
        resolver = PluralResolver(LanguageUtils(make_settings()), separator="#")
        assert resolver.get_suffix("en", 2) == "#plural"
        assert resolver.get_suffix("ar", 0) == "#0"

    def test_invalid_compatibility_json(self):
        """An unknown suffix format fails at construction."""
        with pytest.raises(ConfigurationError):
            PluralResolver(LanguageUtils(make_settings()), compatibility_json="v9")

    def test_add_rule(self, resolver):
        """Custom rules override the built-in table."""
        resolver.add_rule("tlh", PluralRule(numbers=(1, 2, 5), select=PLURAL_SELECTORS[4]))
        assert resolver.get_suffix("tlh", 5) == "_2"

    def test_add_rule_rejects_empty_rule(self, resolver):
        with pytest.raises(ConfigurationError):
            resolver.add_rule("tlh", PluralRule(numbers=(), select=PLURAL_SELECTORS[2]))


class TestBuildRules:
    """Tests for rule table construction."""

    def test_unknown_selector(self):
        with pytest.raises(ConfigurationError):
            build_rules([(["xx"], (1, 2), 99)])

    def test_empty_numbers(self):
        with pytest.raises(ConfigurationError):
            build_rules([(["xx"], (), 2)])

    def test_languages_are_lower_cased(self):
        rules = build_rules([(["pt-BR"], (1, 2), 1)])
        assert "pt-br" in rules
