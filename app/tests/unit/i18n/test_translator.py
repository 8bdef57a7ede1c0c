"""Tests for i18n_core.i18n.translator module."""

import asyncio

import pytest

from i18n_core.events import EventType
from i18n_core.i18n import (
    BackendConnector,
    PostProcessor,
    PostProcessorRegistry,
    ResourceStore,
)
from tests.factories.backends import DictBackend
from tests.factories.i18n import make_resources, make_settings, make_translator


class Reverse(PostProcessor):
    name = "reverse"

    def process(self, value, key, options, translator):
        return value[::-1]


class TestResolve:
    """Tests for key resolution."""

    @pytest.fixture
    def translator(self):
        return make_translator(lng="en-US")

    def test_exact_language_first(self, translator):
        assert translator.translate("color") == "color"

    def test_falls_back_through_hierarchy(self, translator):
        """en-US has no 'farewell', en does."""
        assert translator.translate("farewell") == "Goodbye"

    def test_fallback_language_chain(self):
        translator = make_translator(lng="fr")
        assert translator.translate("greeting", {"name": "Ana"}) == "Bonjour Ana"
        assert translator.translate("farewell") == "Goodbye"

    def test_resolve_reports_origin(self, translator):
        resolved = translator.resolve("farewell")
        assert resolved.language == "en"
        assert resolved.namespace == "common"
        assert resolved.used_key == "farewell"

    def test_nested_key_path(self, translator):
        assert translator.translate("nav.home") == "Home"

    def test_namespace_prefix(self):
        resources = make_resources()
        resources["en"]["admin"] = {"title": "Admin"}
        translator = make_translator(resources=resources)
        assert translator.translate("admin:title") == "Admin"

    def test_ns_option(self):
        resources = make_resources()
        resources["en"]["admin"] = {"title": "Admin"}
        translator = make_translator(resources=resources)
        assert translator.translate("title", {"ns": "admin"}) == "Admin"

    def test_fallback_ns(self):
        resources = make_resources()
        resources["en"]["shared"] = {"ok": "OK"}
        translator = make_translator(make_settings(fallback_ns=["shared"]), resources)
        assert translator.translate("ok") == "OK"

    def test_key_list_uses_first_found(self, translator):
        assert translator.translate(["missing.key", "farewell"]) == "Goodbye"

    def test_lng_option(self, translator):
        assert translator.translate("greeting", {"lng": "fr", "name": "Ana"}) == "Bonjour Ana"

    def test_exists(self, translator):
        assert translator.exists("nav.home")
        assert not translator.exists("nav.none")


class TestLookupOrder:
    """Tests for namespace-outer versus language-outer traversal."""

    @pytest.fixture
    def resources(self):
        return {
            "de": {"specific": {}, "generic": {"label": "de-generic"}},
            "en": {"specific": {"label": "en-specific"}, "generic": {}},
        }

    def test_namespace_order(self, resources):
        """Every language is tried in the first namespace before the next one."""
        settings = make_settings(fallback_lng=["en"], lookup_order="namespace")
        translator = make_translator(settings, resources, lng="de")
        assert translator.translate("label", {"ns": ["specific", "generic"]}) == "en-specific"

    def test_language_order(self, resources):
        """Every namespace is tried in the first language before the next one."""
        settings = make_settings(fallback_lng=["en"], lookup_order="language")
        translator = make_translator(settings, resources, lng="de")
        assert translator.translate("label", {"ns": ["specific", "generic"]}) == "de-generic"


class TestMissingKeys:
    """Tests for missing key handling."""

    def test_returns_key(self, diagnostics, recorded_events):
        translator = make_translator(diagnostics=diagnostics)
        assert translator.translate("common:does.not.exist") == "does.not.exist"
        missing = [e for e in recorded_events if e.event_type == EventType.MISSING_KEY.value]
        assert missing[0].payload["key"] == "does.not.exist"
        assert missing[0].payload["ns"] == "common"

    def test_default_value_is_interpolated(self):
        translator = make_translator()
        assert translator.translate("nope", {"default_value": "Hi {{name}}", "name": "Ana"}) == "Hi Ana"

    def test_empty_key(self):
        assert make_translator().translate("") == ""

    @pytest.mark.asyncio
    async def test_save_missing_forwards_to_backend(self):
        """Missing keys are sent to the backend for the fallback language."""
        settings = make_settings(save_missing=True)
        store = ResourceStore(make_resources(), settings)
        backend = DictBackend({})
        connector = BackendConnector(backend, store, settings)
        translator = make_translator(settings)
        translator.connector = connector
        translator.store = store

        translator.translate("brand.new", {"default_value": "New"})
        await asyncio.gather(*connector._background)  # pylint: disable=protected-access

        assert backend.created == [(("en",), "common", "brand.new", "New")]


class TestPluralsAndContext:
    """Tests for count and context suffixes."""

    @pytest.fixture
    def translator(self):
        return make_translator()

    @pytest.mark.parametrize("count,expected", [(1, "1 item"), (0, "0 items"), (5, "5 items")])
    def test_plural(self, translator, count, expected):
        assert translator.translate("item", {"count": count}) == expected

    def test_plural_uses_language_of_bundle(self):
        """fr treats 0 as singular."""
        translator = make_translator(lng="fr")
        assert translator.translate("item", {"count": 0}) == "0 article"

    @pytest.mark.parametrize("count,expected", [(1, "1 яблоко"), (3, "3 яблока"), (7, "7 яблок")])
    def test_multi_form_plural(self, count, expected):
        translator = make_translator(lng="ru")
        assert translator.translate("apple", {"count": count}) == expected

    def test_context(self, translator):
        assert translator.translate("friend", {"context": "male"}) == "A boyfriend"

    def test_context_with_plural(self, translator):
        assert translator.translate("friend", {"context": "female", "count": 2}) == "2 girlfriends"

    def test_unknown_context_falls_back_to_base(self, translator):
        assert translator.translate("friend", {"context": "robot"}) == "A friend"

    def test_plural_forms_are_distinct_keys(self, translator):
        assert translator.exists("item_plural")
        assert translator.translate("item", {"count": 1}) != translator.translate("item", {"count": 2})

    def test_boolean_count_ignored(self, translator):
        assert translator.translate("item", {"count": True}) == "True item"


class TestExtendTranslation:
    """Tests for interpolation, nesting and post-processing."""

    def test_interpolation_escapes(self):
        translator = make_translator()
        assert translator.translate("html", {"value": "<i>"}) == "Value: &lt;i&gt;"

    def test_interpolation_override(self):
        translator = make_translator()
        result = translator.translate("html", {"value": "<i>", "interpolation": {"escape_value": False}})
        assert result == "Value: <i>"

    def test_replace_option(self):
        translator = make_translator()
        assert translator.translate("greeting", {"replace": {"name": "Bo"}}) == "Hello Bo"

    def test_nesting(self):
        assert make_translator().translate("nested") == "Say: Goodbye"

    def test_nesting_with_options(self):
        assert make_translator().translate("welcome", {"user": "Ana"}) == "Hello Ana!"

    def test_self_reference_is_not_expanded(self, diagnostics, recorded_events):
        """A key nesting itself keeps the inner placeholder."""
        translator = make_translator(diagnostics=diagnostics)

        result = translator.translate("loop")

        assert result == "again $t(loop)"
        overflow = [e for e in recorded_events if e.event_type == EventType.INTERPOLATION_OVERFLOW.value]
        assert len(overflow) == 1

    def test_repeated_self_reference_finishes(self, diagnostics, recorded_events):
        """Several self-references in one value expand nothing and return at once."""
        translator = make_translator(diagnostics=diagnostics)

        result = translator.translate("fanout")

        assert result == "$t(fanout)" * 4
        overflow = [e for e in recorded_events if e.event_type == EventType.INTERPOLATION_OVERFLOW.value]
        assert len(overflow) == 4

    def test_mutual_reference_is_bounded(self):
        assert make_translator().translate("ping") == "ping pong $t(ping)"

    def test_namespaced_self_reference(self):
        resources = {"en": {"common": {"a": "x $t(common:a)"}}}
        assert make_translator(resources=resources).translate("a") == "x $t(common:a)"

    def test_depth_limit_for_distinct_keys(self):
        resources = {"en": {"common": {f"n{i}": f"$t(n{i + 1})" for i in range(6)}}}
        settings = make_settings(interpolation={"max_nesting_depth": 3})
        assert make_translator(settings, resources).translate("n0") == "$t(n4)"

    def test_post_processor(self):
        translator = make_translator(post_processors=PostProcessorRegistry([Reverse()]))
        assert translator.translate("farewell", {"post_process": "reverse"}) == "eybdooG"

    def test_post_processor_from_settings(self):
        translator = make_translator(
            make_settings(post_process=["reverse"]),
            post_processors=PostProcessorRegistry([Reverse()]),
        )
        assert translator.translate("farewell") == "eybdooG"

    def test_unknown_post_processor_ignored(self):
        assert make_translator().translate("farewell", {"post_process": "nope"}) == "Goodbye"


class TestObjects:
    """Tests for subtree and array values."""

    def test_object_without_return_objects(self):
        result = make_translator().translate("nav")
        assert result == "key 'nav (en)' returned an object instead of string."

    def test_return_objects(self):
        result = make_translator().translate("nav", {"return_objects": True})
        assert result == {"home": "Home", "about": "About us"}

    def test_return_objects_list_is_interpolated(self):
        result = make_translator().translate("list", {"return_objects": True, "name": "three"})
        assert result == ["one", "two", "three"]

    def test_join_arrays(self):
        result = make_translator().translate("list", {"join_arrays": " + ", "name": "three"})
        assert result == "one + two + three"

    def test_join_arrays_from_settings(self):
        translator = make_translator(make_settings(join_arrays="\n"))
        assert translator.translate("list", {"name": "3"}) == "one\ntwo\n3"


class TestPostProcessorRegistry:
    """Tests for PostProcessorRegistry."""

    def test_requires_name(self):
        class Nameless(PostProcessor):
            def process(self, value, key, options, translator):
                return value

        with pytest.raises(ValueError):
            PostProcessorRegistry([Nameless()])

    def test_runs_in_order(self):
        class Exclaim(PostProcessor):
            name = "exclaim"

            def process(self, value, key, options, translator):
                return value + "!"

        registry = PostProcessorRegistry([Reverse(), Exclaim()])
        assert registry.handle(["exclaim", "reverse"], "ab", "k", {}, None) == "!ba"


class RecordKeys(PostProcessor):
    name = "record_keys"

    def __init__(self):
        self.keys = []

    def process(self, value, key, options, translator):
        self.keys.append(key)
        return value


class TestObjectLeafKeys:
    """Tests for the keys passed to post-processors for subtree leaves."""

    def test_leaf_keys_use_key_separator(self):
        recorder = RecordKeys()
        translator = make_translator(
            make_settings(key_separator="#"),
            post_processors=PostProcessorRegistry([recorder]),
        )

        translator.translate("nav", {"return_objects": True, "post_process": "record_keys"})

        assert sorted(recorder.keys) == ["nav#about", "nav#home"]

    def test_leaf_keys_default_to_dot_without_separator(self):
        recorder = RecordKeys()
        translator = make_translator(
            make_settings(key_separator=False),
            post_processors=PostProcessorRegistry([recorder]),
        )

        translator.translate("list", {"return_objects": True, "post_process": "record_keys", "name": "x"})

        assert recorder.keys == ["list.0", "list.1", "list.2"]
