"""I18n facade.

Wires the core components together and exposes the application-facing API:
language changes (with loading), translation, store access and diagnostics.
Collaborators (backend, cache, detector, post-processors, formatters) are
passed explicitly at construction time.
"""

import copy
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from i18n_core.configuration import I18nSettings
from i18n_core.events import DiagnosticsChannel, EventType
from i18n_core.i18n.backends import Backend, Cache
from i18n_core.i18n.connector import BackendConnector
from i18n_core.i18n.detectors import LanguageDetector
from i18n_core.i18n.directionality import text_direction
from i18n_core.i18n.errors import LoadError
from i18n_core.i18n.interpolator import Formatter, Interpolator
from i18n_core.i18n.languages import LanguageUtils
from i18n_core.i18n.plural import PluralResolver
from i18n_core.i18n.postprocessor import PostProcessor, PostProcessorRegistry
from i18n_core.i18n.store import ResourceStore
from i18n_core.i18n.translator import Keys, Translator
from i18n_core.logging import get_module_logger

logger = get_module_logger()

ReadyCallback = Callable[[Optional[LoadError], Callable[..., Any]], Any]


class I18n:
    """Application-facing translation service.

    Usage:
        i18n = I18n(
            I18nSettings(lng="en-US", fallback_lng=["en"], ns=["common"], default_ns="common"),
            backend=YAMLBackend(Path("locales")),
        )
        await i18n.init()
        i18n.t("greeting", name="Ana")

    Attributes:
        settings: Configuration of this instance.
        store: Resource store (shared with clones).
        connector: Backend connector (shared with clones).
        translator: Translator bound to this instance's language.
        diagnostics: Diagnostics channel (shared with clones).
        language: Active language tag.
        languages: Fallback hierarchy of the active language.
    """

    def __init__(
        self,
        settings: Optional[I18nSettings] = None,
        *,
        resources: Optional[Dict[str, Dict[str, Dict[str, Any]]]] = None,
        backend: Optional[Backend] = None,
        cache: Optional[Cache] = None,
        language_detector: Optional[LanguageDetector] = None,
        post_processors: Iterable[PostProcessor] = (),
        formatters: Optional[Dict[str, Formatter]] = None,
        diagnostics: Optional[DiagnosticsChannel] = None,
    ):
        self.settings = settings or I18nSettings()
        self.diagnostics = diagnostics or DiagnosticsChannel()
        self.language_utils = LanguageUtils(self.settings)
        self.store = ResourceStore(resources, self.settings, self.diagnostics)
        self.plural_resolver = PluralResolver(
            self.language_utils,
            separator=self.settings.plural_separator,
            compatibility_json=self.settings.compatibility_json,
        )
        self.interpolator = Interpolator(
            self.settings.interpolation, formatters, self.diagnostics
        )
        self.post_processors = PostProcessorRegistry(post_processors)
        self.connector = BackendConnector(
            backend, self.store, self.settings, cache, self.diagnostics
        )
        self.language_detector = language_detector
        self.translator = self._build_translator()

        self.namespaces: List[str] = list(self.settings.ns)
        self.preload: List[str] = list(self.settings.preload)
        self.language: Optional[str] = None
        self.is_initialized = False

    def _build_translator(self) -> Translator:
        return Translator(
            self.store,
            self.language_utils,
            self.plural_resolver,
            self.interpolator,
            self.settings,
            self.post_processors,
            self.diagnostics,
            self.connector,
        )

    @property
    def languages(self) -> List[str]:
        return self.translator.languages

    async def init(self, callback: Optional[ReadyCallback] = None) -> Optional[LoadError]:
        """Select the initial language and load its bundles.

        Returns:
            Aggregate LoadError of the initial load, or None.
        """
        error = await self.change_language(self.settings.lng)
        self.is_initialized = True
        self.diagnostics.emit(
            EventType.INITIALIZED, settings=self.settings.model_dump(mode="json")
        )
        logger.info("initialized", lng=self.language, namespaces=self.namespaces)
        if callback:
            callback(error, self.t)
        return error

    async def change_language(
        self, lng: Optional[str] = None, callback: Optional[ReadyCallback] = None
    ) -> Optional[LoadError]:
        """Switch the active language and load its hierarchy.

        Without ``lng`` the detector (if any) chooses. Translations can be
        requested once the returned coroutine completes.
        """
        if not lng and self.language_detector is not None:
            lng = self.language_detector.detect()

        if lng:
            self.language = lng
            self.translator.change_language(lng)
            if self.language_detector is not None:
                self.language_detector.cache_user_language(lng)

        error = await self.load_resources()

        self.diagnostics.emit(EventType.LANGUAGE_CHANGED, lng=lng)
        logger.info("language_changed", lng=lng, languages=self.languages)
        if callback:
            callback(error, self.t)
        return error

    def _languages_to_load(self) -> List[str]:
        to_load: List[str] = []
        for lng in [self.language] + self.preload:
            if lng is None and to_load:
                continue
            for code in self.language_utils.languages_to_load(lng):
                if code not in to_load:
                    to_load.append(code)
        return to_load

    async def load_resources(
        self, callback: Optional[Callable[[Optional[LoadError]], Any]] = None
    ) -> Optional[LoadError]:
        """Load the active hierarchy and preloaded languages for every namespace."""
        return await self.connector.ensure_loaded(
            self._languages_to_load(), self.namespaces, callback
        )

    async def load_namespaces(
        self,
        namespaces: Union[str, Iterable[str]],
        callback: Optional[Callable[[Optional[LoadError]], Any]] = None,
    ) -> Optional[LoadError]:
        """Add namespaces to the loaded set and load them."""
        if isinstance(namespaces, str):
            namespaces = [namespaces]
        for ns in namespaces:
            if ns not in self.namespaces:
                self.namespaces.append(ns)
        self.store.add_namespaces(self.namespaces)
        return await self.load_resources(callback)

    async def load_languages(
        self,
        languages: Union[str, Iterable[str]],
        callback: Optional[Callable[[Optional[LoadError]], Any]] = None,
    ) -> Optional[LoadError]:
        """Add languages to the preload list and load them."""
        if isinstance(languages, str):
            languages = [languages]
        for lng in languages:
            if lng not in self.preload:
                self.preload.append(lng)
        return await self.load_resources(callback)

    async def reload_resources(
        self,
        languages: Optional[Iterable[str]] = None,
        namespaces: Optional[Iterable[str]] = None,
        callback: Optional[Callable[[Optional[LoadError]], Any]] = None,
    ) -> Optional[LoadError]:
        """Refetch bundles, replacing what the store holds."""
        return await self.connector.reload(
            list(languages) if languages is not None else self._languages_to_load(),
            list(namespaces) if namespaces is not None else self.namespaces,
            callback,
        )

    def t(self, keys: Keys, options: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Any:
        """Translate ``keys``; options may be passed as a dict or keywords."""
        merged = dict(options or {})
        merged.update(kwargs)
        return self.translator.translate(keys, merged)

    def exists(self, keys: Keys, options: Optional[Dict[str, Any]] = None, **kwargs: Any) -> bool:
        merged = dict(options or {})
        merged.update(kwargs)
        return self.translator.exists(keys, merged)

    def get_fixed_t(
        self, lng: Optional[str] = None, ns: Optional[Union[str, List[str]]] = None
    ) -> Callable[..., Any]:
        """Return a ``t`` bound to a language and/or namespace."""

        def fixed_t(keys: Keys, options: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Any:
            merged = dict(options or {})
            merged.update(kwargs)
            if fixed_t.lng and not merged.get("lng"):
                merged["lng"] = fixed_t.lng
            if fixed_t.ns and not merged.get("ns"):
                merged["ns"] = fixed_t.ns
            return self.t(keys, merged)

        fixed_t.lng = lng
        fixed_t.ns = ns
        return fixed_t

    def set_default_namespace(self, ns: str) -> None:
        self.settings.default_ns = ns
        self.store.default_ns = ns

    def dir(self, lng: Optional[str] = None) -> str:
        """Text direction ("ltr" or "rtl") of ``lng`` or the active language."""
        lng = lng or self.language or self.languages[0]
        return text_direction(self.language_utils.get_language_part(lng))

    def clone_instance(self, **overrides: Any) -> "I18n":
        """Create an instance sharing store, connector and diagnostics.

        The clone has its own active language; ``overrides`` update a copy of
        the settings.
        """
        clone = copy.copy(self)
        clone.settings = self.settings.model_copy(update=overrides, deep=True)
        clone.language_utils = LanguageUtils(clone.settings)
        clone.namespaces = list(self.namespaces)
        clone.preload = list(self.preload)
        clone.translator = Translator(
            self.store,
            clone.language_utils,
            self.plural_resolver,
            self.interpolator,
            clone.settings,
            self.post_processors,
            self.diagnostics,
            self.connector,
        )
        clone.translator.change_language(self.language)
        return clone

    def on(self, event_type: Union[EventType, str], handler: Callable[..., Any]) -> None:
        self.diagnostics.on(event_type, handler)

    def off(self, event_type: Union[EventType, str], handler: Callable[..., Any]) -> None:
        self.diagnostics.off(event_type, handler)

    # Store pass-through

    def get_resource(self, lng: str, ns: str, key: Optional[str] = None) -> Any:
        return self.store.get_resource(lng, ns, key)

    def add_resource(self, lng: str, ns: str, key: str, value: Any) -> None:
        self.store.add_resource(lng, ns, key, value)

    def add_resources(self, lng: str, ns: str, resources: Dict[str, Any]) -> None:
        self.store.add_resources(lng, ns, resources)

    def add_resource_bundle(
        self,
        lng: str,
        ns: str,
        resources: Dict[str, Any],
        deep: bool = False,
        overwrite: bool = False,
    ) -> None:
        self.store.add_resource_bundle(lng, ns, resources, deep, overwrite)

    def remove_resource_bundle(self, lng: str, ns: str) -> None:
        self.store.remove_resource_bundle(lng, ns)

    def has_resource_bundle(self, lng: str, ns: str) -> bool:
        return self.store.has_resource_bundle(lng, ns)

    def get_resource_bundle(self, lng: str, ns: Optional[str] = None) -> Optional[Dict[str, Any]]:
        return self.store.get_resource_bundle(lng, ns)
