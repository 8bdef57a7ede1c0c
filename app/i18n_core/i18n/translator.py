"""Translation resolution.

Resolves a key for the active (or requested) language by walking the
language fallback chain and namespace list against the store, applying
context and plural suffixes, then interpolating, expanding nested
translations and running post-processors.

Lookup never raises: a missing key resolves to the default value or the
key itself and is reported as a ``missingKey`` diagnostic.
"""

from numbers import Number
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from i18n_core.configuration import I18nSettings
from i18n_core.events import DiagnosticsChannel, EventType
from i18n_core.i18n.connector import BackendConnector
from i18n_core.i18n.interpolator import Interpolator
from i18n_core.i18n.languages import LanguageUtils
from i18n_core.i18n.models import ParsedKey, ResolvedValue
from i18n_core.i18n.plural import PluralResolver
from i18n_core.i18n.postprocessor import PostProcessorRegistry
from i18n_core.i18n.store import ResourceStore
from i18n_core.logging import get_module_logger

logger = get_module_logger()

Keys = Union[str, Sequence[str]]


class Translator:
    """Resolves keys into display strings.

    Attributes:
        language: Active language tag.
        languages: Fallback hierarchy of the active language.
    """

    def __init__(
        self,
        store: ResourceStore,
        language_utils: LanguageUtils,
        plural_resolver: PluralResolver,
        interpolator: Interpolator,
        settings: Optional[I18nSettings] = None,
        post_processors: Optional[PostProcessorRegistry] = None,
        diagnostics: Optional[DiagnosticsChannel] = None,
        connector: Optional[BackendConnector] = None,
    ):
        self.store = store
        self.language_utils = language_utils
        self.plural_resolver = plural_resolver
        self.interpolator = interpolator
        self.settings = settings or I18nSettings()
        self.post_processors = post_processors or PostProcessorRegistry()
        self.diagnostics = diagnostics
        self.connector = connector
        self.language: Optional[str] = None
        self.languages: List[str] = language_utils.resolve_hierarchy(None)

    def change_language(self, lng: Optional[str]) -> None:
        self.language = lng
        self.languages = self.language_utils.resolve_hierarchy(lng)

    def _emit(self, event_type: EventType, **payload: Any) -> None:
        if self.diagnostics:
            self.diagnostics.emit(event_type, **payload)

    def extract_from_key(self, key: str, options: Dict[str, Any]) -> ParsedKey:
        """Split an optional namespace prefix off ``key``.

        Requested namespaces come first (key prefix, then ``options["ns"]``,
        then ``default_ns``), followed by the configured ``fallback_ns``.
        """
        requested: Union[str, Sequence[str]] = options.get("ns") or self.settings.default_ns
        separator = self.settings.ns_separator
        if separator and separator in key:
            prefix, key = key.split(separator, 1)
            requested = prefix

        namespaces = [requested] if isinstance(requested, str) else list(requested)
        for ns in self.settings.fallback_ns:
            if ns not in namespaces:
                namespaces.append(ns)
        return ParsedKey(key=key, namespaces=tuple(namespaces))

    def _languages_for(self, options: Dict[str, Any]) -> List[str]:
        lng = options.get("lng")
        if lng:
            return self.language_utils.resolve_hierarchy(lng)
        return self.languages

    def _candidate_keys(self, key: str, lng: str, options: Dict[str, Any]) -> List[str]:
        """Candidate keys for one language, most specific first."""
        count = options.get("count")
        context = options.get("context")
        needs_plural = isinstance(count, Number) and not isinstance(count, bool)
        needs_context = isinstance(context, str) and context != ""

        plural_suffix = (
            self.plural_resolver.get_suffix(lng, count) if needs_plural else ""
        )
        context_key = f"{key}{self.settings.context_separator}{context}" if needs_context else None

        candidates: List[str] = []
        if context_key and plural_suffix:
            candidates.append(f"{context_key}{plural_suffix}")
        if context_key:
            candidates.append(context_key)
        if plural_suffix:
            candidates.append(f"{key}{plural_suffix}")
        candidates.append(key)
        return candidates

    def resolve(self, keys: Keys, options: Optional[Dict[str, Any]] = None) -> Optional[ResolvedValue]:
        """Find the first stored value for ``keys``.

        The traversal order is set by ``lookup_order``: with ``"namespace"``
        every language is tried in the first namespace before the next
        namespace; with ``"language"`` every namespace is tried in the first
        language before the next language.

        Returns:
            ResolvedValue, or None when no candidate exists.
        """
        options = options or {}
        if isinstance(keys, str):
            keys = [keys]

        languages = self._languages_for(options)
        for raw_key in keys:
            if raw_key is None or raw_key == "":
                continue
            parsed = self.extract_from_key(str(raw_key), options)

            if self.settings.lookup_order == "language":
                pairs = [(lng, ns) for lng in languages for ns in parsed.namespaces]
            else:
                pairs = [(lng, ns) for ns in parsed.namespaces for lng in languages]

            for lng, ns in pairs:
                for candidate in self._candidate_keys(parsed.key, lng, options):
                    value = self.store.get_resource(lng, ns, candidate)
                    if value is not None:
                        return ResolvedValue(
                            value=value,
                            key=parsed.key,
                            used_key=candidate,
                            language=lng,
                            namespace=ns,
                        )
        return None

    def exists(self, keys: Keys, options: Optional[Dict[str, Any]] = None) -> bool:
        return self.resolve(keys, options) is not None

    def translate(self, keys: Keys, options: Optional[Dict[str, Any]] = None) -> Any:
        """Translate ``keys`` (a key or a list of candidate keys).

        Args:
            keys: Key, optionally prefixed with ``ns:``, or list of keys.
            options: Variables and lookup options (``lng``, ``ns``, ``count``,
                ``context``, ``default_value``, ``replace``, ``post_process``,
                ``return_objects``, ``join_arrays``, ``interpolation``).

        Returns:
            The translated string (or a translated subtree with
            ``return_objects``).
        """
        return self._translate(keys, dict(options or {}), depth=0)

    def _translate(
        self,
        keys: Keys,
        options: Dict[str, Any],
        depth: int,
        chain: Tuple[str, ...] = (),
    ) -> Any:
        if keys is None or keys == "" or keys == []:
            return ""
        if not isinstance(keys, (list, tuple)):
            keys = [str(keys)]

        last = self.extract_from_key(str(keys[-1]), options)
        resolved = self.resolve(keys, options)

        if resolved is None:
            return self._handle_missing(last, options, depth, chain)

        chain = self._expansion_chain(chain, keys, resolved)
        value = resolved.value
        join_arrays = options.get("join_arrays", self.settings.join_arrays)
        return_objects = options.get("return_objects", self.settings.return_objects)

        if isinstance(value, list) and isinstance(join_arrays, str):
            value = join_arrays.join(str(item) for item in value)
        elif isinstance(value, (dict, list)):
            if return_objects:
                return self._translate_object(value, resolved, options, depth, chain)
            logger.warning(
                "object_returned_for_string",
                key=resolved.key,
                lng=resolved.language,
            )
            return f"key '{resolved.key} ({resolved.language})' returned an object instead of string."

        if not isinstance(value, str):
            value = str(value)
        return self.extend_translation(
            value, resolved.key, options, resolved.language, depth, chain
        )

    def _expansion_chain(
        self, chain: Tuple[str, ...], keys: Sequence[str], resolved: ResolvedValue
    ) -> Tuple[str, ...]:
        """Add every spelling of the key being expanded to ``chain``."""
        names = [str(key) for key in keys] + [resolved.key]
        if self.settings.ns_separator:
            names.append(f"{resolved.namespace}{self.settings.ns_separator}{resolved.key}")
        return chain + tuple(name for name in names if name not in chain)

    def _translate_object(
        self,
        value: Any,
        resolved: ResolvedValue,
        options: Dict[str, Any],
        depth: int,
        chain: Tuple[str, ...] = (),
        path: str = "",
    ) -> Any:
        """Copy a subtree with every string leaf extended."""
        separator = self.settings.key_separator or "."
        if isinstance(value, dict):
            return {
                name: self._translate_object(
                    child,
                    resolved,
                    options,
                    depth,
                    chain,
                    f"{path}{separator}{name}" if path else str(name),
                )
                for name, child in value.items()
            }
        if isinstance(value, list):
            return [
                self._translate_object(
                    child,
                    resolved,
                    options,
                    depth,
                    chain,
                    f"{path}{separator}{index}" if path else str(index),
                )
                for index, child in enumerate(value)
            ]
        if isinstance(value, str):
            key = f"{resolved.key}{separator}{path}" if path else resolved.key
            return self.extend_translation(
                value, key, options, resolved.language, depth, chain
            )
        return value

    def _handle_missing(
        self,
        parsed: ParsedKey,
        options: Dict[str, Any],
        depth: int,
        chain: Tuple[str, ...] = (),
    ) -> Any:
        lng = options.get("lng") or self.language
        logger.debug("missing_key", key=parsed.key, lng=lng, ns=parsed.namespaces[0])
        self._emit(
            EventType.MISSING_KEY,
            lng=lng,
            ns=parsed.namespaces[0],
            key=parsed.key,
            languages=self._languages_for(options),
        )

        default_value = options.get("default_value")
        fallback = default_value if default_value is not None else parsed.key

        if self.settings.save_missing and self.connector is not None:
            self.connector.save_missing(
                self._save_missing_languages(options),
                parsed.namespaces[0],
                parsed.key,
                fallback,
            )

        if not isinstance(fallback, str):
            return fallback
        return self.extend_translation(fallback, parsed.key, options, lng, depth, chain)

    def _save_missing_languages(self, options: Dict[str, Any]) -> List[str]:
        languages = self._languages_for(options)
        target = self.settings.save_missing_to
        if target == "current":
            return [options.get("lng") or self.language or languages[0]]
        if target == "all":
            return list(languages)
        return self.language_utils.get_fallback_codes(options.get("lng") or self.language)[:1] or languages[-1:]

    def extend_translation(
        self,
        value: str,
        key: str,
        options: Dict[str, Any],
        lng: Optional[str],
        depth: int = 0,
        chain: Tuple[str, ...] = (),
    ) -> str:
        """Interpolate, expand nested translations, then post-process.

        ``chain`` holds the keys already being expanded; nested placeholders
        naming one of them are left unexpanded.
        """
        variables = options.get("replace")
        if not isinstance(variables, dict):
            variables = options

        value = self.interpolator.interpolate(
            value, variables, lng, options.get("interpolation")
        )
        value = self.interpolator.nest(
            value,
            self._translate,
            options,
            depth,
            lng,
            chain,
        )

        post_process = options.get("post_process", self.settings.post_process)
        return self.post_processors.handle(post_process, value, key, options, self)
