"""In-memory resource store.

Holds every bundle as ``{language: {namespace: tree}}`` where a tree is a
nested mapping whose leaves are strings (or lists/scalars). The store is the
single owner of bundle data: incoming trees are copied on write and subtrees
are copied on read, so callers never alias stored data.
"""

import copy
import threading
from typing import Any, Dict, Iterable, List, Optional, Union

from i18n_core.configuration import I18nSettings
from i18n_core.events import DiagnosticsChannel, EventType
from i18n_core.logging import get_module_logger

logger = get_module_logger()

ResourceTree = Dict[str, Any]


def deep_merge(
    target: ResourceTree, source: ResourceTree, overwrite: bool
) -> ResourceTree:
    """Recursively merge ``source`` into ``target`` in place.

    Colliding leaves are replaced only when ``overwrite`` is True. A mapping
    meeting a leaf (or the reverse) counts as a leaf collision.
    """
    for key, value in source.items():
        existing = target.get(key)
        if isinstance(existing, dict) and isinstance(value, dict):
            deep_merge(existing, value, overwrite)
        elif key not in target or overwrite:
            target[key] = copy.deepcopy(value)
    return target


def get_path(tree: Any, path: List[str]) -> Any:
    """Walk ``path`` through nested mappings, None when any segment is absent."""
    node = tree
    for segment in path:
        if not isinstance(node, dict) or segment not in node:
            return None
        node = node[segment]
    return node


def set_path(tree: ResourceTree, path: List[str], value: Any) -> None:
    """Set ``value`` at ``path``, creating (or replacing leaves with) mappings."""
    node = tree
    for segment in path[:-1]:
        child = node.get(segment)
        if not isinstance(child, dict):
            child = {}
            node[segment] = child
        node = child
    node[path[-1]] = value


class ResourceStore:
    """Thread-safe language → namespace → key tree.

    Attributes:
        namespaces: Namespaces known to the store.
        key_separator: Separator of nested key paths, or False for flat keys.
        default_ns: Namespace used by ``get_resource_bundle`` when none given.
    """

    def __init__(
        self,
        data: Optional[Dict[str, Dict[str, ResourceTree]]] = None,
        settings: Optional[I18nSettings] = None,
        diagnostics: Optional[DiagnosticsChannel] = None,
    ):
        settings = settings or I18nSettings()
        self.key_separator: Union[str, bool] = settings.key_separator
        self.default_ns = settings.default_ns
        self.namespaces: List[str] = list(settings.ns)
        self.diagnostics = diagnostics
        self._data: Dict[str, Dict[str, ResourceTree]] = copy.deepcopy(data or {})
        self._lock = threading.RLock()

    def _split(self, key: str) -> List[str]:
        if self.key_separator:
            return key.split(self.key_separator)
        return [key]

    def _emit(self, event_type: EventType, **payload: Any) -> None:
        if self.diagnostics:
            self.diagnostics.emit(event_type, **payload)

    def add_namespaces(self, namespaces: Union[str, Iterable[str]]) -> None:
        if isinstance(namespaces, str):
            namespaces = [namespaces]
        with self._lock:
            for ns in namespaces:
                if ns not in self.namespaces:
                    self.namespaces.append(ns)

    def remove_namespaces(self, namespaces: Union[str, Iterable[str]]) -> None:
        if isinstance(namespaces, str):
            namespaces = [namespaces]
        with self._lock:
            for ns in namespaces:
                if ns in self.namespaces:
                    self.namespaces.remove(ns)

    def get_resource(self, lng: str, ns: str, key: Optional[str] = None) -> Any:
        """Read a leaf or subtree.

        Nested paths use ``key_separator``; when the nested path is absent the
        literal key is tried so flat bundles with separators in keys work.

        Args:
            lng: Language tag.
            ns: Namespace.
            key: Optional key path; None returns the whole bundle.

        Returns:
            The value (subtrees deep-copied) or None when absent.
        """
        with self._lock:
            bundle = self._data.get(lng, {}).get(ns)
            if bundle is None:
                return None
            if key is None:
                return copy.deepcopy(bundle)

            value = get_path(bundle, self._split(key))
            if value is None and self.key_separator and key in bundle:
                value = bundle[key]
            if isinstance(value, (dict, list)):
                return copy.deepcopy(value)
            return value

    def add_resource(
        self, lng: str, ns: str, key: str, value: Any, silent: bool = False
    ) -> None:
        """Set a single value at ``key``, overwriting what is there."""
        with self._lock:
            bundle = self._data.setdefault(lng, {}).setdefault(ns, {})
            set_path(bundle, self._split(key), copy.deepcopy(value))
            self.add_namespaces(ns)
        if not silent:
            self._emit(EventType.ADDED, lng=lng, ns=ns, key=key, value=value)

    def add_resources(self, lng: str, ns: str, resources: Dict[str, Any]) -> None:
        """Set several flat ``key -> value`` entries, emitting one event."""
        with self._lock:
            for key, value in resources.items():
                self.add_resource(lng, ns, key, value, silent=True)
        self._emit(EventType.ADDED, lng=lng, ns=ns, keys=list(resources))

    def add_resource_bundle(
        self,
        lng: str,
        ns: str,
        resources: ResourceTree,
        deep: bool = False,
        overwrite: bool = False,
    ) -> None:
        """Merge a tree into the (language, namespace) bundle.

        Args:
            lng: Language tag.
            ns: Namespace.
            resources: Tree to merge.
            deep: Merge nested subtrees key by key instead of replacing
                top-level entries wholesale.
            overwrite: Replace existing values at colliding paths.
        """
        with self._lock:
            bundle = self._data.setdefault(lng, {}).setdefault(ns, {})
            if deep:
                deep_merge(bundle, resources, overwrite)
            else:
                for key, value in resources.items():
                    if key not in bundle or overwrite:
                        bundle[key] = copy.deepcopy(value)
            self.add_namespaces(ns)
        logger.debug(
            "resource_bundle_added", lng=lng, ns=ns, deep=deep, overwrite=overwrite
        )
        self._emit(EventType.ADDED, lng=lng, ns=ns)

    def replace_resource_bundle(
        self, lng: str, ns: str, resources: ResourceTree
    ) -> None:
        """Atomically swap the whole (language, namespace) bundle."""
        replacement = copy.deepcopy(resources)
        with self._lock:
            self._data.setdefault(lng, {})[ns] = replacement
            self.add_namespaces(ns)
        self._emit(EventType.ADDED, lng=lng, ns=ns, replaced=True)

    def remove_resource_bundle(self, lng: str, ns: str) -> None:
        """Delete the (language, namespace) bundle if present."""
        with self._lock:
            languages = self._data.get(lng)
            if not languages or ns not in languages:
                return
            del languages[ns]
            if not languages:
                del self._data[lng]
        self._emit(EventType.REMOVED, lng=lng, ns=ns)

    def has_resource_bundle(self, lng: str, ns: str) -> bool:
        with self._lock:
            return ns in self._data.get(lng, {})

    def get_resource_bundle(self, lng: str, ns: Optional[str] = None) -> Optional[ResourceTree]:
        """Return a copy of the bundle (``default_ns`` when ``ns`` omitted)."""
        return self.get_resource(lng, ns or self.default_ns)

    def languages(self) -> List[str]:
        with self._lock:
            return list(self._data)

    def to_dict(self) -> Dict[str, Dict[str, ResourceTree]]:
        """Deep copy of every bundle."""
        with self._lock:
            return copy.deepcopy(self._data)
