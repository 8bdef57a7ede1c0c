"""Collaborator contracts and reference implementations.

Defines what the connector expects from a backend and a cache, plus a
YAML filesystem backend and an in-memory cache.
"""

import threading
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from i18n_core.i18n.errors import FetchError
from i18n_core.logging import get_module_logger

logger = get_module_logger()

ResourceTree = Dict[str, Any]


class Backend(ABC):
    """Source of resource bundles.

    ``read`` may be a plain or an ``async`` method. Raising ``FetchError``
    with ``retryable=False`` stops the connector from retrying; any other
    exception is retried.
    """

    @abstractmethod
    def read(self, language: str, namespace: str) -> Optional[ResourceTree]:
        """Fetch the bundle for a pair, None when the source has none."""

    def create(
        self, languages: List[str], namespace: str, key: str, fallback_value: Any
    ) -> Any:
        """Persist a missing key. Backends that cannot store keys ignore it."""
        logger.debug(
            "save_missing_not_supported",
            backend=type(self).__name__,
            ns=namespace,
            key=key,
        )


class Cache(ABC):
    """Persistent copy of fetched bundles, consulted before the backend."""

    @abstractmethod
    def read(self, language: str, namespace: str) -> Optional[ResourceTree]:
        """Return the cached bundle or None."""

    @abstractmethod
    def write(self, language: str, namespace: str, resources: ResourceTree) -> None:
        """Store a bundle."""


class YAMLBackend(Backend):
    """Backend reading ``<namespace>.<language>.yml`` files from a directory.

    A missing file means the language has no bundle for that namespace and
    reads as None. Unparseable files fail without retry.

    Attributes:
        translations_dir: Path to directory containing YAML files.
    """

    def __init__(self, translations_dir: Path):
        """Initialize YAML backend.

        Args:
            translations_dir: Path to directory with YAML translation files.

        Raises:
            ValueError: If the directory does not exist.
        """
        self.translations_dir = Path(translations_dir)

        if not self.translations_dir.exists():
            raise ValueError(
                f"Translations directory not found: {self.translations_dir}"
            )

        logger.info(
            "initialized_yaml_backend",
            translations_dir=str(self.translations_dir),
        )

    def path_for(self, language: str, namespace: str) -> Path:
        return self.translations_dir / f"{namespace}.{language}.yml"

    def read(self, language: str, namespace: str) -> Optional[ResourceTree]:
        """Load one bundle from its YAML file.

        Raises:
            FetchError: If the file cannot be read or parsed.
        """
        yaml_file = self.path_for(language, namespace)
        if not yaml_file.exists():
            logger.debug("yaml_bundle_not_found", file=str(yaml_file))
            return None

        try:
            with open(yaml_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error("yaml_parse_error", file=str(yaml_file), error=str(e))
            raise FetchError(f"Failed to parse {yaml_file}: {e}", retryable=False) from e
        except OSError as e:
            raise FetchError(f"Failed to read {yaml_file}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning("invalid_yaml_format", file=str(yaml_file), expected="dict")
            raise FetchError(f"{yaml_file} does not contain a mapping", retryable=False)

        logger.info("loaded_yaml_bundle", lng=language, ns=namespace)
        return data

    def create(
        self, languages: List[str], namespace: str, key: str, fallback_value: Any
    ) -> None:
        """Append a missing key to each language file, keeping existing keys."""
        for language in languages:
            yaml_file = self.path_for(language, namespace)
            data: ResourceTree = {}
            if yaml_file.exists():
                with open(yaml_file, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            if key in data:
                continue
            data[key] = fallback_value
            with open(yaml_file, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, allow_unicode=True, sort_keys=True)
            logger.info("saved_missing_key", lng=language, ns=namespace, key=key)


class InMemoryCache(Cache):
    """Thread-safe in-memory bundle cache with optional expiration.

    Attributes:
        expiration_seconds: Entry lifetime, None for no expiry.
    """

    def __init__(self, expiration_seconds: Optional[float] = None):
        self.expiration_seconds = expiration_seconds
        self._entries: Dict[Tuple[str, str], Tuple[float, ResourceTree]] = {}
        self._lock = threading.Lock()

    def read(self, language: str, namespace: str) -> Optional[ResourceTree]:
        with self._lock:
            entry = self._entries.get((language, namespace))
            if entry is None:
                return None
            stored_at, resources = entry
            if (
                self.expiration_seconds is not None
                and time.monotonic() - stored_at > self.expiration_seconds
            ):
                del self._entries[(language, namespace)]
                logger.debug("cache_entry_expired", lng=language, ns=namespace)
                return None
            return resources

    def write(self, language: str, namespace: str, resources: ResourceTree) -> None:
        with self._lock:
            self._entries[(language, namespace)] = (time.monotonic(), resources)

    def clear(self) -> None:
        """Clear all cached bundles."""
        with self._lock:
            self._entries.clear()
        logger.info("cleared_bundle_cache")
