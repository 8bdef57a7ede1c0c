"""Factory functions for creating i18n instances.

Provides convenience functions for building an ``I18n`` wired to the YAML
backend and the in-memory cache.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from i18n_core.configuration import I18nSettings
from i18n_core.i18n.backends import InMemoryCache, YAMLBackend
from i18n_core.i18n.detectors import LanguageDetector
from i18n_core.i18n.errors import LoadError
from i18n_core.i18n.interpolator import Formatter
from i18n_core.i18n.postprocessor import PostProcessor
from i18n_core.i18n.service import I18n
from i18n_core.logging import get_module_logger

logger = get_module_logger()


def create_i18n(
    translations_dir: Optional[Path] = None,
    settings: Optional[I18nSettings] = None,
    use_cache: bool = True,
    cache_expiration_seconds: Optional[float] = None,
    resources: Optional[Dict[str, Dict[str, Dict[str, Any]]]] = None,
    language_detector: Optional[LanguageDetector] = None,
    post_processors: Iterable[PostProcessor] = (),
    formatters: Optional[Dict[str, Formatter]] = None,
) -> I18n:
    """Create and configure an I18n instance (not yet initialized).

    Args:
        translations_dir: Directory of ``<ns>.<lng>.yml`` files; without it
            the instance only serves ``resources``.
        settings: Translation settings (default: environment/.env driven).
        use_cache: Whether fetched bundles go through an in-memory cache.
        cache_expiration_seconds: Lifetime of cached bundles.
        resources: Pre-populated bundles ``{lng: {ns: tree}}``.
        language_detector: Optional detector used when no language is set.
        post_processors: Post-processors to register.
        formatters: Extra interpolation formatters.

    Returns:
        I18n: Configured instance; await ``init()`` before translating.

    Raises:
        ValueError: If translations_dir does not exist.

    Usage:
        i18n = create_i18n(Path("locales"), I18nSettings(lng="fr-FR", fallback_lng=["en"]))
        await i18n.init()
    """
    backend = YAMLBackend(translations_dir) if translations_dir is not None else None
    cache = (
        InMemoryCache(expiration_seconds=cache_expiration_seconds)
        if backend is not None and use_cache
        else None
    )

    i18n = I18n(
        settings,
        resources=resources,
        backend=backend,
        cache=cache,
        language_detector=language_detector,
        post_processors=post_processors,
        formatters=formatters,
    )

    logger.info(
        "i18n_created",
        translations_dir=str(translations_dir) if translations_dir else None,
        use_cache=cache is not None,
    )
    return i18n


async def create_initialized_i18n(
    translations_dir: Optional[Path] = None,
    settings: Optional[I18nSettings] = None,
    **kwargs: Any,
) -> I18n:
    """Create an instance and await its initial load.

    Load failures are logged, never raised: untranslated keys render as
    themselves until the bundles become available.
    """
    i18n = create_i18n(translations_dir, settings, **kwargs)
    error: Optional[LoadError] = await i18n.init()
    if error:
        logger.warning("i18n_initialized_with_errors", failures=len(error.failures))
    return i18n
