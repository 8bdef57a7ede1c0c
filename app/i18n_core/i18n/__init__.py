"""Translation core.

Resolves translation keys for a runtime language from per-language,
per-namespace bundles that are either pre-populated or loaded
asynchronously through a backend.

Main components:
- languages: LanguageUtils (fallback hierarchy)
- store: ResourceStore (bundle tree)
- plural: PluralResolver (plural suffixes)
- interpolator: Interpolator (variables, formatters, nesting)
- connector: BackendConnector (deduplicated, retrying loads)
- translator: Translator (key resolution)
- service: I18n facade
"""

from i18n_core.i18n.backends import Backend, Cache, InMemoryCache, YAMLBackend
from i18n_core.i18n.connector import BackendConnector
from i18n_core.i18n.detectors import AcceptLanguageDetector, LanguageDetector
from i18n_core.i18n.errors import ConfigurationError, FetchError, I18nError, LoadError
from i18n_core.i18n.factory import create_i18n, create_initialized_i18n
from i18n_core.i18n.interpolator import Interpolator
from i18n_core.i18n.languages import LanguageUtils
from i18n_core.i18n.models import LoadRecord, LoadState
from i18n_core.i18n.plural import PluralResolver, PluralRule
from i18n_core.i18n.postprocessor import PostProcessor, PostProcessorRegistry
from i18n_core.i18n.service import I18n
from i18n_core.i18n.store import ResourceStore
from i18n_core.i18n.translator import Translator

__all__ = [
    "AcceptLanguageDetector",
    "Backend",
    "BackendConnector",
    "Cache",
    "ConfigurationError",
    "FetchError",
    "I18n",
    "I18nError",
    "InMemoryCache",
    "Interpolator",
    "LanguageDetector",
    "LanguageUtils",
    "LoadError",
    "LoadRecord",
    "LoadState",
    "PluralResolver",
    "PluralRule",
    "PostProcessor",
    "PostProcessorRegistry",
    "ResourceStore",
    "Translator",
    "YAMLBackend",
    "create_i18n",
    "create_initialized_i18n",
]
