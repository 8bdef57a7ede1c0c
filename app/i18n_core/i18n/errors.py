"""Error taxonomy for the translation core.

Only loading and configuration problems are exceptions. Missing keys and
interpolation overflow are diagnostics and never raised.
"""

from typing import Dict, Tuple


class I18nError(Exception):
    """Base class for translation core errors."""


class FetchError(I18nError):
    """A backend or cache read failed.

    Attributes:
        retryable: Whether the connector may retry the fetch.
    """

    def __init__(self, message: str, retryable: bool = True):
        super().__init__(message)
        self.retryable = retryable


class LoadError(I18nError):
    """Aggregate of the pairs a load batch could not fetch.

    Attributes:
        failures: Mapping of (language, namespace) to the last error message.
    """

    def __init__(self, failures: Dict[Tuple[str, str], str]):
        self.failures = dict(failures)
        pairs = ", ".join(f"{lng}|{ns}" for lng, ns in self.failures)
        super().__init__(f"Failed loading {len(self.failures)} bundle(s): {pairs}")


class ConfigurationError(I18nError, ValueError):
    """Static configuration is unusable (raised at construction time)."""
