"""Language detection collaborators.

A detector supplies the language when ``change_language`` is called without
one, and remembers the language finally chosen.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple, Union

from i18n_core.logging import get_module_logger

logger = get_module_logger().bind(component="i18n.detector")


class LanguageDetector(ABC):
    """Contract for language detection plugins."""

    @abstractmethod
    def detect(self) -> Optional[str]:
        """Return the detected language tag, or None."""

    @abstractmethod
    def cache_user_language(self, lng: str) -> None:
        """Remember the language in use."""


def parse_accept_language(header: Optional[str]) -> List[Tuple[str, float]]:
    """Parse an Accept-Language header into (range, quality), best first.

    ``"en-US,en;q=0.9,fr-FR;q=0.8"`` -> ``[("en-US", 1.0), ("en", 0.9), ("fr-FR", 0.8)]``.
    Invalid qualities count as 1.0, wildcards are dropped.
    """
    if not header:
        return []

    preferences = []
    for part in header.split(","):
        lang_range = part.split(";")[0].strip()
        if not lang_range or lang_range == "*":
            continue
        quality = 1.0
        if ";" in part and "q=" in part:
            try:
                quality = float(part.split("q=")[1])
            except ValueError:
                quality = 1.0
        preferences.append((lang_range, quality))

    return sorted(preferences, key=lambda x: x[1], reverse=True)


def find_best_match(
    requested: List[str], available: List[str], default: Optional[str] = None
) -> Optional[str]:
    """Find best matching language from available options.

    For each requested tag, an exact (case-insensitive) match wins over a
    language-only match ("en-US" matches "en").
    """
    for req_lang in requested:
        for avail_lang in available:
            if req_lang.lower() == avail_lang.lower():
                return avail_lang

        req_part = req_lang.split("-")[0].lower()
        for avail_lang in available:
            if avail_lang.split("-")[0].lower() == req_part:
                return avail_lang

    return default


class AcceptLanguageDetector(LanguageDetector):
    """Detects the language from an HTTP Accept-Language header.

    Attributes:
        supported: Tags the application can serve; when empty the header's
            best entry is returned as is.
        default: Returned when nothing matches.
        cached_language: Last language passed to ``cache_user_language``.
    """

    def __init__(
        self,
        header: Union[str, Callable[[], Optional[str]], None],
        supported: Optional[List[str]] = None,
        default: Optional[str] = None,
    ):
        self._header = header
        self.supported = list(supported or [])
        self.default = default
        self.cached_language: Optional[str] = None

    def _header_value(self) -> Optional[str]:
        return self._header() if callable(self._header) else self._header

    def detect(self) -> Optional[str]:
        if self.cached_language:
            return self.cached_language

        requested = [lang for lang, _ in parse_accept_language(self._header_value())]
        if not self.supported:
            detected = requested[0] if requested else self.default
        else:
            detected = find_best_match(requested, self.supported, self.default)

        if detected:
            logger.info("detected_language", lng=detected)
        else:
            logger.info("no_language_detected")
        return detected

    def cache_user_language(self, lng: str) -> None:
        self.cached_language = lng
