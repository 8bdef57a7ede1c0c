"""Language code utilities and fallback hierarchy resolution.

Derives the ordered list of language codes to try for a requested language:
the exact tag, its language-only part, then the configured fallback chain.
Codes are compared case-insensitively but returned with the caller's casing.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Union

from i18n_core.configuration import I18nSettings
from i18n_core.logging import get_module_logger

logger = get_module_logger().bind(component="i18n.languages")

DEFAULT_LANGUAGE = "dev"

# Norwegian region tags name the written standard, not the region
SPECIAL_LANGUAGE_PARTS = {"nb-no": "nb", "nn-no": "nn"}

FallbackConfig = Union[str, Sequence[str], Dict[str, List[str]], None]


class LanguageUtils:
    """Language tag helpers bound to one configuration.

    Attributes:
        fallback_lng: Fallback chain or mapping from settings.
        supported_lngs: Optional allow-list of codes.
        load: Which hierarchy tiers are fetched.
    """

    def __init__(self, settings: Optional[I18nSettings] = None):
        settings = settings or I18nSettings()
        self.fallback_lng = settings.fallback_lng
        self.supported_lngs = settings.supported_lngs
        self.lower_case_lng = settings.lower_case_lng
        self.load = settings.load
        self._supported = (
            {code.lower() for code in settings.supported_lngs}
            if settings.supported_lngs
            else None
        )

    def format_language_code(self, code: str) -> str:
        """Return ``code`` trimmed, lower-cased when ``lower_case_lng`` is set."""
        code = code.strip()
        return code.lower() if self.lower_case_lng else code

    def get_language_part(self, code: str) -> str:
        """Get language part of a tag (e.g., "en" from "en-US")."""
        code = code.replace("_", "-")
        if "-" not in code:
            return self.format_language_code(code)
        special = SPECIAL_LANGUAGE_PARTS.get(code.lower())
        if special:
            return special
        return self.format_language_code(code.split("-")[0])

    @staticmethod
    def get_region_part(code: str) -> str:
        """Get region part of a tag (e.g., "US" from "en-US"), "" if none."""
        parts = code.replace("_", "-").split("-")
        return parts[-1] if len(parts) > 1 else ""

    def is_supported(self, code: str) -> bool:
        """Check a code against ``supported_lngs`` (always True when unset)."""
        if self._supported is None:
            return True
        if code.lower() in self._supported:
            return True
        if self.load == "languageOnly":
            return self.get_language_part(code).lower() in self._supported
        return False

    def get_fallback_codes(
        self, code: Optional[str] = None, fallback_lng: FallbackConfig = None
    ) -> List[str]:
        """Resolve the configured fallback chain for ``code``.

        A mapping is searched by exact tag, then by language part, then by
        its ``"default"`` entry.
        """
        fallbacks = self.fallback_lng if fallback_lng is None else fallback_lng
        if not fallbacks:
            return []
        if isinstance(fallbacks, str):
            return [fallbacks]
        if isinstance(fallbacks, dict):
            candidates: List[str] = []
            if code:
                candidates = [code, self.get_language_part(code)]
            for candidate in candidates + ["default"]:
                chain = _lookup_case_insensitive(fallbacks, candidate)
                if chain:
                    return [chain] if isinstance(chain, str) else list(chain)
            return []
        return list(fallbacks)

    def resolve_hierarchy(
        self, code: Optional[str], fallback_lng: FallbackConfig = None
    ) -> List[str]:
        """Compute the ordered, deduplicated fallback hierarchy for ``code``.

        Order: exact tag, language-only part (when the tag has a region),
        then every fallback code. Unknown tags pass through unchanged. The
        result is never empty.

        Args:
            code: Requested language tag, or None.
            fallback_lng: Optional override of the configured fallback chain.

        Returns:
            Ordered list of language codes.
        """
        codes: List[str] = []
        seen = set()

        def add(candidate: str) -> None:
            if not candidate or candidate.lower() in seen:
                return
            if not self.is_supported(candidate):
                logger.warning("rejecting_unsupported_language", lng=candidate)
                return
            seen.add(candidate.lower())
            codes.append(candidate)

        if code:
            formatted = self.format_language_code(code)
            add(formatted)
            if self.get_region_part(formatted):
                add(self.get_language_part(formatted))

        fallbacks = self.get_fallback_codes(code, fallback_lng)
        for fallback in fallbacks:
            add(self.format_language_code(fallback))

        if not codes:
            codes = [self.format_language_code(c) for c in fallbacks[:1]] or [
                DEFAULT_LANGUAGE
            ]
        return codes

    def languages_to_load(self, code: Optional[str]) -> List[str]:
        """Hierarchy of ``code`` filtered by the ``load`` setting.

        ``all`` keeps every tier, ``currentOnly`` drops the derived
        language-only tier, ``languageOnly`` replaces the region tag with its
        language part. Fallback codes are always kept.
        """
        hierarchy = self.resolve_hierarchy(code)
        if self.load == "all" or not code:
            return hierarchy

        formatted = self.format_language_code(code)
        language_part = self.get_language_part(formatted)
        has_region = bool(self.get_region_part(formatted))
        fallbacks = {f.lower() for f in self.get_fallback_codes(code)}

        result: List[str] = []
        for candidate in hierarchy:
            lowered = candidate.lower()
            if lowered in fallbacks:
                result.append(candidate)
            elif self.load == "currentOnly":
                if not has_region or lowered == formatted.lower():
                    result.append(candidate)
            elif lowered == language_part.lower():
                result.append(candidate)
            elif not has_region:
                result.append(candidate)
        if self.load == "languageOnly" and has_region:
            if language_part.lower() not in {c.lower() for c in result}:
                result.insert(0, language_part)
        return _dedupe(result) or hierarchy


def _lookup_case_insensitive(mapping: Dict[str, List[str]], key: str):
    if key in mapping:
        return mapping[key]
    lowered = key.lower()
    for candidate, value in mapping.items():
        if candidate.lower() == lowered:
            return value
    return None


def _dedupe(codes: Iterable[str]) -> List[str]:
    seen = set()
    result = []
    for code in codes:
        if code.lower() not in seen:
            seen.add(code.lower())
            result.append(code)
    return result
