"""Plural suffix resolution.

Each language maps to a rule: the list of category numbers it distinguishes
and a selector returning the index of the category for a count. Suffixes are
appended to the base key by the translator.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

from i18n_core.i18n.errors import ConfigurationError
from i18n_core.i18n.languages import LanguageUtils
from i18n_core.logging import get_module_logger

logger = get_module_logger()

Number = Union[int, float]

COMPATIBILITY_FORMATS = ("v1", "v2")


@dataclass(frozen=True)
class PluralRule:
    """Plural categories of a language.

    Attributes:
        numbers: Category numbers, indexed by the selector result.
        select: Returns the category index for an absolute count.
    """

    numbers: tuple
    select: Callable[[Number], int]


def _n(n: Number) -> Number:
    return int(n) if float(n).is_integer() else n


# Selectors keyed by rule id, n is always non-negative
PLURAL_SELECTORS: Dict[int, Callable[[Number], int]] = {
    1: lambda n: int(n > 1),
    2: lambda n: int(n != 1),
    3: lambda n: 0,
    4: lambda n: (
        0
        if n % 10 == 1 and n % 100 != 11
        else 1
        if 2 <= n % 10 <= 4 and (n % 100 < 10 or n % 100 >= 20)
        else 2
    ),
    5: lambda n: (
        0
        if n == 0
        else 1
        if n == 1
        else 2
        if n == 2
        else 3
        if 3 <= n % 100 <= 10
        else 4
        if n % 100 >= 11
        else 5
    ),
    6: lambda n: 0 if n == 1 else 1 if 2 <= n <= 4 else 2,
    7: lambda n: (
        0
        if n == 1
        else 1
        if 2 <= n % 10 <= 4 and (n % 100 < 10 or n % 100 >= 20)
        else 2
    ),
    8: lambda n: 0 if n == 1 else 1 if n == 2 else 2 if n not in (8, 11) else 3,
    9: lambda n: int(n >= 2),
    10: lambda n: 0 if n == 1 else 1 if n == 2 else 2 if n < 7 else 3 if n < 11 else 4,
    11: lambda n: (
        0 if n in (1, 11) else 1 if n in (2, 12) else 2 if 2 < n < 20 else 3
    ),
    12: lambda n: int(n % 10 != 1 or n % 100 == 11),
    13: lambda n: int(n != 0),
    14: lambda n: 0 if n == 1 else 1 if n == 2 else 2 if n == 3 else 3,
    15: lambda n: (
        0
        if n % 10 == 1 and n % 100 != 11
        else 1
        if n % 10 >= 2 and (n % 100 < 10 or n % 100 >= 20)
        else 2
    ),
    16: lambda n: 0 if n % 10 == 1 and n % 100 != 11 else 1 if n != 0 else 2,
    17: lambda n: 0 if n == 1 or n % 10 == 1 else 1,
    18: lambda n: 0 if n == 0 else 1 if n == 1 else 2,
    19: lambda n: (
        0
        if n == 1
        else 1
        if n == 0 or 1 < n % 100 < 11
        else 2
        if 10 < n % 100 < 20
        else 3
    ),
    20: lambda n: 0 if n == 1 else 1 if n == 0 or 0 < n % 100 < 20 else 2,
    21: lambda n: 1 if n % 100 == 1 else 2 if n % 100 == 2 else 3 if n % 100 in (3, 4) else 0,
}

# (languages, category numbers, selector id)
PLURAL_SETS: List[tuple] = [
    (
        ["ach", "ak", "am", "arn", "br", "fil", "gun", "ln", "mfe", "mg", "mi",
         "oc", "pt-BR", "tg", "ti", "tr", "uz", "wa"],
        (1, 2),
        1,
    ),
    (
        ["af", "an", "ast", "az", "bg", "bn", "ca", "da", "de", "dev", "el", "en",
         "eo", "es", "et", "eu", "fi", "fo", "fur", "fy", "gl", "gu", "ha", "he",
         "hi", "hu", "hy", "ia", "it", "kn", "ku", "lb", "mai", "ml", "mn", "mr",
         "nah", "nap", "nb", "ne", "nl", "nn", "no", "nso", "pa", "pap", "pms",
         "ps", "pt", "rm", "sco", "se", "si", "so", "son", "sq", "sv", "sw", "ta",
         "te", "tk", "ur", "yo"],
        (1, 2),
        2,
    ),
    (
        ["ay", "bo", "cgg", "fa", "id", "ja", "jbo", "ka", "kk", "km", "ko", "ky",
         "lo", "ms", "sah", "su", "th", "tt", "ug", "vi", "wo", "zh"],
        (1,),
        3,
    ),
    (["be", "bs", "dz", "hr", "ru", "sr", "uk"], (1, 2, 5), 4),
    (["ar"], (0, 1, 2, 3, 11, 100), 5),
    (["cs", "sk"], (1, 2, 5), 6),
    (["csb", "pl"], (1, 2, 5), 7),
    (["cy"], (1, 2, 3, 8), 8),
    (["fr"], (1, 2), 9),
    (["ga"], (1, 2, 3, 7, 11), 10),
    (["gd"], (1, 2, 3, 20), 11),
    (["is"], (1, 2), 12),
    (["jv"], (0, 1), 13),
    (["kw"], (1, 2, 3, 4), 14),
    (["lt"], (1, 2, 10), 15),
    (["lv"], (1, 2, 0), 16),
    (["mk"], (1, 2), 17),
    (["mnk"], (0, 1, 2), 18),
    (["mt"], (1, 2, 11, 20), 19),
    (["or"], (2, 1), 2),
    (["ro"], (1, 2, 20), 20),
    (["sl"], (5, 1, 2, 3), 21),
]

DEFAULT_RULE = PluralRule(numbers=(1, 2), select=PLURAL_SELECTORS[2])


def build_rules(sets: List[tuple]) -> Dict[str, PluralRule]:
    """Build the language → rule table, failing fast on unusable entries."""
    rules: Dict[str, PluralRule] = {}
    for languages, numbers, selector_id in sets:
        selector = PLURAL_SELECTORS.get(selector_id)
        if selector is None:
            raise ConfigurationError(f"Unknown plural selector: {selector_id}")
        if not numbers:
            raise ConfigurationError(f"Plural rule for {languages} has no categories")
        rule = PluralRule(numbers=tuple(numbers), select=selector)
        for language in languages:
            rules[language.lower()] = rule
    return rules


class PluralResolver:
    """Selects the plural key suffix for a language and a count.

    Attributes:
        separator: Prepended to every non-empty suffix.
        compatibility_json: "v2" (named/indexed suffixes) or "v1" (legacy
            ``_plural_<n>`` suffixes).
    """

    def __init__(
        self,
        language_utils: LanguageUtils,
        separator: str = "_",
        compatibility_json: str = "v2",
    ):
        if compatibility_json not in COMPATIBILITY_FORMATS:
            raise ConfigurationError(
                f"Unsupported compatibility_json: {compatibility_json}"
            )
        self.language_utils = language_utils
        self.separator = separator
        self.compatibility_json = compatibility_json
        self.rules = build_rules(PLURAL_SETS)

    def add_rule(self, lng: str, rule: PluralRule) -> None:
        """Register a custom rule for a language code.

        Raises:
            ConfigurationError: If the rule has no categories or no selector.
        """
        if not rule.numbers or not callable(rule.select):
            raise ConfigurationError(f"Invalid plural rule for {lng}")
        self.rules[lng.lower()] = rule

    def get_rule(self, lng: str) -> Optional[PluralRule]:
        """Rule for the exact code, else for its language part."""
        rule = self.rules.get(lng.lower())
        if rule is None:
            rule = self.rules.get(self.language_utils.get_language_part(lng).lower())
        return rule

    def needs_plural(self, lng: str) -> bool:
        return len((self.get_rule(lng) or DEFAULT_RULE).numbers) > 1

    def get_suffix(self, lng: str, count: Number) -> str:
        """Return the plural suffix for ``count`` in ``lng``.

        Unknown languages use the default two-category rule.

        Returns:
            Suffix including the separator, or "" for the singular/base key.
        """
        rule = self.get_rule(lng)
        if rule is None:
            logger.debug("no_plural_rule_found", lng=lng)
            rule = DEFAULT_RULE

        if len(rule.numbers) == 1:
            return ""

        index = rule.select(_n(abs(count)))
        number = rule.numbers[index]

        # two-form languages use "" / "_plural" in both formats
        if len(rule.numbers) == 2 and rule.numbers[0] == 1:
            return "" if number == 1 else f"{self.separator}plural"

        if self.compatibility_json == "v1":
            if number == 1:
                return ""
            return f"{self.separator}plural_{number}"
        return f"{self.separator}{index}"
