"""Translation core settings."""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from i18n_core.configuration.base import I18nBaseSettings


def _is_false(value: Any) -> bool:
    """True for False itself and its environment spelling ("false")."""
    return value is False or (isinstance(value, str) and value.strip().lower() == "false")


class InterpolationSettings(BaseModel):
    """Placeholder syntax and escaping behavior for the interpolator.

    Attributes:
        prefix: Opening delimiter of a substitution placeholder.
        suffix: Closing delimiter of a substitution placeholder.
        unescape_prefix: Marker right after ``prefix`` that disables escaping
            for that placeholder (``{{- html}}``).
        nesting_prefix: Opening delimiter of a nested translation (``$t(``).
        nesting_suffix: Closing delimiter of a nested translation.
        format_separator: Separates the variable name from formatter names.
        escape_value: HTML-escape substituted values.
        strict: Replace unresolved placeholders with an empty string instead
            of leaving them verbatim.
        max_nesting_depth: Maximum depth of nested translation lookups.
        default_variables: Variables available to every interpolation.
    """

    prefix: str = "{{"
    suffix: str = "}}"
    unescape_prefix: str = "-"
    nesting_prefix: str = "$t("
    nesting_suffix: str = ")"
    format_separator: str = ","
    escape_value: bool = True
    strict: bool = False
    max_nesting_depth: int = 10
    default_variables: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("prefix", "suffix", "nesting_prefix", "nesting_suffix")
    @classmethod
    def _not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("interpolation delimiters must not be empty")
        return value

    @field_validator("max_nesting_depth")
    @classmethod
    def _positive_depth(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_nesting_depth must be at least 1")
        return value


class LoadRetrySettings(BaseModel):
    """Retry policy for backend fetches.

    Delay calculation: min(base_delay_seconds * (2 ^ (attempt - 1)), max_delay_seconds)

    Example with defaults (base=0.25s, max=5s):
        Retry 1: 0.25s
        Retry 2: 0.5s
        Retry 3: 1s
        Retry 4: 2s
        Retry 5: 4s
    """

    max_retries: int = 5
    base_delay_seconds: float = 0.25
    max_delay_seconds: float = 5.0

    @field_validator("max_retries")
    @classmethod
    def _non_negative_retries(cls, value: int) -> int:
        if value < 0:
            raise ValueError("max_retries must be >= 0")
        return value

    @field_validator("base_delay_seconds", "max_delay_seconds")
    @classmethod
    def _non_negative_delay(cls, value: float) -> float:
        if value < 0:
            raise ValueError("retry delays must be >= 0")
        return value

    def delay_for(self, attempt: int) -> float:
        """Return the backoff delay before retry number ``attempt`` (1-based)."""
        return min(
            self.base_delay_seconds * (2 ** max(attempt - 1, 0)),
            self.max_delay_seconds,
        )


class I18nSettings(I18nBaseSettings):
    """Translation core configuration.

    Environment Variables:
        I18N_LNG: Initial language (default: none, detector or fallback used)
        I18N_FALLBACK_LNG: Fallback chain, JSON list or mapping (default: ["dev"])
        I18N_SUPPORTED_LNGS: Optional JSON list of accepted language codes
        I18N_NS: JSON list of namespaces to load (default: ["translation"])
        I18N_DEFAULT_NS: Namespace used when none requested
        I18N_LOAD: Which hierarchy tiers are fetched: all, currentOnly, languageOnly
        I18N_LOOKUP_ORDER: Outer loop of key lookup: namespace or language
        I18N_SAVE_MISSING: Report missing keys to the backend

    Example:
        ```python
        settings = I18nSettings(
            lng="en-US",
            fallback_lng=["en"],
            ns=["common"],
            default_ns="common",
        )
        ```
    """

    lng: Optional[str] = Field(default=None, alias="I18N_LNG")
    fallback_lng: Union[List[str], Dict[str, List[str]]] = Field(
        default_factory=lambda: ["dev"],
        alias="I18N_FALLBACK_LNG",
        description="Fallback chain, or mapping of language to chain with a 'default' entry",
    )
    supported_lngs: Optional[List[str]] = Field(
        default=None, alias="I18N_SUPPORTED_LNGS"
    )
    lower_case_lng: bool = Field(default=False, alias="I18N_LOWER_CASE_LNG")
    preload: List[str] = Field(default_factory=list, alias="I18N_PRELOAD")

    ns: List[str] = Field(default_factory=lambda: ["translation"], alias="I18N_NS")
    default_ns: str = Field(default="translation", alias="I18N_DEFAULT_NS")
    fallback_ns: List[str] = Field(default_factory=list, alias="I18N_FALLBACK_NS")

    key_separator: Union[Literal[False], str] = Field(
        default=".", alias="I18N_KEY_SEPARATOR"
    )
    ns_separator: Union[Literal[False], str] = Field(
        default=":", alias="I18N_NS_SEPARATOR"
    )
    plural_separator: str = Field(default="_", alias="I18N_PLURAL_SEPARATOR")
    context_separator: str = Field(default="_", alias="I18N_CONTEXT_SEPARATOR")
    compatibility_json: Literal["v1", "v2"] = Field(
        default="v2", alias="I18N_COMPATIBILITY_JSON"
    )

    load: Literal["all", "currentOnly", "languageOnly"] = Field(
        default="all", alias="I18N_LOAD"
    )
    lookup_order: Literal["namespace", "language"] = Field(
        default="namespace", alias="I18N_LOOKUP_ORDER"
    )

    save_missing: bool = Field(default=False, alias="I18N_SAVE_MISSING")
    save_missing_to: Literal["fallback", "current", "all"] = Field(
        default="fallback", alias="I18N_SAVE_MISSING_TO"
    )
    return_objects: bool = Field(default=False, alias="I18N_RETURN_OBJECTS")
    join_arrays: Union[Literal[False], str] = Field(
        default=False, alias="I18N_JOIN_ARRAYS"
    )
    post_process: List[str] = Field(default_factory=list, alias="I18N_POST_PROCESS")

    interpolation: InterpolationSettings = Field(default_factory=InterpolationSettings)
    retry: LoadRetrySettings = Field(default_factory=LoadRetrySettings)

    @field_validator("fallback_lng", mode="before")
    @classmethod
    def _normalize_fallback(cls, value: Any) -> Any:
        if value is None or value is False:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("key_separator", "ns_separator", mode="before")
    @classmethod
    def _separator_or_false(cls, value: Any) -> Any:
        if _is_false(value):
            return False
        if value is True or value == "":
            raise ValueError("separators must be a non-empty string or False")
        return value

    @field_validator("join_arrays", mode="before")
    @classmethod
    def _joiner_or_false(cls, value: Any) -> Any:
        # an empty joiner disables joining
        if _is_false(value) or value == "":
            return False
        if value is True:
            raise ValueError("join_arrays must be a string or False")
        return value

    @field_validator("ns")
    @classmethod
    def _namespaces_not_empty(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("ns must list at least one namespace")
        return value
