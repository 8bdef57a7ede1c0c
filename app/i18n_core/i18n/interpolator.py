"""String interpolation and nested translation expansion.

Two placeholder syntaxes are supported (delimiters are configurable):

* ``{{name}}`` substitutes a variable, ``{{user.name}}`` walks nested
  mappings or attributes, ``{{name, uppercase}}`` pipes the value through
  named formatters and ``{{- name}}`` skips HTML escaping.
* ``$t(other.key)`` or ``$t(other.key, {"count": 2})`` substitutes another
  translation, resolved through a callback with a bounded depth. A key
  is never expanded inside its own expansion.

Interpolation never raises: unresolved placeholders are left verbatim (or
emptied in strict mode).
"""

import html
import json
import re
from collections.abc import Mapping
from typing import Any, Callable, Dict, Optional, Tuple

from i18n_core.configuration import InterpolationSettings
from i18n_core.events import DiagnosticsChannel, EventType
from i18n_core.logging import get_module_logger

logger = get_module_logger()

Formatter = Callable[[Any, Optional[str]], Any]
NestedResolver = Callable[[str, Dict[str, Any], int, Tuple[str, ...]], Any]

_MISSING = object()

DEFAULT_FORMATTERS: Dict[str, Formatter] = {
    "uppercase": lambda value, lng: str(value).upper(),
    "lowercase": lambda value, lng: str(value).lower(),
    "capitalize": lambda value, lng: str(value)[:1].upper() + str(value)[1:],
}


def lookup_variable(variables: Any, name: str) -> Any:
    """Find ``name`` in ``variables``, walking dotted paths.

    An exact key wins over a dotted walk. Returns ``_MISSING`` when absent.
    """
    if isinstance(variables, Mapping) and name in variables:
        return variables[name]

    node = variables
    for segment in name.split("."):
        if isinstance(node, Mapping):
            if segment not in node:
                return _MISSING
            node = node[segment]
        elif hasattr(node, segment):
            node = getattr(node, segment)
        else:
            return _MISSING
    return node


class Interpolator:
    """Substitutes variables and nested translations into templates.

    Attributes:
        settings: Placeholder syntax and escaping settings.
        formatters: Named value formatters available to placeholders.
    """

    def __init__(
        self,
        settings: Optional[InterpolationSettings] = None,
        formatters: Optional[Dict[str, Formatter]] = None,
        diagnostics: Optional[DiagnosticsChannel] = None,
    ):
        self.settings = settings or InterpolationSettings()
        self.formatters: Dict[str, Formatter] = dict(DEFAULT_FORMATTERS)
        self.formatters.update(formatters or {})
        self.diagnostics = diagnostics
        self._compile()

    def _compile(self) -> None:
        s = self.settings
        unescape = (
            f"(?P<unescape>{re.escape(s.unescape_prefix)})?" if s.unescape_prefix else ""
        )
        self.regexp = re.compile(
            re.escape(s.prefix) + unescape + r"\s*(?P<body>.+?)\s*" + re.escape(s.suffix)
        )
        self.nesting_regexp = re.compile(
            re.escape(s.nesting_prefix) + r"(?P<body>.+?)" + re.escape(s.nesting_suffix)
        )

    def add_formatter(self, name: str, formatter: Formatter) -> None:
        self.formatters[name] = formatter

    def _format(self, value: Any, names, lng: Optional[str]) -> Any:
        for name in names:
            formatter = self.formatters.get(name)
            if formatter is None:
                logger.warning("unknown_formatter", formatter=name)
                continue
            try:
                value = formatter(value, lng)
            except Exception as e:  # pylint: disable=broad-except
                logger.error("formatter_failed", formatter=name, error=str(e))
        return value

    def interpolate(
        self,
        template: str,
        variables: Optional[Any] = None,
        lng: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Substitute ``{{...}}`` placeholders.

        Args:
            template: String containing placeholders.
            variables: Mapping (or object) providing values.
            lng: Language passed to formatters.
            overrides: Per-call settings (``escape_value``, ``strict``).

        Returns:
            The interpolated string.
        """
        if not isinstance(template, str) or self.settings.prefix not in template:
            return template

        overrides = overrides or {}
        escape_value = overrides.get("escape_value", self.settings.escape_value)
        strict = overrides.get("strict", self.settings.strict)

        data: Dict[str, Any] = dict(self.settings.default_variables)
        if isinstance(variables, Mapping):
            data.update(variables)
            source: Any = data
        elif variables is not None:
            source = variables
        else:
            source = data

        def replace(match: "re.Match[str]") -> str:
            parts = [p.strip() for p in match.group("body").split(self.settings.format_separator)]
            name, format_names = parts[0], [p for p in parts[1:] if p]

            value = lookup_variable(source, name)
            if value is _MISSING and source is not data:
                value = lookup_variable(data, name)
            if value is _MISSING or value is None:
                logger.debug("missing_interpolation_variable", variable=name)
                return "" if strict else match.group(0)

            value = self._format(value, format_names, lng)
            if not isinstance(value, str):
                value = str(value)
            unescaped = match.groupdict().get("unescape")
            if escape_value and not unescaped:
                value = html.escape(value, quote=True)
            return value

        return self.regexp.sub(replace, template)

    def _parse_nested(
        self, body: str, options: Dict[str, Any], lng: Optional[str]
    ) -> Tuple[str, Dict[str, Any]]:
        cloned = {k: v for k, v in options.items() if k != "default_value"}
        if "," not in body:
            return body.strip(), cloned

        key, options_string = body.split(",", 1)
        options_string = self.interpolate(
            options_string, cloned, lng, {"escape_value": False}
        )
        try:
            parsed = json.loads(options_string)
        except ValueError as e:
            logger.error(
                "failed_parsing_nesting_options",
                options=options_string,
                error=str(e),
            )
            return key.strip(), cloned
        if isinstance(parsed, dict):
            cloned.update(parsed)
        return key.strip(), cloned

    def nest(
        self,
        template: str,
        resolve: NestedResolver,
        options: Optional[Dict[str, Any]] = None,
        depth: int = 0,
        lng: Optional[str] = None,
        chain: Tuple[str, ...] = (),
    ) -> str:
        """Expand ``$t(...)`` placeholders through ``resolve``.

        Each nested lookup runs at ``depth + 1``. At ``max_nesting_depth``, or
        when the key is already being expanded further up ``chain``,
        placeholders stay verbatim and an overflow diagnostic is emitted.

        Args:
            template: String that may contain nested placeholders.
            resolve: Callback ``(key, options, depth, chain) -> value``.
            options: Options of the enclosing translation.
            depth: Current nesting depth.
            lng: Language used to interpolate nesting options.
            chain: Keys whose expansion encloses ``template``.

        Returns:
            The expanded string.
        """
        if not isinstance(template, str) or self.settings.nesting_prefix not in template:
            return template

        options = options or {}

        def replace(match: "re.Match[str]") -> str:
            key, nested_options = self._parse_nested(match.group("body"), options, lng)
            recursive = key in chain
            if recursive or depth >= self.settings.max_nesting_depth:
                logger.warning(
                    "interpolation_overflow",
                    key=key,
                    depth=depth,
                    max_depth=self.settings.max_nesting_depth,
                    recursive=recursive,
                )
                if self.diagnostics:
                    self.diagnostics.emit(
                        EventType.INTERPOLATION_OVERFLOW,
                        key=key,
                        depth=depth,
                        recursive=recursive,
                        placeholder=match.group(0),
                    )
                return match.group(0)

            value = resolve(key, nested_options, depth + 1, chain)
            if value is None:
                logger.warning("missing_nested_value", key=key)
                return ""
            return value if isinstance(value, str) else str(value)

        return self.nesting_regexp.sub(replace, template)
