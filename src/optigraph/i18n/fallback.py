"""Locale table and fallback chains for content lookup.

When a page has no content in the requested locale, the renderer retries
with that locale's configured fallback, then the fallback's fallback, until
content is found or a locale without a fallback is reached.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Callable, Iterator, Literal, Mapping, Sequence, TypeVar

from optigraph.exceptions import ConfigurationError
from optigraph.i18n.locales import to_backend_locale
from optigraph.metrics.observability import get_logger

T = TypeVar("T")

DEFAULT_LOCALES: tuple[str, ...] = (
    "en",
    "nl",
    "nl-BE",
    "sv",
    "no",
    "fr",
    "fr-CA",
    "es",
    "it",
    "ar",
    "zh",
    "zh-Hans-HK",
    "de",
    "de-AT",
)
DEFAULT_LOCALE = "en"
DEFAULT_FALLBACKS: Mapping[str, str] = {
    "nl-BE": "nl",
    "fr-CA": "fr",
    "zh-Hans-HK": "zh",
    "de-AT": "de",
    "nl": "en",
    "sv": "en",
    "no": "en",
    "fr": "en",
    "es": "en",
    "it": "en",
    "ar": "en",
    "zh": "en",
    "de": "en",
}

_logger = get_logger("i18n")


def find_cycle(table: Mapping[str, str]) -> list[str] | None:
    """Return the locales forming a cycle in ``table``, or ``None`` if every chain terminates."""

    terminated: set[str] = set()
    for start in table:
        path: list[str] = []
        on_path: set[str] = set()
        current: str | None = start
        while current and current not in terminated:
            if current in on_path:
                return path[path.index(current):] + [current]
            path.append(current)
            on_path.add(current)
            current = table.get(current)
        terminated.update(path)
    return None


class FallbackChain:
    """Single-successor fallback table; construction rejects cyclic tables."""

    def __init__(self, table: Mapping[str, str]) -> None:
        self._table = {locale: target for locale, target in table.items() if target}
        cycle = find_cycle(self._table)
        if cycle:
            raise ConfigurationError(f"Locale fallback table contains a cycle: {' -> '.join(cycle)}")

    def __contains__(self, locale: object) -> bool:
        return locale in self._table

    def fallback_for(self, locale: str) -> str | None:
        return self._table.get(locale)

    def walk(self, locale: str) -> Iterator[str]:
        """Yield ``locale`` followed by each fallback in order."""

        current: str | None = locale
        while current:
            yield current
            current = self._table.get(current)

    def backend_chain(self, locale: str) -> list[str]:
        return [to_backend_locale(step) for step in self.walk(locale)]

    def resolve(self, locale: str, lookup: Callable[[str], T | None]) -> tuple[str, T] | None:
        """Return the first ``(locale, content)`` along the chain for which ``lookup`` finds content."""

        for step in self.walk(locale):
            found = lookup(step)
            if found is not None:
                if step != locale:
                    _logger.debug("i18n.fallback_used", requested=locale, served=step)
                return step, found
        return None


@dataclass(frozen=True)
class I18nConfig:
    locales: Sequence[str] = DEFAULT_LOCALES
    default_locale: str = DEFAULT_LOCALE
    prefix_default_locale: bool = False
    fallback_type: Literal["rewrite", "redirect"] = "rewrite"
    fallback: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_FALLBACKS))

    def __post_init__(self) -> None:
        if self.fallback_type not in ("rewrite", "redirect"):
            raise ConfigurationError(f"Unknown fallback type: {self.fallback_type}")
        _ = self.fallback_chain

    @cached_property
    def fallback_chain(self) -> FallbackChain:
        return FallbackChain(self.fallback)


def _string_list(value: Any, key: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(entry, str) and entry for entry in value):
        raise ConfigurationError(f"i18n override '{key}' must be a list of locale strings")
    return tuple(value)


def _string_mapping(value: Any, key: str) -> dict[str, str]:
    if not isinstance(value, Mapping) or not all(
        isinstance(locale, str) and isinstance(target, str) for locale, target in value.items()
    ):
        raise ConfigurationError(f"i18n override '{key}' must map locale strings to locale strings")
    return dict(value)


def _merge_override(parsed: Mapping[str, Any]) -> I18nConfig:
    defaults = I18nConfig()
    routing = parsed.get("routing") or {}
    if not isinstance(routing, Mapping):
        raise ConfigurationError("i18n override 'routing' must be an object")
    default_locale = parsed.get("defaultLocale") or defaults.default_locale
    if not isinstance(default_locale, str):
        raise ConfigurationError("i18n override 'defaultLocale' must be a string")
    fallback_type = routing.get("fallbackType") or defaults.fallback_type
    if not isinstance(fallback_type, str):
        raise ConfigurationError("i18n override 'routing.fallbackType' must be a string")
    prefix = routing.get("prefixDefaultLocale")
    locales = parsed.get("locales")
    fallback = parsed.get("fallback")
    return I18nConfig(
        locales=_string_list(locales, "locales") if locales else defaults.locales,
        default_locale=default_locale,
        prefix_default_locale=defaults.prefix_default_locale if prefix is None else bool(prefix),
        fallback_type=fallback_type,
        fallback=_string_mapping(fallback, "fallback") if fallback else dict(defaults.fallback),
    )


def load_i18n_config(raw_json: str | None = None) -> I18nConfig:
    """Build the locale table from an optional JSON override.

    Missing keys take their defaults. Unparseable JSON is logged and ignored;
    a mistyped key or a cyclic fallback table raises :class:`ConfigurationError`.
    """

    if not raw_json:
        return I18nConfig()
    try:
        parsed = json.loads(raw_json)
    except ValueError as exc:
        _logger.warning("i18n.config_parse_failed", detail=str(exc))
        return I18nConfig()
    if not isinstance(parsed, Mapping):
        _logger.warning("i18n.config_ignored", reason="override is not a JSON object")
        return I18nConfig()
    config = _merge_override(parsed)
    _logger.info("i18n.config_loaded", locales=len(config.locales), default_locale=config.default_locale)
    return config
