"""Locale conversion and fallback chains."""

from .fallback import DEFAULT_FALLBACKS, FallbackChain, I18nConfig, find_cycle, load_i18n_config
from .locales import is_valid_language_code, to_backend_locale, to_url_locale

__all__ = [
    "DEFAULT_FALLBACKS",
    "FallbackChain",
    "I18nConfig",
    "find_cycle",
    "is_valid_language_code",
    "load_i18n_config",
    "to_backend_locale",
    "to_url_locale",
]
