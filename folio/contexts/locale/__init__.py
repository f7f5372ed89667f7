"""
Locale Context

Responsibilities:
- Holds the current language selection (read synchronously by consumers)
- Detects the initial language from the environment
- Looks up UI translation strings

Owns: Language selection, translation lookup
Never: Fetches or caches blog content
"""

from folio.contexts.locale.locale_store import LocaleStore, normalize_locale

__all__ = ["LocaleStore", "normalize_locale"]
