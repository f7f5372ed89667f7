"""
Locale store.

Keeps the current language and resolves dotted translation keys
("blog.readMore") against per-language JSON files:

    i18n/en.json
    i18n/es.json

Missing translation files are tolerated: lookups then return the key itself.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from folio.contexts.content.post_data_structure import Language
from folio.contexts.locale.logger import _log_debug, _log_error

load_dotenv()
TRANSLATIONS_PATH = os.getenv("TRANSLATIONS_PATH")

DEFAULT_LOCALE = Language.ES


def normalize_locale(value: Optional[str]) -> Optional[Language]:
    """
    Map a locale tag to a supported Language.

    Examples:
        normalize_locale("en-US")       # Language.EN
        normalize_locale("es_MX.UTF-8") # Language.ES
        normalize_locale("fr-FR")       # None
    """
    if not value:
        return None
    base = value.replace("_", "-").split(".")[0].split("-")[0].strip().lower()
    try:
        return Language(base)
    except ValueError:
        return None


class LocaleStore:
    """
    Current language selection plus translation lookup.

    Args:
        locale: Initial language (default: DEFAULT_LOCALE)
        translations_dir: Directory with {language}.json files (default: TRANSLATIONS_PATH env)
    """

    def __init__(self, locale=None, translations_dir: Path = None):
        self._locale = Language.coerce(locale) if locale is not None else DEFAULT_LOCALE
        if translations_dir is None and TRANSLATIONS_PATH:
            translations_dir = Path(TRANSLATIONS_PATH)
        self.translations_dir = translations_dir
        self._translations: Dict[Language, Dict[str, Any]] = {}

    @classmethod
    def from_environment(cls, translations_dir: Path = None) -> "LocaleStore":
        """Detect the initial language from FOLIO_LOCALE, then LANG."""
        for variable in ("FOLIO_LOCALE", "LANG"):
            detected = normalize_locale(os.getenv(variable))
            if detected is not None:
                return cls(detected, translations_dir=translations_dir)
        return cls(DEFAULT_LOCALE, translations_dir=translations_dir)

    @property
    def locale(self) -> Language:
        return self._locale

    def set_locale(self, value) -> None:
        """
        Change the current language.

        Raises:
            ValueError: If value is not a supported language
        """
        self._locale = Language.coerce(value)

    def _load(self, language: Language) -> Dict[str, Any]:
        if language in self._translations:
            return self._translations[language]

        table: Dict[str, Any] = {}
        if self.translations_dir is not None:
            path = Path(self.translations_dir) / f"{language.value}.json"
            try:
                table = json.loads(path.read_text(encoding="utf-8"))
                _log_debug(f"Loaded translations for '{language.value}' from {path}")
            except (OSError, json.JSONDecodeError) as e:
                _log_error(f"Error loading translations from {path}: {e}")
                table = {}

        self._translations[language] = table
        return table

    def lookup(self, key: str, locale=None) -> Any:
        """Resolve a dotted key to its raw value (string or nested table), or None."""
        language = Language.coerce(locale) if locale is not None else self._locale
        value: Any = self._load(language)
        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return None
        return value

    def translate(self, key: str, locale=None) -> str:
        """Translated string for key, or the key itself when there is none."""
        value = self.lookup(key, locale)
        return value if isinstance(value, str) else key
