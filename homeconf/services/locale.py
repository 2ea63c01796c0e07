"""
System Locale Provider — Language, labels and fallback strings

Language resolution (highest to lowest priority):
  1. Explicit override (config ``locale.language``)
  2. HOMECONF_LANGUAGE environment variable
  3. The process locale (LC_ALL / LANG)
  4. "en"
"""

import locale
import os
from typing import Optional

from ..core.collaborators import LocaleProvider
from ..core.records import ComponentName
from .registry import ManifestRegistry

DEFAULT_LANGUAGE = "en"
DEFAULT_FOLDER_TITLE = "Folder"


def language_from_locale_name(name: Optional[str]) -> Optional[str]:
    """
    Extract the language part of a locale name.

    "fr_FR.UTF-8" -> "fr", "de" -> "de", "C" / "POSIX" / "" -> None
    """
    if not name:
        return None
    language = name.split(".")[0].split("@")[0].split("_")[0].split("-")[0].lower()
    if not language or language in ("c", "posix"):
        return None
    return language


def detect_language() -> str:
    env = language_from_locale_name(os.environ.get("HOMECONF_LANGUAGE"))
    if env:
        return env
    try:
        current = locale.getlocale()[0]
    except ValueError:
        current = None
    return (
        language_from_locale_name(current)
        or language_from_locale_name(os.environ.get("LC_ALL"))
        or language_from_locale_name(os.environ.get("LANG"))
        or DEFAULT_LANGUAGE
    )


class SystemLocaleProvider(LocaleProvider):
    """LocaleProvider backed by the process locale and a ManifestRegistry."""

    def __init__(
        self,
        registry: Optional[ManifestRegistry] = None,
        language: Optional[str] = None,
        folder_title: str = DEFAULT_FOLDER_TITLE,
    ):
        self.registry = registry
        self._language = language_from_locale_name(language)
        self.folder_title = folder_title

    def language(self) -> str:
        return self._language or detect_language()

    def label_for(self, component: ComponentName) -> str:
        """Registry label, else the class's simple name."""
        if self.registry is not None:
            label = self.registry.label_for(component)
            if label:
                return label
        return component.class_name.rsplit(".", 1)[-1]

    def default_folder_title(self) -> str:
        return self.folder_title
