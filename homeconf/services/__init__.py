"""
Services — Reference collaborators for the ingestion core

- FavoritesStore: SQLite placement store and identity allocator
- ManifestRegistry: installed components, loadable from YAML
- LocalWidgetHost: widget instance allocation and binding
- SystemLocaleProvider: language, labels, fallback folder title
"""

from .store import FavoritesStore
from .registry import ManifestRegistry, ManifestError
from .widgets import LocalWidgetHost
from .locale import SystemLocaleProvider, detect_language, language_from_locale_name

__all__ = [
    "FavoritesStore",
    "ManifestRegistry", "ManifestError",
    "LocalWidgetHost",
    "SystemLocaleProvider", "detect_language", "language_from_locale_name",
]
