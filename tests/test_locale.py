"""
Tests for SystemLocaleProvider — language detection and labels
"""

import pytest

from homeconf.services.locale import SystemLocaleProvider, detect_language, language_from_locale_name
from homeconf.services.registry import ManifestRegistry

from tests.factories import BROWSER, CAMERA


class TestLanguageFromLocaleName:
    """Locale name parsing."""

    @pytest.mark.parametrize("name,expected", [
        ("fr_FR.UTF-8", "fr"),
        ("de", "de"),
        ("pt-BR", "pt"),
        ("sr_RS@latin", "sr"),
        ("EN_us", "en"),
        ("C", None),
        ("POSIX", None),
        ("", None),
        (None, None),
    ])
    def test_parse(self, name, expected):
        assert language_from_locale_name(name) == expected


class TestDetectLanguage:
    """Environment lookup."""

    def test_env_override(self, monkeypatch):
        """HOMECONF_LANGUAGE wins."""
        monkeypatch.setenv("HOMECONF_LANGUAGE", "it_IT")
        assert detect_language() == "it"

    def test_always_returns_something(self, monkeypatch):
        """Falls back to a language code even in the C locale."""
        monkeypatch.delenv("HOMECONF_LANGUAGE", raising=False)
        monkeypatch.setenv("LC_ALL", "C")
        monkeypatch.setenv("LANG", "C")
        assert detect_language()


class TestSystemLocaleProvider:
    """Provider behavior."""

    def test_explicit_language(self, monkeypatch):
        """Explicit language beats the environment."""
        monkeypatch.setenv("HOMECONF_LANGUAGE", "de")
        assert SystemLocaleProvider(language="fr").language() == "fr"

    def test_label_from_registry(self):
        registry = ManifestRegistry(activities=[BROWSER], labels={BROWSER: "Browser"})
        assert SystemLocaleProvider(registry).label_for(BROWSER) == "Browser"

    def test_label_fallback(self):
        """Without a label, the class's simple name."""
        assert SystemLocaleProvider().label_for(CAMERA) == "Camera"

    def test_folder_title(self):
        assert SystemLocaleProvider().default_folder_title() == "Folder"
        assert SystemLocaleProvider(folder_title="Dossier").default_folder_title() == "Dossier"
