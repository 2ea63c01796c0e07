"""
Shared pytest fixtures for the homeconf test suite.

Provides fixtures built on LayoutTestFactory: real reference
collaborators over in-memory SQLite, isolated per test.

Usage in tests:
    def test_something(layout):
        xml = layout.document(layout.shortcut())
        assert layout.ingest(xml) == 1
"""

import pytest
from tests.factories import LayoutTestFactory


@pytest.fixture
def layout(tmp_path):
    """
    Create a LayoutTestFactory.

    The registry has a handful of installed activities, a music widget,
    the search widget and the clock provider. Swap ``layout.store`` or
    ``layout.widget_host`` before walking to inject failures.
    """
    factory = LayoutTestFactory(tmp_path)
    yield factory
    factory.store.close()


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point user config at a temp dir and clear homeconf env overrides."""
    from homeconf.config import ConfigManager

    home = tmp_path / "home"
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_DIR", home / ".homeconf")
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_FILE", home / ".homeconf" / "config.yaml")
    monkeypatch.delenv("HOMECONF_LANGUAGE", raising=False)
    monkeypatch.delenv("HOMECONF_DB_PATH", raising=False)
    return home
