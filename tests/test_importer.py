"""
Tests for LayoutImporter

These tests validate:
- Loading from a file and from text
- Missing files and wrong roots return an aborted, empty result
- Configuration reaches the builders (spans, namespace, root, container)
"""

import pytest

from homeconf.config import Config, ConfigError
from homeconf.core.records import Container
from homeconf.importer import LayoutImporter
from homeconf.services.store import FavoritesStore

from tests.factories import BROWSER, CAMERA, MAIL, default_registry


def make_importer(config=None):
    store = FavoritesStore(":memory:")
    return LayoutImporter.from_config(config or Config(), store, default_registry()), store


class TestLoadFavorites:
    """File and text entry points."""

    def test_load_file(self, layout):
        """A layout file is imported in full."""
        path = layout.write(layout.document(
            layout.shortcut(BROWSER),
            layout.clock(),
            layout.folder(layout.shortcut(MAIL), layout.shortcut(CAMERA)),
        ))
        importer, store = make_importer()
        result = importer.load_favorites(path)
        assert result.count == 3
        assert not result.aborted
        assert store.count() == 5

    def test_load_text(self, layout):
        importer, store = make_importer()
        result = importer.load_favorites_text(layout.document(layout.shortcut(BROWSER)))
        assert result.count == 1

    def test_missing_file(self, tmp_path):
        """A missing file gives count 0 and a reason."""
        importer, store = make_importer()
        result = importer.load_favorites(tmp_path / "missing.xml")
        assert result.count == 0
        assert result.aborted
        assert "Cannot open" in result.abort_reason

    def test_wrong_root(self, layout):
        """An unexpected root element places nothing."""
        importer, store = make_importer()
        result = importer.load_favorites_text(layout.document(layout.shortcut(BROWSER), root="workspace"))
        assert result.count == 0
        assert "Unexpected start tag" in result.abort_reason
        assert store.count() == 0

    def test_malformed(self):
        importer, store = make_importer()
        result = importer.load_favorites_text("<favorites><favorite")
        assert result.aborted
        assert result.count == 0


class TestConfiguration:
    """Settings flowing into the pass."""

    def test_spans_and_container(self, layout):
        """Configured spans and root container are applied."""
        config = Config()
        config.widgets.clock_span = [3, 3]
        config.widgets.search_span = [4, 2]
        config.store.container = "hotseat"
        importer, store = make_importer(config)
        importer.load_favorites_text(layout.document(layout.clock(), layout.search()))
        clock, search = store.list_records()
        assert (clock.span_x, clock.span_y) == (3, 3)
        assert (search.span_x, search.span_y) == (4, 2)
        assert clock.container == Container.HOTSEAT

    def test_root_and_namespace(self):
        """A different root tag and prefix can be configured."""
        config = Config()
        config.document.root_tag = "workspace"
        config.document.namespace = "home"
        importer, store = make_importer(config)
        xml = (
            f'<workspace><favorite home:packageName="{BROWSER.package}" '
            f'home:className="{BROWSER.class_name}" home:screen="0" /></workspace>'
        )
        assert importer.load_favorites_text(xml).count == 1

    def test_min_children(self, layout):
        config = Config()
        config.folders.min_children = 3
        importer, store = make_importer(config)
        xml = layout.document(layout.folder(layout.shortcut(BROWSER), layout.shortcut(CAMERA)))
        assert importer.load_favorites_text(xml).count == 0
        assert store.count() == 0

    def test_invalid_config_rejected(self):
        """An invalid configuration is refused before any pass runs."""
        config = Config.from_dict({"widgets": {"clock_span": "bad"}})
        with pytest.raises(ConfigError, match="clock_span"):
            make_importer(config)

    def test_span_string_accepted(self, layout):
        config = Config.from_dict({"widgets": {"clock_span": "3x3"}})
        importer, store = make_importer(config)
        importer.load_favorites_text(layout.document(layout.clock()))
        (clock,) = store.list_records()
        assert (clock.span_x, clock.span_y) == (3, 3)

    def test_language_and_default_title(self, layout):
        config = Config()
        config.locale.language = "fr"
        config.folders.default_title = "Dossier"
        importer, store = make_importer(config)
        importer.load_favorites_text(layout.document(
            layout.folder(layout.shortcut(BROWSER), layout.shortcut(CAMERA), title_fr="Jeux"),
            layout.folder(layout.shortcut(BROWSER), layout.shortcut(CAMERA)),
        ))
        titles = [r.title for r in store.list_records(Container.DESKTOP)]
        assert titles == ["Jeux", "Dossier"]
