"""
Test Data Factory — Layout documents and wired collaborators for tests

Provides declarative document building plus real reference collaborators
(in-memory SQLite store, manifest registry, local widget host) so tests
exercise the same code paths the CLI does.

Usage:
    @pytest.fixture
    def layout(tmp_path):
        return LayoutTestFactory(tmp_path)

    def test_something(layout):
        xml = layout.document(layout.shortcut(BROWSER, screen=0, x=1, y=2))
        result = layout.walk(xml)
        assert result.count == 1
"""

from pathlib import Path
from typing import Iterable, List, Optional

from homeconf.core.builders import DEFAULT_CLOCK_COMPONENT, BuildContext
from homeconf.core.errors import StoreError, WidgetBindError
from homeconf.core.records import ComponentName, Container, PlacementRecord
from homeconf.core.results import IngestResult
from homeconf.core.tokens import Token, TokenStream, TokenType, XmlTokenStream
from homeconf.core.walker import LayoutWalker
from homeconf.services.locale import SystemLocaleProvider
from homeconf.services.registry import ManifestRegistry
from homeconf.services.store import FavoritesStore
from homeconf.services.widgets import LocalWidgetHost


# =============================================================================
# Sample components
# =============================================================================

BROWSER = ComponentName("com.android.browser", "com.android.browser.BrowserActivity")
MAIL = ComponentName("com.example.mail", "com.example.mail.InboxActivity")
CAMERA = ComponentName("com.android.camera", "com.android.camera.Camera")
CALCULATOR = ComponentName("com.android.calculator2", "com.android.calculator2.Calculator")
SEARCH_ACTIVITY = ComponentName("com.android.quicksearchbox", "com.android.quicksearchbox.SearchActivity")
SEARCH_WIDGET = ComponentName("com.android.quicksearchbox", "com.android.quicksearchbox.SearchWidgetProvider")
MUSIC_WIDGET = ComponentName("com.android.music", "com.android.music.MediaAppWidgetProvider")
CLOCK = DEFAULT_CLOCK_COMPONENT

# A package that was renamed after the layout was authored
OLD_MAIL_PACKAGE = "com.oldname.mail"

MISSING = ComponentName("com.example.gone", "com.example.gone.Main")

NAMESPACE_URI = "http://schemas.android.com/apk/res/com.android.launcher"


def default_registry() -> ManifestRegistry:
    """Registry with a small set of installed apps and widget providers."""
    return ManifestRegistry(
        activities=[BROWSER, MAIL, CAMERA, CALCULATOR, SEARCH_ACTIVITY],
        widget_providers=[MUSIC_WIDGET, SEARCH_WIDGET, CLOCK],
        canonical_names={OLD_MAIL_PACKAGE: MAIL.package},
        global_search=SEARCH_ACTIVITY,
        labels={BROWSER: "Browser", MAIL: "Mail"},
    )


# =============================================================================
# Fakes
# =============================================================================

class ScriptedTokenStream(TokenStream):
    """
    Hands out a fixed token list, then optionally fails.

    ``fail_with`` is raised once the scripted tokens run out, standing in
    for a reader that hits malformed input mid-document.
    """

    def __init__(self, tokens: Iterable[Token], fail_with: Optional[Exception] = None):
        self._tokens = list(tokens)
        self.fail_with = fail_with

    def _pull(self) -> Token:
        if self._tokens:
            return self._tokens.pop(0)
        if self.fail_with is not None:
            raise self.fail_with
        return Token(TokenType.END_DOCUMENT)


class RejectingStore(FavoritesStore):
    """FavoritesStore that rejects chosen identities."""

    def __init__(self, reject_ids: Iterable[int] = (), negative: bool = False):
        super().__init__(":memory:")
        self.reject_ids = set(reject_ids)
        self.negative = negative
        self.retracted: List[int] = []

    def insert(self, record: PlacementRecord, auto_commit: bool = True) -> int:
        if record.id in self.reject_ids:
            if self.negative:
                return -1
            raise StoreError(f"rejected #{record.id}")
        return super().insert(record, auto_commit)

    def retract(self, record_id: int) -> None:
        self.retracted.append(record_id)
        super().retract(record_id)


class UnbindableWidgetHost(LocalWidgetHost):
    """Widget host whose bind always fails."""

    def bind(self, instance_id: int, component: ComponentName) -> None:
        raise WidgetBindError("host is gone")


class CrashingWidgetHost(LocalWidgetHost):
    """Widget host whose bind fails with an untyped error."""

    def bind(self, instance_id: int, component: ComponentName) -> None:
        raise RuntimeError("widget service died")


class CrashingLocale(SystemLocaleProvider):
    """Locale provider with no label resource for some components."""

    def __init__(self, registry: ManifestRegistry, broken: Iterable[ComponentName]):
        super().__init__(registry, language="en")
        self.broken = set(broken)

    def label_for(self, component: ComponentName) -> str:
        if component in self.broken:
            raise KeyError("no label resource")
        return super().label_for(component)


# =============================================================================
# Factory
# =============================================================================

class LayoutTestFactory:
    """
    Factory for layout documents and ingestion environments.

    Collaborators are real reference implementations; swap any of them
    before calling context()/walker() to inject failures.
    """

    def __init__(self, tmp_path: Path):
        self.tmp_path = tmp_path
        self.registry = default_registry()
        self.store: FavoritesStore = FavoritesStore(":memory:")
        self.widget_host: LocalWidgetHost = LocalWidgetHost(self.registry)
        self.locale = SystemLocaleProvider(self.registry, language="en")
        self.min_folder_children = 2

    # =========================================================================
    # Wiring
    # =========================================================================

    def context(self) -> BuildContext:
        return BuildContext(
            store=self.store,
            ids=self.store,
            registry=self.registry,
            widget_host=self.widget_host,
            locale=self.locale,
            min_folder_children=self.min_folder_children,
        )

    def walker(self) -> LayoutWalker:
        return LayoutWalker(self.context())

    def stream(self, xml: str) -> XmlTokenStream:
        """Stream positioned on the root element."""
        stream = XmlTokenStream.from_text(xml)
        stream.begin_document("favorites")
        return stream

    def walk(self, xml: str, container: int = Container.DESKTOP) -> IngestResult:
        return self.walker().walk(self.stream(xml), container)

    def ingest(self, xml: str, container: int = Container.DESKTOP) -> int:
        return self.walker().ingest(self.stream(xml), container)

    def write(self, xml: str, name: str = "workspace.xml") -> Path:
        path = self.tmp_path / name
        path.write_text(xml, encoding="utf-8")
        return path

    # =========================================================================
    # Document building
    # =========================================================================

    @staticmethod
    def document(*items: str, root: str = "favorites") -> str:
        body = "\n    ".join(items)
        return (
            '<?xml version="1.0" encoding="utf-8"?>\n'
            f'<{root} xmlns:launcher="{NAMESPACE_URI}">\n'
            f"    {body}\n"
            f"</{root}>\n"
        )

    @staticmethod
    def _attrs(**attrs) -> str:
        parts = []
        for name, value in attrs.items():
            if value is None:
                continue
            parts.append(f'launcher:{name}="{value}"')
        return " ".join(parts)

    def shortcut(self, component: Optional[ComponentName] = BROWSER,
                 screen=0, x=0, y=0, **extra) -> str:
        attrs = dict(screen=screen, x=x, y=y, **extra)
        if component is not None:
            attrs.setdefault("packageName", component.package)
            attrs.setdefault("className", component.class_name)
        return f"<favorite {self._attrs(**attrs)} />"

    def widget(self, component: ComponentName = MUSIC_WIDGET,
               screen=1, x=0, y=0, spanX=4, spanY=1, **extra) -> str:
        attrs = self._attrs(
            packageName=component.package, className=component.class_name,
            screen=screen, x=x, y=y, spanX=spanX, spanY=spanY, **extra,
        )
        return f"<appwidget {attrs} />"

    def clock(self, screen=1, x=1, y=0) -> str:
        return f"<clock {self._attrs(screen=screen, x=x, y=y)} />"

    def search(self, screen=2, x=0, y=0) -> str:
        return f"<search {self._attrs(screen=screen, x=x, y=y)} />"

    def folder(self, *children: str, screen=0, x=3, y=3, **extra) -> str:
        attrs = self._attrs(screen=screen, x=x, y=y, **extra)
        inner = "".join(children)
        return f"<folder {attrs}>{inner}</folder>"
