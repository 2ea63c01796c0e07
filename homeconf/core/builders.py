"""
Item Builders — AttributeRecord to persisted PlacementRecord

One builder per item tag:
- ShortcutBuilder: application shortcut, resolved as an activity
- WidgetBuilder: app widget, resolved as a widget provider
- ClockBuilder: fixed analog clock widget, 2x2, no resolution
- SearchBuilder: widget from the global-search provider's package, 4x1
- FolderBuilder: folder record with localized title

Every builder returns a BuildResult and never raises for item-level
problems. FolderValidator enforces the minimum-children rule after a
folder's nested walk and retracts what was written when it fails.

Usage:
    context = BuildContext(store, ids, registry, widget_host, locale)
    result = ShortcutBuilder().build(attrs, context)
    if result.success:
        ...
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .collaborators import (
    ComponentRegistry,
    IdAllocator,
    LocaleProvider,
    PlacementStore,
    WidgetHost,
)
from .errors import StoreError, WidgetBindError
from .records import (
    AttributeRecord,
    ComponentKind,
    ComponentName,
    FolderRecord,
    ItemKind,
    LaunchIntent,
    PlacementRecord,
)
from .resolver import ComponentResolver
from .results import BuildResult
from .tags import TagKind

logger = logging.getLogger(__name__)


DEFAULT_CLOCK_COMPONENT = ComponentName(
    "com.android.alarmclock",
    "com.android.alarmclock.AnalogAppWidgetProvider",
)


@dataclass
class BuildContext:
    """Collaborators and settings shared by every builder in one pass."""
    store: PlacementStore
    ids: IdAllocator
    registry: ComponentRegistry
    widget_host: WidgetHost
    locale: LocaleProvider
    clock_component: ComponentName = DEFAULT_CLOCK_COMPONENT
    clock_span: Tuple[int, int] = (2, 2)
    search_span: Tuple[int, int] = (4, 1)
    min_folder_children: int = 2
    resolver: ComponentResolver = field(init=False)

    def __post_init__(self):
        self.resolver = ComponentResolver(self.registry)


class ItemBuilder(ABC):
    """Base for all item builders."""

    @abstractmethod
    def build(self, attrs: AttributeRecord, context: BuildContext) -> BuildResult:
        pass

    def _persist(self, record: PlacementRecord, context: BuildContext) -> BuildResult:
        """Insert a record, turning store rejection into a failed result."""
        try:
            stored_id = context.store.insert(record)
        except StoreError as e:
            return BuildResult.failure(f"store rejected #{record.id}: {e}")
        if stored_id < 0:
            return BuildResult.failure(f"store rejected #{record.id}")
        return BuildResult.ok(record)


# =============================================================================
# Shortcuts
# =============================================================================

class ShortcutBuilder(ItemBuilder):
    """Application shortcut launching a resolved activity."""

    def build(self, attrs: AttributeRecord, context: BuildContext) -> BuildResult:
        if not attrs.has_component:
            return BuildResult.failure("package name or class name not found")

        try:
            screen, cell_x, cell_y = attrs.position()
        except ValueError as e:
            return BuildResult.failure(f"invalid position: {e}")

        resolved = context.resolver.resolve(attrs.package_name, attrs.class_name, ComponentKind.ACTIVITY)
        if not resolved.found:
            return BuildResult.failure(
                f"Unable to add favorite: {attrs.package_name}/{attrs.class_name}"
            )

        component = resolved.component
        record = PlacementRecord(
            id=context.ids.next_id(),
            container=attrs.container,
            kind=ItemKind.APPLICATION,
            screen=screen,
            cell_x=cell_x,
            cell_y=cell_y,
            span_x=1,
            span_y=1,
            title=context.locale.label_for(component),
            intent=LaunchIntent(component).to_uri(),
        )
        return self._persist(record, context)


# =============================================================================
# Widgets
# =============================================================================

class WidgetBuilder(ItemBuilder):
    """
    App widget from explicit package/class attributes.

    Spans default to 0 when the document omits them; that is an authoring
    error the builder does not correct.
    """

    def build(self, attrs: AttributeRecord, context: BuildContext) -> BuildResult:
        if not attrs.has_component:
            return BuildResult.failure("package name or class name not found")

        try:
            span_x, span_y = attrs.span(default=0)
        except ValueError as e:
            return BuildResult.failure(f"invalid span: {e}")

        resolved = context.resolver.resolve(
            attrs.package_name, attrs.class_name, ComponentKind.WIDGET_PROVIDER
        )
        if not resolved.found:
            return BuildResult.failure(
                f"No widget provider {attrs.package_name}/{attrs.class_name}"
            )

        return self.place(attrs, resolved.component, span_x, span_y, context)

    def place(
        self,
        attrs: AttributeRecord,
        component: ComponentName,
        span_x: int,
        span_y: int,
        context: BuildContext,
    ) -> BuildResult:
        """
        Allocate an instance, persist the record, then bind.

        Binding happens after the insert. If it fails (for any reason) the
        result is a failure carrying ``persisted_id``; the row is left for
        the caller. An instance that ends up unbound is released.
        """
        try:
            screen, cell_x, cell_y = attrs.position()
        except ValueError as e:
            return BuildResult.failure(f"invalid position: {e}")

        try:
            instance_id = context.widget_host.allocate_instance()
        except WidgetBindError as e:
            return BuildResult.failure(f"Problem allocating appWidgetId: {e}")

        record = PlacementRecord(
            id=context.ids.next_id(),
            container=attrs.container,
            kind=ItemKind.APPWIDGET,
            screen=screen,
            cell_x=cell_x,
            cell_y=cell_y,
            span_x=span_x,
            span_y=span_y,
            intent=str(component),
            app_widget_id=instance_id,
        )
        result = self._persist(record, context)
        if result.failed:
            context.widget_host.release(instance_id)
            return result

        try:
            context.widget_host.bind(instance_id, component)
        except Exception as e:
            context.widget_host.release(instance_id)
            return BuildResult.failure(
                f"Problem binding appWidgetId {instance_id}: {e}", persisted_id=record.id
            )
        return result


class ClockBuilder(WidgetBuilder):
    """Fixed clock widget. The clock is assumed installed; no resolution."""

    def build(self, attrs: AttributeRecord, context: BuildContext) -> BuildResult:
        span_x, span_y = context.clock_span
        return self.place(attrs, context.clock_component, span_x, span_y, context)


class SearchBuilder(WidgetBuilder):
    """Search widget published by the global-search provider's package."""

    def build(self, attrs: AttributeRecord, context: BuildContext) -> BuildResult:
        provider = search_widget_provider(context.registry)
        if provider is None:
            return BuildResult.failure("no search widget provider")
        span_x, span_y = context.search_span
        return self.place(attrs, provider, span_x, span_y, context)


def search_widget_provider(registry: ComponentRegistry) -> Optional[ComponentName]:
    """
    Find a widget provider in the global-search activity's package.

    If the package publishes several providers, the first one wins.
    """
    search = registry.global_search_provider()
    if search is None:
        return None
    return provider_in_package(registry, search.package)


def provider_in_package(registry: ComponentRegistry, package: str) -> Optional[ComponentName]:
    for provider in registry.widget_providers() or []:
        if provider is not None and provider.package == package:
            return provider
    return None


# =============================================================================
# Folders
# =============================================================================

def choose_folder_title(attrs: AttributeRecord, language: str, fallback: str) -> str:
    """Localized title for ``language``, else the plain title, else ``fallback``."""
    localized = attrs.titles_localized.get(language) if language else None
    if localized is not None:
        return localized
    if attrs.title is not None:
        return attrs.title
    return fallback


class FolderBuilder(ItemBuilder):
    """Folder record. Children are collected by the walker."""

    def build(self, attrs: AttributeRecord, context: BuildContext) -> BuildResult:
        try:
            screen, cell_x, cell_y = attrs.position()
        except ValueError as e:
            return BuildResult.failure(f"invalid position: {e}")

        title = choose_folder_title(
            attrs,
            context.locale.language(),
            context.locale.default_folder_title(),
        )
        record = PlacementRecord(
            id=context.ids.next_id(),
            container=attrs.container,
            kind=ItemKind.FOLDER,
            screen=screen,
            cell_x=cell_x,
            cell_y=cell_y,
            span_x=1,
            span_y=1,
            title=title,
        )
        return self._persist(record, context)


class FolderValidator:
    """Enforces the minimum number of children on a finished folder."""

    def validate(self, folder: FolderRecord, context: BuildContext) -> bool:
        """
        Check a folder after its nested walk.

        If it has too few children, the folder and every child that made
        it into the store are retracted.

        Returns:
            True if the folder stays
        """
        if folder.is_valid(context.min_folder_children):
            return True

        logger.info(
            "Folder #%s has %d child(ren), fewer than %d; removing it",
            folder.id, len(folder.children), context.min_folder_children,
        )
        self.rollback(folder, context)
        return False

    def rollback(self, folder: FolderRecord, context: BuildContext) -> None:
        """Retract the folder and every child it collected."""
        context.store.retract(folder.id)
        for child_id in folder.children:
            context.store.retract(child_id)


# Tag kind -> builder; UNKNOWN has no builder
BUILDERS: Dict[TagKind, ItemBuilder] = {
    TagKind.SHORTCUT: ShortcutBuilder(),
    TagKind.WIDGET: WidgetBuilder(),
    TagKind.CLOCK: ClockBuilder(),
    TagKind.SEARCH: SearchBuilder(),
    TagKind.FOLDER: FolderBuilder(),
}
