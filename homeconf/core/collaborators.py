"""
Collaborators — Interfaces the ingestion core depends on

The core never imports a concrete store, registry or widget host. It
talks to these abstract bases only; reference implementations live in
``homeconf.services``.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .records import ComponentKind, ComponentName, PlacementRecord


class PlacementStore(ABC):
    """Where placement records are persisted."""

    @abstractmethod
    def insert(self, record: PlacementRecord) -> int:
        """
        Persist a record.

        Returns:
            The stored identity, or a negative value if the row was rejected

        Raises:
            StoreError: If the store refused the write
        """
        pass

    @abstractmethod
    def retract(self, record_id: int) -> None:
        """Remove a previously inserted record. Unknown ids are ignored."""
        pass


class IdAllocator(ABC):
    """Source of placement identities."""

    @abstractmethod
    def next_id(self) -> int:
        """Return a fresh identity. Never returns the same value twice."""
        pass


class WidgetHost(ABC):
    """Allocates widget instances and binds them to providers."""

    @abstractmethod
    def allocate_instance(self) -> int:
        pass

    @abstractmethod
    def bind(self, instance_id: int, component: ComponentName) -> None:
        """
        Raises:
            WidgetBindError: If the instance cannot be bound
        """
        pass

    @abstractmethod
    def release(self, instance_id: int) -> None:
        """Give back an instance that will not be bound. Unknown ids are ignored."""
        pass


class ComponentRegistry(ABC):
    """Installed applications and widget providers."""

    @abstractmethod
    def lookup(self, component: ComponentName, kind: ComponentKind = ComponentKind.ACTIVITY) -> bool:
        """True if the component is installed as the given kind."""
        pass

    @abstractmethod
    def canonical_package_name(self, package: str) -> str:
        """Current canonical name for a possibly renamed package."""
        pass

    @abstractmethod
    def global_search_provider(self) -> Optional[ComponentName]:
        """The configured global-search activity, or None."""
        pass

    @abstractmethod
    def widget_providers(self) -> List[ComponentName]:
        """All installed widget providers."""
        pass


class LocaleProvider(ABC):
    """Language, labels and fallback strings."""

    @abstractmethod
    def language(self) -> str:
        """Current two-letter language code (e.g. "en")."""
        pass

    @abstractmethod
    def label_for(self, component: ComponentName) -> str:
        """Human-readable label for a resolved component."""
        pass

    @abstractmethod
    def default_folder_title(self) -> str:
        pass
