"""
Manifest Registry — Installed components declared in YAML

Reference ComponentRegistry. Holds what is "installed": launchable
activities, widget providers, renamed packages and the global-search
activity. Can be built in code or loaded from a manifest:

    activities:
      - com.android.browser/com.android.browser.BrowserActivity
      - com.example.mail/.InboxActivity
    widget_providers:
      - com.android.quicksearchbox/.SearchWidgetProvider
    canonical_names:
      com.oldname.mail: com.example.mail
    global_search: com.android.quicksearchbox/.SearchActivity
    labels:
      com.android.browser/com.android.browser.BrowserActivity: Browser

Components are written "package/class"; a class starting with "." is
relative to the package.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

import yaml

from ..core.collaborators import ComponentRegistry
from ..core.records import ComponentKind, ComponentName

logger = logging.getLogger(__name__)


class ManifestError(ValueError):
    """Raised when a registry manifest cannot be parsed."""


class ManifestRegistry(ComponentRegistry):
    """In-memory component registry."""

    def __init__(
        self,
        activities: Iterable[ComponentName] = (),
        widget_providers: Iterable[ComponentName] = (),
        canonical_names: Optional[Dict[str, str]] = None,
        global_search: Optional[ComponentName] = None,
        labels: Optional[Dict[ComponentName, str]] = None,
    ):
        self._installed: Dict[ComponentKind, Set[ComponentName]] = {
            ComponentKind.ACTIVITY: set(activities),
            ComponentKind.WIDGET_PROVIDER: set(),
        }
        # Provider order matters: the first match in a package wins
        self._providers: List[ComponentName] = []
        for provider in widget_providers:
            self.add_widget_provider(provider)
        self.canonical_names: Dict[str, str] = dict(canonical_names or {})
        self.global_search = global_search
        self.labels: Dict[ComponentName, str] = dict(labels or {})

    # =========================================================================
    # Mutation
    # =========================================================================

    def add_activity(self, component: ComponentName, label: Optional[str] = None) -> None:
        self._installed[ComponentKind.ACTIVITY].add(component)
        if label:
            self.labels[component] = label

    def add_widget_provider(self, component: ComponentName) -> None:
        if component not in self._installed[ComponentKind.WIDGET_PROVIDER]:
            self._installed[ComponentKind.WIDGET_PROVIDER].add(component)
            self._providers.append(component)

    def rename_package(self, old: str, new: str) -> None:
        """Record that ``old`` is now known as ``new``."""
        self.canonical_names[old] = new

    # =========================================================================
    # ComponentRegistry
    # =========================================================================

    def lookup(self, component: ComponentName, kind: ComponentKind = ComponentKind.ACTIVITY) -> bool:
        return component in self._installed[kind]

    def canonical_package_name(self, package: str) -> str:
        return self.canonical_names.get(package, package)

    def global_search_provider(self) -> Optional[ComponentName]:
        return self.global_search

    def widget_providers(self) -> List[ComponentName]:
        return list(self._providers)

    def label_for(self, component: ComponentName) -> Optional[str]:
        return self.labels.get(component)

    # =========================================================================
    # Loading
    # =========================================================================

    @classmethod
    def from_dict(cls, data: Dict) -> "ManifestRegistry":
        """
        Build a registry from parsed manifest data.

        Raises:
            ManifestError: If a component entry is malformed
        """
        data = data or {}
        search = data.get("global_search")
        return cls(
            activities=[_component(s) for s in data.get("activities") or []],
            widget_providers=[_component(s) for s in data.get("widget_providers") or []],
            canonical_names={str(k): str(v) for k, v in (data.get("canonical_names") or {}).items()},
            global_search=_component(search) if search else None,
            labels={_component(k): str(v) for k, v in (data.get("labels") or {}).items()},
        )

    @classmethod
    def from_yaml(cls, path: Path) -> "ManifestRegistry":
        """
        Load a registry manifest file.

        Raises:
            ManifestError: If the file is not valid YAML or has bad entries
            OSError: If the file cannot be read
        """
        with open(path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ManifestError(f"Invalid manifest {path}: {e}")
        if not isinstance(data, dict):
            raise ManifestError(f"Invalid manifest {path}: expected a mapping")
        registry = cls.from_dict(data)
        logger.debug(
            "Loaded manifest %s: %d activities, %d widget providers",
            path, len(registry._installed[ComponentKind.ACTIVITY]), len(registry._providers),
        )
        return registry

    def to_dict(self) -> Dict:
        return {
            "activities": sorted(c.flatten_to_short_string() for c in self._installed[ComponentKind.ACTIVITY]),
            "widget_providers": [c.flatten_to_short_string() for c in self._providers],
            "canonical_names": dict(self.canonical_names),
            "global_search": self.global_search.flatten_to_short_string() if self.global_search else None,
            "labels": {c.flatten_to_short_string(): label for c, label in self.labels.items()},
        }


def _component(s: str) -> ComponentName:
    component = ComponentName.unflatten(str(s).strip())
    if component is None:
        raise ManifestError(f"Invalid component '{s}'. Use package/class")
    return component
