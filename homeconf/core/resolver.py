"""
Component Resolver — Document component references to installed components

Resolution strategies (in order):
1. Direct lookup of (package, class)
2. Lookup with the registry's canonical name for the package

Packages can be renamed between the time a layout document is authored
and the time it is loaded; the canonical-name retry covers that.

Each call is an independent query against the registry. Nothing is
cached between items.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .collaborators import ComponentRegistry
from .records import ComponentKind, ComponentName

logger = logging.getLogger(__name__)


class ResolveStatus(Enum):
    """Resolution outcome."""
    FOUND = "found"
    FOUND_CANONICAL = "found_canonical"
    NOT_FOUND = "not_found"


@dataclass
class ResolveResult:
    """Result of component resolution."""
    status: ResolveStatus
    component: Optional[ComponentName] = None
    query: Optional[ComponentName] = None

    @property
    def found(self) -> bool:
        return self.status is not ResolveStatus.NOT_FOUND


class ComponentResolver:
    """Resolves (package, class) against a ComponentRegistry."""

    def __init__(self, registry: ComponentRegistry):
        self.registry = registry

    def resolve(
        self,
        package: str,
        class_name: str,
        kind: ComponentKind = ComponentKind.ACTIVITY,
    ) -> ResolveResult:
        """
        Resolve a component reference.

        Args:
            package: Package name as written in the document
            class_name: Fully qualified class name
            kind: Activity for shortcuts, widget provider for widgets

        Returns:
            ResolveResult; ``component`` is bound to the package that
            actually matched (the canonical one on fallback)
        """
        query = ComponentName(package, class_name)

        # Strategy 1: Direct
        if self.registry.lookup(query, kind):
            return ResolveResult(ResolveStatus.FOUND, component=query, query=query)

        # Strategy 2: Canonical package name
        canonical = self.registry.canonical_package_name(package)
        if canonical and canonical != package:
            candidate = ComponentName(canonical, class_name)
            if self.registry.lookup(candidate, kind):
                logger.debug("Resolved %s via canonical package %s", query.flatten_to_string(), canonical)
                return ResolveResult(ResolveStatus.FOUND_CANONICAL, component=candidate, query=query)

        return ResolveResult(ResolveStatus.NOT_FOUND, query=query)
