"""
Local Widget Host — Widget instance ids and their bindings

Reference WidgetHost. Instance ids increase monotonically and are never
reused. Binding succeeds only for components the registry knows as
widget providers.
"""

import logging
from typing import Dict, Optional

from ..core.collaborators import ComponentRegistry, WidgetHost
from ..core.errors import WidgetBindError
from ..core.records import ComponentKind, ComponentName

logger = logging.getLogger(__name__)


class LocalWidgetHost(WidgetHost):
    """In-process widget host backed by a component registry."""

    def __init__(self, registry: ComponentRegistry, first_id: int = 1):
        self.registry = registry
        self._next = first_id
        self.bindings: Dict[int, Optional[ComponentName]] = {}

    def allocate_instance(self) -> int:
        instance_id = self._next
        self._next += 1
        self.bindings[instance_id] = None
        return instance_id

    def bind(self, instance_id: int, component: ComponentName) -> None:
        if instance_id not in self.bindings:
            raise WidgetBindError(f"appWidgetId {instance_id} was never allocated")
        if not self.registry.lookup(component, ComponentKind.WIDGET_PROVIDER):
            raise WidgetBindError(f"{component.flatten_to_string()} is not a widget provider")
        self.bindings[instance_id] = component
        logger.debug("Bound appWidgetId %d to %s", instance_id, component.flatten_to_short_string())

    def release(self, instance_id: int) -> None:
        if instance_id in self.bindings:
            del self.bindings[instance_id]
            logger.debug("Released appWidgetId %d", instance_id)

    def bound_component(self, instance_id: int) -> Optional[ComponentName]:
        return self.bindings.get(instance_id)
