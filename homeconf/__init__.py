"""
homeconf — Home-screen layout importer

Reads a declarative layout document (shortcuts, widgets, folders, clock
and search boxes) and turns each item into a persisted placement,
skipping what cannot be resolved without abandoning the rest.
"""

__version__ = "0.1.0"

from .core import (
    LayoutWalker, BuildContext, IngestResult, XmlTokenStream,
    Container, ComponentName, PlacementRecord,
)
from .config import Config, ConfigManager, get_config
from .importer import LayoutImporter

__all__ = [
    "LayoutWalker", "BuildContext", "IngestResult", "XmlTokenStream",
    "Container", "ComponentName", "PlacementRecord",
    "Config", "ConfigManager", "get_config",
    "LayoutImporter",
]
