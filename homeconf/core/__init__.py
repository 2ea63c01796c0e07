"""
Core — Ingestion engine for home-screen layout documents

Contains the pieces of one ingestion pass:
- Tokens: pull-style structural events (TokenStream, XmlTokenStream)
- Attributes: alias table and AttributeRecord extraction
- Resolver: direct then canonical-name component resolution
- Builders: shortcut, widget, clock, search and folder builders
- Walker: depth tracking, dispatch, folder recursion, failure isolation
- Collaborators: abstract store, allocator, registry, widget host, locale
"""

from .errors import IngestError, StreamError, StructuralError, StoreError, WidgetBindError
from .records import (
    Container, ItemKind, ComponentKind, ComponentName, LaunchIntent,
    AttributeRecord, PlacementRecord, FolderRecord, container_from_string,
)
from .tokens import Token, TokenType, TokenStream, XmlTokenStream
from .tags import TagKind, ROOT_TAG, tag_kind
from .attributes import ATTRIBUTE_ALIASES, DEFAULT_NAMESPACE, extract_attributes
from .collaborators import (
    PlacementStore, IdAllocator, WidgetHost, ComponentRegistry, LocaleProvider,
)
from .resolver import ComponentResolver, ResolveResult, ResolveStatus
from .results import BuildResult, ItemOutcome, IngestResult
from .builders import (
    BuildContext, ItemBuilder, ShortcutBuilder, WidgetBuilder, ClockBuilder,
    SearchBuilder, FolderBuilder, FolderValidator, BUILDERS,
    DEFAULT_CLOCK_COMPONENT, choose_folder_title,
)
from .walker import LayoutWalker

__all__ = [
    # Errors
    "IngestError", "StreamError", "StructuralError", "StoreError", "WidgetBindError",
    # Records
    "Container", "ItemKind", "ComponentKind", "ComponentName", "LaunchIntent",
    "AttributeRecord", "PlacementRecord", "FolderRecord", "container_from_string",
    # Tokens
    "Token", "TokenType", "TokenStream", "XmlTokenStream",
    "TagKind", "ROOT_TAG", "tag_kind",
    # Attributes
    "ATTRIBUTE_ALIASES", "DEFAULT_NAMESPACE", "extract_attributes",
    # Collaborators
    "PlacementStore", "IdAllocator", "WidgetHost", "ComponentRegistry", "LocaleProvider",
    # Resolver
    "ComponentResolver", "ResolveResult", "ResolveStatus",
    # Results
    "BuildResult", "ItemOutcome", "IngestResult",
    # Builders
    "BuildContext", "ItemBuilder", "ShortcutBuilder", "WidgetBuilder", "ClockBuilder",
    "SearchBuilder", "FolderBuilder", "FolderValidator", "BUILDERS",
    "DEFAULT_CLOCK_COMPONENT", "choose_folder_title",
    # Walker
    "LayoutWalker",
]
