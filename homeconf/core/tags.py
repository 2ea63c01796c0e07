"""
Tags — Fixed vocabulary of item tags

Tag names are mapped to a TagKind once per start tag; the walker
dispatches on the kind, never on the raw string.
"""

from enum import Enum
from typing import Dict


class TagKind(Enum):
    SHORTCUT = "favorite"
    FOLDER = "folder"
    WIDGET = "appwidget"
    CLOCK = "clock"
    SEARCH = "search"
    UNKNOWN = ""


ROOT_TAG = "favorites"

TAG_KINDS: Dict[str, TagKind] = {
    kind.value: kind for kind in TagKind if kind is not TagKind.UNKNOWN
}


def tag_kind(name: str) -> TagKind:
    """Map a tag name to its kind. Matching is case-sensitive."""
    return TAG_KINDS.get(name, TagKind.UNKNOWN)
