"""
Records — Data structures flowing through an ingestion pass

AttributeRecord is the normalized view of one document node.
PlacementRecord is what gets persisted: one home-screen item with its
container, position, footprint and kind-specific payload.

Design principles:
- AttributeRecord is built fresh per node, never reused
- PlacementRecord identity is assigned once, before persistence
- Payload encodings match what a launcher favorites table expects
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional, Dict, Any, List, Tuple


class Container(IntEnum):
    """Root containers a top-level placement can belong to."""
    DESKTOP = -100
    HOTSEAT = -101


class ItemKind(IntEnum):
    """Item type column values."""
    APPLICATION = 0
    FOLDER = 2
    APPWIDGET = 4


class ComponentKind(Enum):
    """What a component is expected to be when looked up in a registry."""
    ACTIVITY = "activity"
    WIDGET_PROVIDER = "widget_provider"


def container_from_string(s: Optional[str]) -> Container:
    """Parse a container name, defaulting to DESKTOP."""
    if not s:
        return Container.DESKTOP
    try:
        return Container[s.strip().upper()]
    except KeyError:
        return Container.DESKTOP


# =============================================================================
# Components and Intents
# =============================================================================

@dataclass(frozen=True)
class ComponentName:
    """A (package, class) pair identifying an activity or widget provider."""
    package: str
    class_name: str

    def flatten_to_string(self) -> str:
        return f"{self.package}/{self.class_name}"

    def flatten_to_short_string(self) -> str:
        """Abbreviate the class when it lives inside the package (pkg/.Cls)."""
        if self.class_name.startswith(self.package + "."):
            return f"{self.package}/{self.class_name[len(self.package):]}"
        return self.flatten_to_string()

    @classmethod
    def unflatten(cls, s: str) -> Optional["ComponentName"]:
        """Parse "pkg/cls" or "pkg/.Cls". Returns None if malformed."""
        if not s or "/" not in s:
            return None
        package, class_name = s.split("/", 1)
        if not package or not class_name:
            return None
        if class_name.startswith("."):
            class_name = package + class_name
        return cls(package, class_name)

    def __str__(self) -> str:
        return f"ComponentInfo{{{self.flatten_to_string()}}}"


ACTION_MAIN = "android.intent.action.MAIN"
CATEGORY_LAUNCHER = "android.intent.category.LAUNCHER"
FLAG_ACTIVITY_NEW_TASK = 0x10000000
FLAG_ACTIVITY_RESET_TASK_IF_NEEDED = 0x00200000


@dataclass(frozen=True)
class LaunchIntent:
    """
    Activity-launch descriptor stored with an application shortcut.

    Serializes to the intent URI form a launcher favorites table holds.
    """
    component: ComponentName
    action: str = ACTION_MAIN
    categories: Tuple[str, ...] = (CATEGORY_LAUNCHER,)
    flags: int = FLAG_ACTIVITY_NEW_TASK | FLAG_ACTIVITY_RESET_TASK_IF_NEEDED

    def to_uri(self) -> str:
        parts = ["#Intent", f"action={self.action}"]
        parts.extend(f"category={c}" for c in self.categories)
        if self.flags:
            parts.append(f"launchFlags=0x{self.flags:x}")
        parts.append(f"component={self.component.flatten_to_short_string()}")
        parts.append("end")
        return ";".join(parts)


# =============================================================================
# Attribute Record
# =============================================================================

@dataclass
class AttributeRecord:
    """
    Normalized attributes of one document node.

    Every field is the raw string from the document, or None when the
    node did not carry it. ``titles_localized`` maps language codes to
    the matching ``title_<lang>`` attribute values.
    """
    container: int = Container.DESKTOP
    screen: Optional[str] = None
    cell_x: Optional[str] = None
    cell_y: Optional[str] = None
    package_name: Optional[str] = None
    class_name: Optional[str] = None
    span_x: Optional[str] = None
    span_y: Optional[str] = None
    title: Optional[str] = None
    titles_localized: Dict[str, str] = field(default_factory=dict)

    @property
    def has_component(self) -> bool:
        return bool(self.package_name) and bool(self.class_name)

    def position(self) -> Tuple[Optional[int], Optional[int], Optional[int]]:
        """
        Parse (screen, cell_x, cell_y).

        Raises:
            ValueError: If a present value is not an integer
        """
        return (_optional_int(self.screen), _optional_int(self.cell_x), _optional_int(self.cell_y))

    def span(self, default: int) -> Tuple[int, int]:
        """
        Parse (span_x, span_y), using ``default`` for missing values.

        Raises:
            ValueError: If a present value is not an integer
        """
        x = _optional_int(self.span_x)
        y = _optional_int(self.span_y)
        return (default if x is None else x, default if y is None else y)


def _optional_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    return int(value.strip())


# =============================================================================
# Placement Record
# =============================================================================

@dataclass
class PlacementRecord:
    """One persisted home-screen item."""
    id: int
    container: int
    kind: ItemKind
    screen: Optional[int] = None
    cell_x: Optional[int] = None
    cell_y: Optional[int] = None
    span_x: int = 1
    span_y: int = 1
    title: Optional[str] = None
    intent: Optional[str] = None  # intent URI (shortcut) or ComponentInfo{...} (widget)
    app_widget_id: Optional[int] = None

    @property
    def in_folder(self) -> bool:
        """Containers are negative; folder identities are not."""
        return self.container >= 0

    @property
    def component(self) -> Optional[ComponentName]:
        """Recover the component from the stored intent, if any."""
        if not self.intent:
            return None
        if self.intent.startswith("ComponentInfo{") and self.intent.endswith("}"):
            return ComponentName.unflatten(self.intent[len("ComponentInfo{"):-1])
        for part in self.intent.split(";"):
            if part.startswith("component="):
                return ComponentName.unflatten(part[len("component="):])
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for storage or display."""
        return {
            "id": self.id,
            "container": self.container,
            "kind": int(self.kind),
            "screen": self.screen,
            "cell_x": self.cell_x,
            "cell_y": self.cell_y,
            "span_x": self.span_x,
            "span_y": self.span_y,
            "title": self.title,
            "intent": self.intent,
            "app_widget_id": self.app_widget_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlacementRecord":
        return cls(
            id=data["id"],
            container=data["container"],
            kind=ItemKind(data["kind"]),
            screen=data.get("screen"),
            cell_x=data.get("cell_x"),
            cell_y=data.get("cell_y"),
            span_x=data.get("span_x", 1),
            span_y=data.get("span_y", 1),
            title=data.get("title"),
            intent=data.get("intent"),
            app_widget_id=data.get("app_widget_id"),
        )


@dataclass
class FolderRecord:
    """A persisted folder plus the children collected during its nested walk."""
    folder: PlacementRecord
    children: List[int] = field(default_factory=list)

    @property
    def id(self) -> int:
        return self.folder.id

    def is_valid(self, min_children: int = 2) -> bool:
        return len(self.children) >= min_children
