"""
Configuration — Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Environment variables (HOMECONF_LANGUAGE, HOMECONF_DB_PATH)
  2. Project config (.homeconf/config.yaml)
  3. User config (~/.homeconf/config.yaml)
  4. Defaults
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .core.records import ComponentName, Container

logger = logging.getLogger(__name__)


DEFAULT_CLOCK = "com.android.alarmclock/com.android.alarmclock.AnalogAppWidgetProvider"


def parse_span(value: Any) -> Tuple[int, int]:
    """
    Parse a span from "4x1", [4, 1] or (4, 1).

    Raises:
        ValueError: If the value is not two integers
    """
    if isinstance(value, str):
        parts = value.lower().split("x")
    else:
        parts = list(value)
    if len(parts) != 2:
        raise ValueError(f"Invalid span '{value}'. Use WxH (e.g. 4x1)")
    return int(parts[0]), int(parts[1])


def _dump_span(value: Any) -> Any:
    # Hand-edited values ("4x1", junk) are written back as found
    return list(value) if isinstance(value, (list, tuple)) else value


class ConfigError(ValueError):
    """Raised when a loaded configuration does not validate."""


@dataclass
class DocumentConfig:
    """Layout document vocabulary."""
    root_tag: str = "favorites"
    namespace: str = "launcher"

    def validate(self) -> Optional[str]:
        if not self.root_tag:
            return "document.root_tag cannot be empty"
        if not self.namespace:
            return "document.namespace cannot be empty"
        return None


@dataclass
class FoldersConfig:
    """Folder rules."""
    min_children: int = 2
    default_title: str = "Folder"

    def validate(self) -> Optional[str]:
        if not isinstance(self.min_children, int) or isinstance(self.min_children, bool):
            return f"folders.min_children must be an integer, got '{self.min_children}'"
        if self.min_children < 0:
            return f"folders.min_children must be >= 0, got {self.min_children}"
        return None


@dataclass
class WidgetsConfig:
    """Fixed widgets (clock and search box)."""
    clock_component: str = DEFAULT_CLOCK
    clock_span: List[int] = field(default_factory=lambda: [2, 2])
    search_span: List[int] = field(default_factory=lambda: [4, 1])

    @property
    def clock(self) -> Optional[ComponentName]:
        return ComponentName.unflatten(self.clock_component)

    def validate(self) -> Optional[str]:
        if self.clock is None:
            return f"Invalid clock component '{self.clock_component}'. Use package/class"
        for name in ("clock_span", "search_span"):
            try:
                x, y = parse_span(getattr(self, name))
            except (TypeError, ValueError):
                return f"Invalid widgets.{name} '{getattr(self, name)}'. Use WxH"
            if x < 1 or y < 1:
                return f"widgets.{name} must be at least 1x1"
        return None


@dataclass
class LocaleConfig:
    """Language used to pick localized folder titles."""
    language: Optional[str] = None  # None = detect from the process locale


@dataclass
class StoreConfig:
    """Where placements go."""
    path: str = ".homeconf/launcher.db"
    container: str = "desktop"  # "desktop" | "hotseat"

    def validate(self) -> Optional[str]:
        valid = tuple(c.name.lower() for c in Container)
        if self.container not in valid:
            return f"Unknown container '{self.container}'. Valid: {', '.join(valid)}"
        return None


@dataclass
class Config:
    """Application configuration."""
    document: DocumentConfig = field(default_factory=DocumentConfig)
    folders: FoldersConfig = field(default_factory=FoldersConfig)
    widgets: WidgetsConfig = field(default_factory=WidgetsConfig)
    locale: LocaleConfig = field(default_factory=LocaleConfig)
    store: StoreConfig = field(default_factory=StoreConfig)

    def validate(self) -> Optional[str]:
        """First validation error across sections, or None."""
        for section in (self.document, self.folders, self.widgets, self.store):
            error = section.validate()
            if error:
                return error
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "document": {
                "root_tag": self.document.root_tag,
                "namespace": self.document.namespace,
            },
            "folders": {
                "min_children": self.folders.min_children,
                "default_title": self.folders.default_title,
            },
            "widgets": {
                "clock_component": self.widgets.clock_component,
                "clock_span": _dump_span(self.widgets.clock_span),
                "search_span": _dump_span(self.widgets.search_span),
            },
            "locale": {
                "language": self.locale.language,
            },
            "store": {
                "path": self.store.path,
                "container": self.store.container,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create from dictionary."""
        document = data.get("document", {}) or {}
        folders = data.get("folders", {}) or {}
        widgets = data.get("widgets", {}) or {}
        locale_data = data.get("locale", {}) or {}
        store = data.get("store", {}) or {}

        return cls(
            document=DocumentConfig(
                root_tag=document.get("root_tag", "favorites"),
                namespace=document.get("namespace", "launcher"),
            ),
            folders=FoldersConfig(
                min_children=folders.get("min_children", 2),
                default_title=folders.get("default_title", "Folder"),
            ),
            widgets=WidgetsConfig(
                clock_component=widgets.get("clock_component", DEFAULT_CLOCK),
                clock_span=widgets.get("clock_span", [2, 2]),
                search_span=widgets.get("search_span", [4, 1]),
            ),
            locale=LocaleConfig(
                language=locale_data.get("language"),
            ),
            store=StoreConfig(
                path=store.get("path", ".homeconf/launcher.db"),
                container=store.get("container", "desktop"),
            ),
        )


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Environment variables
      2. Project config (.homeconf/config.yaml)
      3. User config (~/.homeconf/config.yaml)
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".homeconf"
    USER_CONFIG_FILE = USER_CONFIG_DIR / "config.yaml"
    PROJECT_CONFIG_DIR = ".homeconf"
    PROJECT_CONFIG_FILE = "config.yaml"

    # section -> setting -> parser for string values from `set`
    SETTINGS = {
        "document": {"root_tag": str, "namespace": str},
        "folders": {"min_children": int, "default_title": str},
        "widgets": {
            "clock_component": str,
            "clock_span": lambda v: list(parse_span(v)),
            "search_span": lambda v: list(parse_span(v)),
        },
        "locale": {"language": lambda v: v or None},
        "store": {"path": str, "container": str},
    }

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.PROJECT_CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.USER_CONFIG_FILE

    def load(self) -> Config:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        config_data: Dict[str, Any] = {}

        # Layer 1: User config
        config_data = self._merge(config_data, self._read(self.user_config_path))

        # Layer 2: Project config (higher priority)
        config_data = self._merge(config_data, self._read(self.project_config_path))

        # Layer 3: Environment overrides
        if os.environ.get("HOMECONF_LANGUAGE"):
            config_data.setdefault("locale", {})["language"] = os.environ["HOMECONF_LANGUAGE"]
        if os.environ.get("HOMECONF_DB_PATH"):
            config_data.setdefault("store", {})["path"] = os.environ["HOMECONF_DB_PATH"]

        self._config = Config.from_dict(config_data)
        error = self._config.validate()
        if error:
            logger.warning("Configuration is invalid: %s", error)
        return self._config

    def _read(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (yaml.YAMLError, OSError) as e:
            logger.warning("Ignoring unreadable config %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring config %s: expected a mapping", path)
            return {}
        return data

    def save_project(self, config: Config):
        """Save configuration to project config file."""
        self.project_config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.project_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)
        self._config = config

    def save_user(self, config: Config):
        """Save configuration to user config file."""
        self.user_config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.user_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)
        self._config = config

    def set(self, key: str, value: str, scope: str = "project") -> Optional[str]:
        """
        Set a configuration value.

        Args:
            key: Dot-separated key (e.g., "folders.min_children")
            value: Value to set
            scope: "project" or "user"

        Returns:
            Error message or None if successful
        """
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'folders.min_children')"

        section, setting = parts
        if section not in self.SETTINGS:
            return f"Unknown section: {section}. Valid: {', '.join(self.SETTINGS)}"
        parsers = self.SETTINGS[section]
        if setting not in parsers:
            return f"Unknown {section} setting: {setting}. Valid: {', '.join(parsers)}"

        try:
            parsed = parsers[setting](value)
        except (TypeError, ValueError) as e:
            return f"Invalid value for {key}: {e}"

        setattr(getattr(config, section), setting, parsed)
        error = config.validate()
        if error:
            self._config = None  # drop the invalid in-memory edit
            return error

        if scope == "project":
            self.save_project(config)
        else:
            self.save_user(config)
        return None

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value as a string."""
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return None
        section, setting = parts
        if setting not in self.SETTINGS.get(section, {}):
            return None

        value = getattr(getattr(config, section), setting)
        if value is None:
            return None
        if setting.endswith("_span"):
            try:
                x, y = parse_span(value)
            except (TypeError, ValueError):
                return str(value)
            return f"{x}x{y}"
        return str(value)

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def display(self) -> str:
        """Format config for display."""
        config = self.load()
        lines = [
            "Configuration:",
            "",
            "Document:",
            f"  Root tag: {config.document.root_tag}",
            f"  Namespace: {config.document.namespace}",
            "",
            "Folders:",
            f"  Min children: {config.folders.min_children}",
            f"  Default title: {config.folders.default_title}",
            "",
            "Widgets:",
            f"  Clock: {config.widgets.clock_component}",
            f"  Clock span: {self.get('widgets.clock_span')}",
            f"  Search span: {self.get('widgets.search_span')}",
            "",
            "Locale:",
            f"  Language: {config.locale.language or '(detect)'}",
            "",
            "Store:",
            f"  Path: {config.store.path}",
            f"  Container: {config.store.container}",
            "",
            "Config files:",
            f"  User: {self.user_config_path}",
            f"  Project: {self.project_config_path}",
        ]
        return "\n".join(lines)


# Convenience function
def get_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project."""
    return ConfigManager(project_dir).load()
