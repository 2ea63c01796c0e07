"""
CLI — Command interface

Commands:
    homeconf load <file>        Import a layout document into the store
    homeconf list [--json]      Show persisted placements
    homeconf config             Show configuration
    homeconf config get <key>   Read one setting (section.setting)
    homeconf config set <key> <value> [--user]

The store defaults to the configured ``store.path`` under the project
directory. Installed components come from ``--registry`` or, if present,
``.homeconf/registry.yaml``.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .config import ConfigManager
from .core.records import ItemKind, PlacementRecord
from .importer import LayoutImporter
from .services.registry import ManifestError, ManifestRegistry
from .services.store import FavoritesStore
from . import __version__

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY = Path(".homeconf") / "registry.yaml"


class HomeconfCLI:
    """Command-line interface for importing home-screen layouts."""

    def __init__(self, project_dir: Path, db: Optional[str] = None,
                 registry: Optional[str] = None, language: Optional[str] = None):
        self.project_dir = Path(project_dir)
        self.config_manager = ConfigManager(self.project_dir)
        self.config = self.config_manager.load()
        if language:
            self.config.locale.language = language
        self.db_path = self._resolve(db or self.config.store.path)
        self.registry_path = self._resolve(registry) if registry else None

    def _resolve(self, path: str) -> Path:
        p = Path(path).expanduser()
        return p if p.is_absolute() else self.project_dir / p

    def _load_registry(self) -> ManifestRegistry:
        path = self.registry_path
        if path is None:
            default = self.project_dir / DEFAULT_REGISTRY
            if not default.exists():
                logger.info("No registry manifest; nothing is installed")
                return ManifestRegistry()
            path = default
        return ManifestRegistry.from_yaml(path)

    # =========================================================================
    # Commands
    # =========================================================================

    def load(self, document: str) -> int:
        """Import a layout document."""
        error = self.config.validate()
        if error:
            print(f"Error: invalid configuration: {error}")
            return 1

        try:
            registry = self._load_registry()
        except (ManifestError, OSError) as e:
            print(f"Error: cannot load registry: {e}")
            return 1

        store = FavoritesStore(self.db_path)
        try:
            importer = LayoutImporter.from_config(self.config, store, registry)
            result = importer.load_favorites(self._resolve(document))
        finally:
            store.close()

        for outcome in result.failures:
            print(outcome.summary())
        print(result.summary())
        return 0

    def list(self, as_json: bool = False) -> int:
        """Show persisted placements, folder children indented."""
        store = FavoritesStore(self.db_path)
        try:
            if as_json:
                print(store.dump_json())
                return 0

            records = store.list_records()
            if not records:
                print("No placements.")
                return 0
            for record in records:
                if record.in_folder:
                    continue
                print(format_record(record))
                if record.kind is ItemKind.FOLDER:
                    for child in store.children_of(record.id):
                        print("    " + format_record(child))
        finally:
            store.close()
        return 0

    def show_config(self) -> int:
        print(self.config_manager.display())
        return 0

    def get_config(self, key: str) -> int:
        value = self.config_manager.get(key)
        if value is None:
            print(f"{key} is not set")
            return 1
        print(value)
        return 0

    def set_config(self, key: str, value: str, scope: str = "project") -> int:
        error = self.config_manager.set(key, value, scope)
        if error:
            print(f"Error: {error}")
            return 1
        path = (self.config_manager.project_config_path if scope == "project"
                else self.config_manager.user_config_path)
        print(f"Set {key} = {value} ({path})")
        return 0


def format_record(record: PlacementRecord) -> str:
    """One display line for a placement."""
    where = f"screen {record.screen} ({record.cell_x},{record.cell_y})"
    if record.in_folder:
        where = f"in folder #{record.container}"
    label = record.title or (record.component.flatten_to_short_string() if record.component else "")
    line = f"#{record.id} {record.kind.name.lower()} {where} {record.span_x}x{record.span_y}"
    if label:
        line += f" {label}"
    if record.app_widget_id is not None:
        line += f" [appWidgetId {record.app_widget_id}]"
    return line


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="homeconf",
        description="homeconf -- Home-screen layout importer",
    )
    parser.add_argument(
        '--project', '-p',
        default=os.environ.get("HOMECONF_PROJECT_PATH", "."),
        help='Project directory (default: HOMECONF_PROJECT_PATH or current)'
    )
    parser.add_argument('--db', help='Favorites database (default: store.path)')
    parser.add_argument('--registry', help='Installed-components manifest (YAML)')
    parser.add_argument('--language', help='Language for folder titles (e.g. fr)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'homeconf {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    load_p = subparsers.add_parser('load', help='Import a layout document')
    load_p.add_argument('file', help='Layout XML file')

    list_p = subparsers.add_parser('list', help='Show persisted placements')
    list_p.add_argument('--json', action='store_true', help='Print records as JSON')

    config_p = subparsers.add_parser('config', help='Show or change configuration')
    config_sub = config_p.add_subparsers(dest='config_command')
    get_p = config_sub.add_parser('get', help='Read a setting')
    get_p.add_argument('key', help='section.setting')
    set_p = config_sub.add_parser('set', help='Change a setting')
    set_p.add_argument('key', help='section.setting')
    set_p.add_argument('value')
    set_p.add_argument('--user', action='store_true', help='Save to user config')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the homeconf CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 0

    cli = HomeconfCLI(Path(args.project), db=args.db, registry=args.registry, language=args.language)

    if args.command == 'load':
        return cli.load(args.file)
    if args.command == 'list':
        return cli.list(as_json=args.json)
    if args.command == 'config':
        if args.config_command == 'get':
            return cli.get_config(args.key)
        if args.config_command == 'set':
            return cli.set_config(args.key, args.value, "user" if args.user else "project")
        return cli.show_config()

    parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())
