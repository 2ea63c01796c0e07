"""
Favorites Store — SQLite table of placement records

Reference PlacementStore and IdAllocator. One ``favorites`` row per
placed item; folder children point at their folder through
``container``.

Invariants:
- Identities come from next_id() and are never handed out twice by one
  store, even after the row they named has been retracted
- insert() never overwrites: a duplicate identity is a StoreError
"""

import sqlite3
from pathlib import Path
from typing import List, Optional, Union

import orjson

from ..core.collaborators import IdAllocator, PlacementStore
from ..core.errors import StoreError
from ..core.records import ItemKind, PlacementRecord


COLUMNS = (
    "_id", "title", "intent", "container", "screen", "cellX", "cellY",
    "spanX", "spanY", "itemType", "appWidgetId",
)


class FavoritesStore(PlacementStore, IdAllocator):
    """SQLite-backed favorites table."""

    def __init__(self, path: Union[Path, str] = ":memory:"):
        if str(path) != ":memory:":
            path = Path(path)
            path.parent.mkdir(parents=True, exist_ok=True)
        self.path = path
        self.conn = sqlite3.connect(str(path))
        self.conn.row_factory = sqlite3.Row
        self._init_schema()
        self._max_id = self._load_max_id()

    def _init_schema(self):
        self.conn.executescript("""
            CREATE TABLE IF NOT EXISTS favorites (
                _id INTEGER PRIMARY KEY,
                title TEXT,
                intent TEXT,
                container INTEGER NOT NULL,
                screen INTEGER,
                cellX INTEGER,
                cellY INTEGER,
                spanX INTEGER NOT NULL DEFAULT 1,
                spanY INTEGER NOT NULL DEFAULT 1,
                itemType INTEGER NOT NULL,
                appWidgetId INTEGER NOT NULL DEFAULT -1
            );

            CREATE INDEX IF NOT EXISTS idx_favorites_container ON favorites(container);
        """)
        self.conn.commit()

    def _load_max_id(self) -> int:
        row = self.conn.execute("SELECT MAX(_id) FROM favorites").fetchone()
        return row[0] if row and row[0] is not None else 0

    # =========================================================================
    # IdAllocator
    # =========================================================================

    def next_id(self) -> int:
        self._max_id += 1
        return self._max_id

    # =========================================================================
    # PlacementStore
    # =========================================================================

    def insert(self, record: PlacementRecord, auto_commit: bool = True) -> int:
        """
        Insert a record under its own identity.

        Raises:
            StoreError: If the identity is taken or the row is invalid
        """
        try:
            self.conn.execute(
                f"INSERT INTO favorites ({', '.join(COLUMNS)}) VALUES ({', '.join('?' * len(COLUMNS))})",
                (
                    record.id, record.title, record.intent, int(record.container),
                    record.screen, record.cell_x, record.cell_y,
                    record.span_x, record.span_y, int(record.kind),
                    record.app_widget_id if record.app_widget_id is not None else -1,
                ),
            )
        except sqlite3.DatabaseError as e:
            raise StoreError(str(e))
        if auto_commit:
            self.conn.commit()
        # Identities inserted from elsewhere must not be reissued
        self._max_id = max(self._max_id, record.id)
        return record.id

    def retract(self, record_id: int) -> None:
        self.conn.execute("DELETE FROM favorites WHERE _id = ?", (record_id,))
        self.conn.commit()

    # =========================================================================
    # Queries
    # =========================================================================

    def get(self, record_id: int) -> Optional[PlacementRecord]:
        row = self.conn.execute(
            "SELECT * FROM favorites WHERE _id = ?", (record_id,)
        ).fetchone()
        return self._row_to_record(row) if row else None

    def list_records(self, container: Optional[int] = None) -> List[PlacementRecord]:
        """All records in insertion order, optionally for one container."""
        if container is None:
            rows = self.conn.execute("SELECT * FROM favorites ORDER BY _id").fetchall()
        else:
            rows = self.conn.execute(
                "SELECT * FROM favorites WHERE container = ? ORDER BY _id", (int(container),)
            ).fetchall()
        return [self._row_to_record(r) for r in rows]

    def children_of(self, folder_id: int) -> List[PlacementRecord]:
        return self.list_records(container=folder_id)

    def count(self) -> int:
        return self.conn.execute("SELECT COUNT(*) FROM favorites").fetchone()[0]

    def dump_json(self, indent: bool = True) -> str:
        """Serialize every record for export or display."""
        option = orjson.OPT_INDENT_2 if indent else 0
        return orjson.dumps([r.to_dict() for r in self.list_records()], option=option).decode()

    def close(self) -> None:
        self.conn.close()

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> PlacementRecord:
        widget_id = row["appWidgetId"]
        return PlacementRecord(
            id=row["_id"],
            container=row["container"],
            kind=ItemKind(row["itemType"]),
            screen=row["screen"],
            cell_x=row["cellX"],
            cell_y=row["cellY"],
            span_x=row["spanX"],
            span_y=row["spanY"],
            title=row["title"],
            intent=row["intent"],
            app_widget_id=widget_id if widget_id is not None and widget_id >= 0 else None,
        )
