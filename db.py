import json
import logging
import sqlite3
from contextlib import contextmanager
from typing import Callable, Iterable, List, Optional, Tuple

from codec import migrate_categories, unknown_categories
from diary_schema import validate_diary
from seed_sample_data import create_seed
from settings_schema import DEFAULT_CATEGORIES, DEFAULT_CATEGORY_MIGRATIONS

logger = logging.getLogger(__name__)


class Database:
    """Provides SQLite connection management and schema initialization."""

    _TABLE_DEFINITIONS = {
        "storage": (
            """CREATE TABLE storage (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );""",
            ["key", "value"],
        ),
    }

    def __init__(self, db_path: str = "workout_diary.db") -> None:
        self._db_path = db_path
        self._ensure_schema()

    @property
    def db_path(self) -> str:
        return self._db_path

    @contextmanager
    def _connection(self):
        connection = sqlite3.connect(self._db_path)
        try:
            yield connection
            connection.commit()
        finally:
            connection.close()

    def _ensure_schema(self) -> None:
        with self._connection() as conn:
            for table, (sql, columns) in self._TABLE_DEFINITIONS.items():
                self._ensure_table(conn, table, sql, columns)

    def _ensure_table(
        self, conn: sqlite3.Connection, table: str, sql: str, columns: List[str]
    ) -> None:
        cur = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?;", (table,)
        )
        if cur.fetchone() is None:
            conn.execute(sql)
            return

        cur = conn.execute(f"PRAGMA table_info({table});")
        existing_cols = [row[1] for row in cur.fetchall()]
        if existing_cols == columns:
            return

        conn.execute(f"DROP TABLE IF EXISTS {table}_old;")
        conn.execute(f"ALTER TABLE {table} RENAME TO {table}_old;")
        conn.execute(sql)
        common = [c for c in existing_cols if c in columns]
        if common == columns:
            cols = ", ".join(common)
            conn.execute(f"INSERT INTO {table} ({cols}) SELECT {cols} FROM {table}_old;")
        conn.execute(f"DROP TABLE {table}_old;")


class BaseRepository(Database):
    """Base repository providing helper methods."""

    def execute(self, query: str, params: Tuple = ()) -> int:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.lastrowid

    def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.fetchall()


class KeyValueRepository(BaseRepository):
    """String key-value storage standing in for device local storage."""

    def get(self, key: str) -> Optional[str]:
        rows = self.fetch_all("SELECT value FROM storage WHERE key = ?;", (key,))
        return rows[0][0] if rows else None

    def set(self, key: str, value: str) -> None:
        self.execute(
            "INSERT INTO storage (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
            (key, value),
        )

    def remove(self, key: str) -> None:
        self.execute("DELETE FROM storage WHERE key = ?;", (key,))

    def keys(self) -> List[str]:
        return [row[0] for row in self.fetch_all("SELECT key FROM storage ORDER BY key;")]


class DiaryRepository:
    """Reads and writes the diary state tree under a versioned key.

    Loading never fails: a missing, unreadable or shape-invalid record is
    replaced by freshly generated seed data (or an empty diary when seeding
    is disabled), which is persisted before being returned.
    """

    KEY = "workout_diary_v1"

    def __init__(
        self,
        storage: KeyValueRepository,
        categories: Iterable[str] = DEFAULT_CATEGORIES,
        migrations: Optional[dict] = None,
        *,
        seed_on_empty: bool = True,
        seed_factory: Optional[Callable[[List[str]], dict]] = None,
    ) -> None:
        self.storage = storage
        self.categories = list(categories)
        self.migrations = dict(
            DEFAULT_CATEGORY_MIGRATIONS if migrations is None else migrations
        )
        self.seed_on_empty = seed_on_empty
        self.seed_factory = seed_factory or create_seed

    def has_data(self) -> bool:
        return self.storage.get(self.KEY) is not None

    def load(self) -> dict:
        try:
            raw = self.storage.get(self.KEY)
        except sqlite3.Error:
            logger.error("Could not read %s; starting from fresh data", self.KEY, exc_info=True)
            return self._fresh()
        if raw is None:
            logger.info("No stored diary found; creating initial data")
            return self._fresh()
        try:
            data = json.loads(raw)
            validate_diary(data)
        except (ValueError, RecursionError) as e:
            # json.JSONDecodeError is a ValueError subclass
            logger.warning("Stored diary is corrupt (%s); regenerating", e)
            return self._fresh()
        if migrate_categories(data, self.migrations):
            self._save_quietly(data)
        unknown = unknown_categories(data, self.categories)
        if unknown:
            logger.warning("Stored diary uses unknown categories %s; they are hidden from sections", unknown)
        return data

    def save(self, tree: dict) -> None:
        self.storage.set(self.KEY, json.dumps(tree))

    def _fresh(self) -> dict:
        tree = self.seed_factory(self.categories) if self.seed_on_empty else {"exercises": []}
        self._save_quietly(tree)
        return tree

    def _save_quietly(self, tree: dict) -> None:
        try:
            self.save(tree)
        except sqlite3.Error:
            logger.error("Could not persist %s", self.KEY, exc_info=True)


class CategoryOrderRepository:
    """Persists the user's category display order."""

    KEY = "category_order_v1"

    def __init__(self, storage: KeyValueRepository) -> None:
        self.storage = storage

    def load(self) -> list[str]:
        raw = self.storage.get(self.KEY)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Stored category order is corrupt; ignoring it")
            return []
        if not isinstance(data, list):
            return []
        return [c for c in data if isinstance(c, str)]

    def save(self, order: Iterable[str]) -> None:
        self.storage.set(self.KEY, json.dumps(list(order)))

    def clear(self) -> None:
        self.storage.remove(self.KEY)


class ThemeRepository:
    """Persists the light/dark theme preference."""

    KEY = "theme_pref_v1"
    THEMES = ("light", "dark")

    def __init__(self, storage: KeyValueRepository, default: str = "light") -> None:
        if default not in self.THEMES:
            raise ValueError(f"invalid theme: {default}")
        self.storage = storage
        self.default = default

    def get(self) -> str:
        saved = self.storage.get(self.KEY)
        return saved if saved in self.THEMES else self.default

    def set(self, theme: str) -> None:
        if theme not in self.THEMES:
            raise ValueError(f"invalid theme: {theme}")
        self.storage.set(self.KEY, theme)

    def toggle(self) -> str:
        theme = "light" if self.get() == "dark" else "dark"
        self.set(theme)
        return theme
