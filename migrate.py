import json
import sqlite3
import sys

from codec import migrate_categories
from diary_schema import is_valid_diary
from settings_schema import DEFAULT_CATEGORY_MIGRATIONS

DIARY_KEY = "workout_diary_v1"


def migrate(db_path='workout_diary.db', migrations=None):
    """Rename retired categories stored in ``db_path``; return the change count."""
    migrations = DEFAULT_CATEGORY_MIGRATIONS if migrations is None else migrations
    conn = sqlite3.connect(db_path)
    cur = conn.cursor()
    cur.execute("PRAGMA table_info(storage);")
    if not cur.fetchall():
        conn.close()
        return 0
    cur.execute("SELECT value FROM storage WHERE key = ?;", (DIARY_KEY,))
    row = cur.fetchone()
    changed = 0
    if row is not None:
        try:
            data = json.loads(row[0])
        except (ValueError, RecursionError):
            data = None
        if is_valid_diary(data):
            changed = migrate_categories(data, migrations)
            if changed:
                cur.execute(
                    "UPDATE storage SET value = ? WHERE key = ?;",
                    (json.dumps(data), DIARY_KEY),
                )
    conn.commit()
    conn.close()
    return changed

if __name__ == '__main__':
    path = sys.argv[1] if len(sys.argv) > 1 else 'workout_diary.db'
    print(f"Migrated {migrate(path)} exercises")
