import os
import json
import sqlite3
import sys

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from db import DiaryRepository, KeyValueRepository
from migrate import migrate


class TestCategoryMigration:
    def test_renames_retired_categories(self, tmp_path):
        db_file = str(tmp_path / "diary.db")
        storage = KeyValueRepository(db_file)
        tree = {"exercises": [
            {"id": "a", "name": "Curl", "category": "Arms", "entries": []},
            {"id": "b", "name": "Squat", "category": "Legs", "entries": []},
        ]}
        storage.set(DiaryRepository.KEY, json.dumps(tree))

        assert migrate(db_file) == 1
        stored = json.loads(storage.get(DiaryRepository.KEY))
        assert [e["category"] for e in stored["exercises"]] == ["Biceps", "Legs"]
        assert migrate(db_file) == 0

    def test_missing_table_is_left_alone(self, tmp_path):
        db_file = str(tmp_path / "empty.db")
        sqlite3.connect(db_file).close()
        assert migrate(db_file) == 0

    def test_corrupt_record_is_left_alone(self, tmp_path):
        db_file = str(tmp_path / "corrupt.db")
        storage = KeyValueRepository(db_file)
        storage.set(DiaryRepository.KEY, "{broken")
        assert migrate(db_file) == 0
        assert storage.get(DiaryRepository.KEY) == "{broken"

    def test_deeply_nested_record_is_left_alone(self, tmp_path):
        db_file = str(tmp_path / "deep.db")
        storage = KeyValueRepository(db_file)
        deep = "[" * 100000 + "]" * 100000
        storage.set(DiaryRepository.KEY, deep)
        assert migrate(db_file) == 0
        assert storage.get(DiaryRepository.KEY) == deep
