import os
import sys
import json
import unittest
import yaml

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from cli import (
    backup_db,
    demo_data,
    export_diary,
    import_diary,
    list_exercises,
    restore_db,
)
from codec import InvalidShapeError
from rest_api import DiaryAPI


class CLIToolsTest(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_cli.db"
        self.yaml_path = "test_cli.yaml"
        self.export_path = "test_cli_export.json"
        self.cleanup()
        with open(self.yaml_path, "w", encoding="utf-8") as f:
            yaml.safe_dump({"seed_on_empty": False}, f)

    def tearDown(self) -> None:
        self.cleanup()

    def cleanup(self) -> None:
        for path in [self.db_path, self.yaml_path, self.export_path, "test_cli_backup.db"]:
            if os.path.exists(path):
                os.remove(path)

    def test_export_then_import(self) -> None:
        api = DiaryAPI(db_path=self.db_path, yaml_path=self.yaml_path)
        ex_id = api.diary.create_exercise("Squat", "Legs")
        api.diary.create_entry(ex_id, "2024-01-01", 20, 100)
        export_diary(self.db_path, self.yaml_path, self.export_path)
        with open(self.export_path, encoding="utf-8") as f:
            exported = f.read()
        self.assertEqual(json.loads(exported), api.diary.state)

        api.diary.delete_exercise(ex_id)
        count = import_diary(self.db_path, self.yaml_path, self.export_path)
        self.assertEqual(count, 1)
        api2 = DiaryAPI(db_path=self.db_path, yaml_path=self.yaml_path)
        self.assertEqual(api2.export_text(), exported)

    def test_import_rejects_bad_file(self) -> None:
        with open(self.export_path, "w", encoding="utf-8") as f:
            f.write('{"exercises": [{"id": "a"}]}')
        with self.assertRaises(InvalidShapeError):
            import_diary(self.db_path, self.yaml_path, self.export_path)

    def test_demo_data(self) -> None:
        demo_data(self.db_path, self.yaml_path)
        api = DiaryAPI(db_path=self.db_path, yaml_path=self.yaml_path)
        self.assertTrue(api.diary.exercises)
        count = len(api.diary.exercises)
        demo_data(self.db_path, self.yaml_path)
        api = DiaryAPI(db_path=self.db_path, yaml_path=self.yaml_path)
        self.assertEqual(len(api.diary.exercises), count)

    def test_backup_restore(self) -> None:
        api = DiaryAPI(db_path=self.db_path, yaml_path=self.yaml_path)
        api.diary.create_exercise("Squat", "Legs")
        backup_db(self.db_path, "test_cli_backup.db")
        os.remove(self.db_path)
        restore_db("test_cli_backup.db", self.db_path)
        api = DiaryAPI(db_path=self.db_path, yaml_path=self.yaml_path)
        self.assertEqual(api.diary.exercises[0]["name"], "Squat")

    def test_list_exercises(self) -> None:
        api = DiaryAPI(db_path=self.db_path, yaml_path=self.yaml_path)
        api.diary.create_exercise("Squat", "Legs")
        from io import StringIO
        from contextlib import redirect_stdout

        out = StringIO()
        with redirect_stdout(out):
            list_exercises(self.db_path, self.yaml_path)
        text = out.getvalue()
        self.assertIn("All (1)", text)
        self.assertIn("Squat: warmup -, working -", text)


if __name__ == "__main__":
    unittest.main()
