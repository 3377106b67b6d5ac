import os
import sys
import unittest

import yaml

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from config import YamlConfig, db_path_from_env
from settings_schema import DEFAULT_CATEGORIES, validate_settings


class SettingsTest(unittest.TestCase):
    def setUp(self) -> None:
        self.path = "test_settings.yaml"
        if os.path.exists(self.path):
            os.remove(self.path)

    def tearDown(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)
        os.environ.pop("DIARY_DB", None)

    def test_missing_file_gives_defaults(self) -> None:
        cfg = YamlConfig(self.path)
        self.assertEqual(cfg.load(), {})
        settings = cfg.settings()
        self.assertEqual(settings.theme, "light")
        self.assertEqual(settings.history_limit, 4)
        self.assertEqual(settings.categories, DEFAULT_CATEGORIES)
        self.assertEqual(settings.category_migrations, {"Arms": "Biceps"})

    def test_save_and_load(self) -> None:
        cfg = YamlConfig(self.path)
        cfg.save({"theme": "dark", "history_limit": 6})
        with open(self.path, encoding="utf-8") as f:
            self.assertEqual(yaml.safe_load(f)["theme"], "dark")
        settings = cfg.settings()
        self.assertEqual(settings.theme, "dark")
        self.assertEqual(settings.history_limit, 6)

    def test_validate_settings(self) -> None:
        validate_settings({"theme": "dark"})
        for bad in (
            {"theme": "blue"},
            {"history_limit": 0},
            {"categories": []},
            {"categories": ["Legs", "Legs"]},
            {"categories": ["All", "Legs"]},
            {"categories": ["Legs"], "category_migrations": {"Arms": "Biceps"}},
        ):
            with self.subTest(data=bad):
                with self.assertRaises(ValueError):
                    validate_settings(bad)

    def test_non_mapping_file_rejected(self) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            f.write("- a\n- b\n")
        with self.assertRaises(ValueError):
            YamlConfig(self.path).load()

    def test_db_path_from_env(self) -> None:
        self.assertEqual(db_path_from_env("x.db"), "x.db")
        os.environ["DIARY_DB"] = "other.db"
        self.assertEqual(db_path_from_env("x.db"), "other.db")


if __name__ == "__main__":
    unittest.main()
