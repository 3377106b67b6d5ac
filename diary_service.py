import logging
import math
import sqlite3
from typing import Iterable, Optional

from codec import unknown_categories
from db import DiaryRepository
from diary_schema import validate_diary
from settings_schema import DEFAULT_CATEGORIES
from tools import DateTools, IdGenerator

logger = logging.getLogger(__name__)

ENTRY_FIELDS = ("warmup", "working")


class NotFoundError(ValueError):
    """An exercise or entry id does not exist."""


class DiaryService:
    """Own the diary state tree and apply every change through it.

    Each mutation updates the in-memory tree and then saves it. A failed
    save is logged and the in-memory change is kept.
    """

    def __init__(
        self,
        repo: DiaryRepository,
        categories: Iterable[str] = DEFAULT_CATEGORIES,
    ) -> None:
        self.repo = repo
        self.categories = list(categories)
        self.state = repo.load()

    @property
    def exercises(self) -> list[dict]:
        return self.state["exercises"]

    def get_exercise(self, exercise_id: str) -> Optional[dict]:
        for exercise in self.exercises:
            if exercise["id"] == exercise_id:
                return exercise
        return None

    def get_entry(self, exercise_id: str, entry_id: str) -> Optional[dict]:
        exercise = self.get_exercise(exercise_id)
        if exercise is None:
            return None
        for entry in exercise["entries"]:
            if entry["id"] == entry_id:
                return entry
        return None

    def create_exercise(self, name: str, category: str) -> str:
        name = self._check_name(name)
        self._check_category(category)
        exercise_id = IdGenerator.uid()
        self.exercises.append(
            {"id": exercise_id, "name": name, "category": category, "entries": []}
        )
        self._commit()
        return exercise_id

    def edit_exercise(self, exercise_id: str, name: str, category: str) -> None:
        exercise = self._require_exercise(exercise_id)
        name = self._check_name(name)
        self._check_category(category)
        exercise["name"] = name
        exercise["category"] = category
        self._commit()

    def delete_exercise(self, exercise_id: str) -> None:
        self.state["exercises"] = [e for e in self.exercises if e["id"] != exercise_id]
        self._commit()

    def create_entry(
        self,
        exercise_id: str,
        date: object = None,
        warmup: float = 0,
        working: float = 0,
    ) -> str:
        exercise = self._require_exercise(exercise_id)
        entry = {
            "id": IdGenerator.uid(),
            "date": DateTools.normalize(date or DateTools.today()),
            "warmup": self._check_weight("warmup", warmup),
            "working": self._check_weight("working", working),
        }
        exercise["entries"].append(entry)
        self._commit()
        return entry["id"]

    def edit_entry(
        self,
        exercise_id: str,
        entry_id: str,
        date: object,
        warmup: float,
        working: float,
    ) -> None:
        entry = self._require_entry(exercise_id, entry_id)
        values = {
            "date": DateTools.normalize(date),
            "warmup": self._check_weight("warmup", warmup),
            "working": self._check_weight("working", working),
        }
        entry.update(values)
        self._commit()

    def delete_entry(self, exercise_id: str, entry_id: str) -> None:
        exercise = self.get_exercise(exercise_id)
        if exercise is None:
            return
        exercise["entries"] = [e for e in exercise["entries"] if e["id"] != entry_id]
        self._commit()

    def edit_entry_field(
        self, exercise_id: str, entry_id: str, field: str, value: object
    ) -> bool:
        """Set one weight field of an entry.

        An empty string counts as 0, as in the quick-edit form. Returns
        False without touching the diary when ``value`` is not a finite
        number.
        """
        if field not in ENTRY_FIELDS:
            raise ValueError(f"unknown entry field: {field}")
        entry = self._require_entry(exercise_id, entry_id)
        if isinstance(value, str) and not value.strip():
            value = 0
        number = self._finite_number(value)
        if number is None:
            return False
        entry[field] = self._check_weight(field, number)
        self._commit()
        return True

    def replace_state(self, tree: dict) -> None:
        validate_diary(tree)
        unknown = unknown_categories(tree, self.categories)
        if unknown:
            logger.warning("Diary uses unknown categories %s; they are hidden from sections", unknown)
        self.state = tree
        self._commit()

    def _commit(self) -> None:
        try:
            self.repo.save(self.state)
        except (sqlite3.Error, OSError):
            logger.error("Saving the diary failed; keeping in-memory changes", exc_info=True)

    def _require_exercise(self, exercise_id: str) -> dict:
        exercise = self.get_exercise(exercise_id)
        if exercise is None:
            raise NotFoundError(f"exercise not found: {exercise_id}")
        return exercise

    def _require_entry(self, exercise_id: str, entry_id: str) -> dict:
        self._require_exercise(exercise_id)
        entry = self.get_entry(exercise_id, entry_id)
        if entry is None:
            raise NotFoundError(f"entry not found: {entry_id}")
        return entry

    @staticmethod
    def _check_name(name: str) -> str:
        name = (name or "").strip()
        if not name:
            raise ValueError("name must not be empty")
        return name

    def _check_category(self, category: str) -> None:
        if category not in self.categories:
            raise ValueError(f"invalid category: {category}")

    @staticmethod
    def _finite_number(value: object) -> Optional[float]:
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            number = value
        else:
            try:
                number = float(value)
            except (TypeError, ValueError):
                return None
        try:
            return number if math.isfinite(number) else None
        except OverflowError:
            return None

    @classmethod
    def _check_weight(cls, field: str, value: object):
        number = cls._finite_number(value)
        if number is None:
            raise ValueError(f"{field} must be a finite number")
        if number < 0:
            raise ValueError(f"{field} must not be negative")
        return number
