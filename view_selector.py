"""Pure functions deriving what the screens show from the diary state.

Dates are compared as strings: entry dates are always zero-padded
``YYYY-MM-DD`` so string order equals chronological order.
"""
from typing import Iterable, Optional

from tools import DateTools

ALL_CATEGORIES = "All"


class ViewSelector:
    """Select and summarise exercises for display."""

    @staticmethod
    def sorted_history(exercise: dict, limit: Optional[int] = None) -> list[dict]:
        """Return entries newest first; equal dates keep their stored order."""
        history = sorted(exercise["entries"], key=lambda e: e["date"], reverse=True)
        return history if limit is None else history[:limit]

    @classmethod
    def latest_entry(cls, exercise: dict) -> Optional[dict]:
        history = cls.sorted_history(exercise, 1)
        return history[0] if history else None

    @staticmethod
    def group_by_category(exercises: Iterable[dict]) -> dict[str, list[dict]]:
        groups: dict[str, list[dict]] = {}
        for exercise in exercises:
            groups.setdefault(exercise["category"], []).append(exercise)
        return groups

    @staticmethod
    def filter_by_category(exercises: Iterable[dict], active: str) -> list[dict]:
        if active == ALL_CATEGORIES:
            return list(exercises)
        return [e for e in exercises if e["category"] == active]

    @staticmethod
    def count_by_category(exercises: list[dict], category: str) -> int:
        if category == ALL_CATEGORIES:
            return len(exercises)
        return sum(1 for e in exercises if e["category"] == category)

    @staticmethod
    def ordered_categories(order: Iterable[str]) -> list[str]:
        return [ALL_CATEGORIES] + [c for c in order if c != ALL_CATEGORIES]

    @classmethod
    def category_tabs(
        cls, exercises: list[dict], order: Iterable[str], active: str = ALL_CATEGORIES
    ) -> list[dict]:
        return [
            {
                "name": name,
                "count": cls.count_by_category(exercises, name),
                "active": name == active,
            }
            for name in cls.ordered_categories(order)
        ]

    @classmethod
    def home_sections(
        cls, exercises: list[dict], order: Iterable[str], active: str = ALL_CATEGORIES
    ) -> list[dict]:
        """Return non-empty category groups in display order.

        Exercises whose category is not in ``order`` belong to no section;
        they are still counted by the "All" tab.
        """
        groups = cls.group_by_category(exercises)
        sections = []
        for category in order:
            if active not in (ALL_CATEGORIES, category):
                continue
            items = groups.get(category, [])
            if not items:
                continue
            sections.append(
                {
                    "category": category,
                    "exercises": [cls.exercise_card(e) for e in items],
                }
            )
        return sections

    @staticmethod
    def format_weight(value: Optional[float]) -> str:
        if value is None:
            return "-"
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return f"{value}kg"

    @classmethod
    def entry_summary(cls, exercise: dict) -> dict:
        latest = cls.latest_entry(exercise)
        if latest is None:
            return {"warmup": cls.format_weight(None), "working": cls.format_weight(None)}
        return {
            "warmup": cls.format_weight(latest["warmup"]),
            "working": cls.format_weight(latest["working"]),
        }

    @classmethod
    def exercise_card(cls, exercise: dict) -> dict:
        return {
            "id": exercise["id"],
            "name": exercise["name"],
            "category": exercise["category"],
            "summary": cls.entry_summary(exercise),
        }

    @classmethod
    def exercise_detail(cls, exercise: dict, history_limit: Optional[int] = 4) -> dict:
        """Return the detail screen: the latest entry plus earlier ones."""
        history = [
            dict(entry, display_date=DateTools.display(entry["date"]))
            for entry in cls.sorted_history(exercise, history_limit)
        ]
        return {
            "id": exercise["id"],
            "name": exercise["name"],
            "category": exercise["category"],
            "history": history,
        }
