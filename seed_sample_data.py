import datetime
import logging
import random
import sys
from typing import Iterable

from settings_schema import DEFAULT_CATEGORIES
from tools import DateTools, IdGenerator

logger = logging.getLogger(__name__)

SAMPLE_NAMES_BY_CATEGORY = {
    "Biceps": ["Biceps Curl", "Hammer Curl", "EZ-Bar Curl", "Cable Curl", "Preacher Curl"],
    "Triceps": ["Triceps Pushdown", "Skull Crusher", "Overhead Extension", "Dips", "Close-Grip Bench Press"],
    "Legs": ["Squat", "Leg Press", "Lunges", "Romanian Deadlift", "Leg Extension"],
    "Chest": ["Bench Press", "Incline Dumbbell Press", "Chest Fly", "Cable Crossover", "Push-up"],
    "Back": ["Lat Pulldown", "Seated Row", "Deadlift", "Pull-up", "T-Bar Row"],
    "Shoulders": ["Overhead Press", "Lateral Raise", "Front Raise", "Rear Delt Fly", "Arnold Press"],
}

SEED_DAYS = 4
WARMUP_RANGE = (5, 30)
WORKING_RANGE = (30, 120)


def create_seed(
    categories: Iterable[str] = DEFAULT_CATEGORIES,
    rng: random.Random | None = None,
    today: datetime.date | None = None,
) -> dict:
    """Return a starter diary with one or two exercises per category.

    Every exercise gets one entry for each of the last ``SEED_DAYS`` days.
    Categories without sample names are skipped.
    """
    rng = rng or random.Random()
    exercises = []
    for category in categories:
        names = list(SAMPLE_NAMES_BY_CATEGORY.get(category, []))
        how_many = rng.randint(1, 2)
        for _ in range(how_many):
            if not names:
                break
            name = names.pop(rng.randint(0, len(names) - 1))
            entries = [
                {
                    "id": IdGenerator.uid(),
                    "date": DateTools.days_ago(day, today),
                    "warmup": rng.randint(*WARMUP_RANGE),
                    "working": rng.randint(*WORKING_RANGE),
                }
                for day in range(SEED_DAYS)
            ]
            exercises.append(
                {"id": IdGenerator.uid(), "name": name, "category": category, "entries": entries}
            )
    return {"exercises": exercises}


def seed(db_path: str = "workout_diary.db") -> None:
    from db import DiaryRepository, KeyValueRepository

    storage = KeyValueRepository(db_path)
    diary = DiaryRepository(storage)
    if diary.has_data() and diary.load()["exercises"]:
        print("Diary already contains exercises")
        return
    diary.save(create_seed())
    logger.info("Seeded diary at %s", db_path)
    print("Seed data inserted")


if __name__ == "__main__":
    seed(sys.argv[1] if len(sys.argv) > 1 else "workout_diary.db")
