import json
import logging
from typing import Iterable, Mapping, Optional

from diary_schema import validate_diary
from settings_schema import DEFAULT_CATEGORY_MIGRATIONS

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "workout-diary-export.json"
EXPORT_MIME_TYPE = "application/json"


class DiaryImportError(ValueError):
    """Raised when imported text cannot replace the diary."""


class MalformedSyntaxError(DiaryImportError):
    """The text is not valid JSON."""


class InvalidShapeError(DiaryImportError):
    """The JSON does not have the shape of a diary record."""


def migrate_categories(tree: dict, migrations: Mapping[str, str]) -> int:
    """Rewrite retired category names in place and return how many changed."""
    changed = 0
    for exercise in tree["exercises"]:
        new = migrations.get(exercise["category"])
        if new is not None and new != exercise["category"]:
            exercise["category"] = new
            changed += 1
    return changed


def unknown_categories(tree: dict, categories: Iterable[str]) -> list[str]:
    """Return categories used in ``tree`` that are not in ``categories``."""
    known = set(categories)
    return sorted({e["category"] for e in tree["exercises"]} - known)


class DiaryCodec:
    """Serialize the diary to portable JSON text and validate it back."""

    def __init__(self, migrations: Optional[Mapping[str, str]] = None) -> None:
        self.migrations = dict(
            DEFAULT_CATEGORY_MIGRATIONS if migrations is None else migrations
        )

    @staticmethod
    def export(tree: dict) -> str:
        return json.dumps(tree, indent=2, ensure_ascii=False)

    def import_text(self, text: str) -> dict:
        """Parse ``text`` and return a migrated diary tree.

        Raises ``MalformedSyntaxError`` for unparsable text and
        ``InvalidShapeError`` for JSON that is not a diary record.
        """
        try:
            data = json.loads(text)
        except (ValueError, RecursionError) as e:
            raise MalformedSyntaxError(f"invalid JSON: {e}") from e
        try:
            validate_diary(data)
        except ValueError as e:
            raise InvalidShapeError(f"invalid diary data: {e}") from e
        migrated = migrate_categories(data, self.migrations)
        logger.info(
            "Imported %d exercises (%d migrated categories)",
            len(data["exercises"]),
            migrated,
        )
        return data
