from typing import Literal

from pydantic import BaseModel, Field, ValidationError, model_validator

DEFAULT_CATEGORIES = ["Biceps", "Triceps", "Legs", "Chest", "Back", "Shoulders"]
DEFAULT_CATEGORY_MIGRATIONS = {"Arms": "Biceps"}


class SettingsSchema(BaseModel):
    theme: Literal["light", "dark"] = "light"
    weight_unit: str = "kg"
    history_limit: int = Field(default=4, ge=1)
    categories: list[str] = Field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    category_migrations: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_CATEGORY_MIGRATIONS)
    )
    seed_on_empty: bool = True
    log_level: str = "WARNING"

    @model_validator(mode="after")
    def _check_categories(self) -> "SettingsSchema":
        if not self.categories:
            raise ValueError("categories must not be empty")
        if len(set(self.categories)) != len(self.categories):
            raise ValueError("categories must be unique")
        if "All" in self.categories:
            raise ValueError("'All' is reserved for the category filter")
        for old, new in self.category_migrations.items():
            if new not in self.categories:
                raise ValueError(f"migration target {new!r} for {old!r} is not a category")
        return self


def validate_settings(data: dict) -> None:
    try:
        SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))


def load_settings(data: dict) -> SettingsSchema:
    """Return validated settings, raising ``ValueError`` on bad input."""
    try:
        return SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
