"""Shape validation for the persisted and imported diary record.

The models only decide whether a record can be trusted; the record itself
is kept as plain JSON data so unknown keys survive a load/save cycle.
"""
import math

from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError, field_validator

from tools import DateTools


class EntrySchema(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: StrictStr
    date: StrictStr
    warmup: float
    working: float

    @field_validator("date", mode="before")
    @classmethod
    def _iso_date(cls, value):
        if not DateTools.is_iso_date(value):
            raise ValueError("date must be YYYY-MM-DD")
        return value

    @field_validator("warmup", "working", mode="before")
    @classmethod
    def _finite_number(cls, value):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("weight must be a number")
        try:
            finite = math.isfinite(value)
        except OverflowError:
            finite = False
        if not finite:
            raise ValueError("weight must be finite")
        return value


class ExerciseSchema(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: StrictStr
    name: StrictStr
    category: StrictStr
    entries: list[EntrySchema]


class DiarySchema(BaseModel):
    model_config = ConfigDict(extra="allow")

    exercises: list[ExerciseSchema]


def validate_diary(data: object) -> None:
    """Raise ``ValueError`` when ``data`` is not a valid diary record."""
    if not isinstance(data, dict):
        raise ValueError("diary record must be an object")
    try:
        DiarySchema.model_validate(data)
    except ValidationError as e:
        raise ValueError(str(e))


def is_valid_diary(data: object) -> bool:
    try:
        validate_diary(data)
    except ValueError:
        return False
    return True
