import re
from datetime import datetime
from typing import Any
from pydantic import ConfigDict, field_validator
from logit.schemas.common import CamelModel

DRAFT_DEFAULT_TITLE = "Gym session"
LOCAL_DATETIME_FORMAT = "%Y-%m-%dT%H:%M"
_LOCAL_DATETIME_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})T(\d{1,2}):(\d{1,2})")
DIGITS = "0123456789"


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def sanitize_reps(value: Any) -> str:
    """Digits only."""
    return "".join(c for c in _text(value) if c in DIGITS)


def sanitize_weight(value: Any) -> str:
    """Digits and a single dot; commas count as dots."""
    cleaned = "".join(c for c in _text(value).replace(",", ".") if c in DIGITS or c == ".")
    whole, dot, fractional = cleaned.partition(".")
    return whole + dot + fractional.replace(".", "")


def local_datetime_value(moment: datetime) -> str:
    return moment.strftime(LOCAL_DATETIME_FORMAT)


def parse_local_datetime(value: Any) -> datetime:
    """``YYYY-MM-DDTHH:MM`` as typed into the form; anything else means now."""
    match = _LOCAL_DATETIME_RE.match(_text(value))
    if match:
        try:
            return datetime(*(int(part) for part in match.groups()))
        except ValueError:
            pass
    return datetime.now().replace(second=0, microsecond=0)


def _records(value: Any) -> list[dict]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


class DraftSet(CamelModel):
    reps: str = ""
    weight_lb: str = ""

    @field_validator("reps", mode="before")
    @classmethod
    def clean_reps(cls, v: Any) -> str:
        return sanitize_reps(v)

    @field_validator("weight_lb", mode="before")
    @classmethod
    def clean_weight(cls, v: Any) -> str:
        return sanitize_weight(v)


class DraftExercise(CamelModel):
    model_config = ConfigDict(validate_default=True)

    name: str = ""
    sets: list[DraftSet] = []

    @field_validator("name", mode="before")
    @classmethod
    def text_name(cls, v: Any) -> str:
        return _text(v)

    @field_validator("sets", mode="before")
    @classmethod
    def keep_records(cls, v: Any) -> list[dict]:
        return _records(v) or [{}]


class DraftSnapshot(CamelModel):
    """The in-progress workout form as stored on the device."""
    model_config = ConfigDict(validate_default=True)

    title: str = DRAFT_DEFAULT_TITLE
    performed_at: str = ""
    exercises: list[DraftExercise] = []
    saved_at: str | None = None

    @field_validator("title", mode="before")
    @classmethod
    def text_title(cls, v: Any) -> str:
        return v if isinstance(v, str) else DRAFT_DEFAULT_TITLE

    @field_validator("performed_at", mode="before")
    @classmethod
    def form_datetime(cls, v: Any) -> str:
        return local_datetime_value(parse_local_datetime(v))

    @field_validator("exercises", mode="before")
    @classmethod
    def keep_exercises(cls, v: Any) -> list[dict]:
        return _records(v) or [{}]

    @field_validator("saved_at", mode="before")
    @classmethod
    def text_or_none(cls, v: Any) -> str | None:
        return v if isinstance(v, str) else None
