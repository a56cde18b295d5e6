import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Any
from pydantic import Field, field_validator

from logit.errors import WorkoutValidationError
from logit.naming import normalize_key, to_display_name
from logit.schemas.common import CamelModel

DEFAULT_TITLE = "Untitled workout"
_DECIMAL_RE = re.compile(r"^(\d+(\.\d*)?|\.\d+)$")

TitleStr = Annotated[str, Field(max_length=120)]
NameStr = Annotated[str, Field(max_length=120)]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_positive_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str) and value.strip().isdigit():
        parsed = int(value.strip())
        return parsed if parsed > 0 else None
    return None


def parse_optional_decimal(value: Any) -> Decimal | None:
    """Non-negative decimal text (".5" allowed); anything else means no weight."""
    if value is None or isinstance(value, bool):
        return None
    raw = str(value).strip()
    if not raw or not _DECIMAL_RE.match(raw):
        return None
    return Decimal("0" + raw if raw.startswith(".") else raw)


def parse_performed_at(value: Any) -> datetime:
    """ISO or local datetime text; naive values are taken as UTC, junk means now."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return utcnow()
    else:
        return utcnow()
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


# --- parsed (validated) payload ---

@dataclass(slots=True)
class ParsedSet:
    reps: int
    weight_lb: Decimal | None = None


@dataclass(slots=True)
class ParsedExercise:
    name: str
    normalized_key: str
    sets: list[ParsedSet] = field(default_factory=list)


@dataclass(slots=True)
class ParsedWorkout:
    title: str
    performed_at: datetime
    exercises: list[ParsedExercise] = field(default_factory=list)

    @property
    def total_volume(self) -> Decimal:
        return sum(
            (s.weight_lb * s.reps for e in self.exercises for s in e.sets if s.weight_lb is not None),
            Decimal(0),
        )


# --- request bodies ---

def _records_only(items: Any) -> Any:
    if not isinstance(items, list):
        return None
    return [item if isinstance(item, dict) else {} for item in items]


class SetIn(CamelModel):
    reps: int | None = None
    weight_lb: Decimal | None = None

    @field_validator("reps", mode="before")
    @classmethod
    def loose_reps(cls, v: Any) -> int | None:
        return parse_positive_int(v)

    @field_validator("weight_lb", mode="before")
    @classmethod
    def loose_weight(cls, v: Any) -> Decimal | None:
        return parse_optional_decimal(v)


class ExerciseIn(CamelModel):
    name: NameStr | None = None
    sets: list[SetIn] | None = None

    @field_validator("name", mode="before")
    @classmethod
    def blank_name_is_missing(cls, v: Any) -> str | None:
        if not isinstance(v, str) or not v.strip():
            return None
        return v.strip()

    @field_validator("sets", mode="before")
    @classmethod
    def sets_list(cls, v: Any) -> Any:
        return _records_only(v)


class WorkoutCreate(CamelModel):
    title: TitleStr = DEFAULT_TITLE
    performed_at: datetime = Field(default_factory=utcnow)
    exercises: list[ExerciseIn] | None = None

    @field_validator("title", mode="before")
    @classmethod
    def default_title(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            return DEFAULT_TITLE
        return v.strip()

    @field_validator("performed_at", mode="before")
    @classmethod
    def loose_timestamp(cls, v: Any) -> datetime:
        return parse_performed_at(v)

    @field_validator("exercises", mode="before")
    @classmethod
    def exercises_list(cls, v: Any) -> Any:
        return _records_only(v)

    def to_parsed(self) -> ParsedWorkout:
        """Apply the logging rules; raises WorkoutValidationError before anything is stored."""
        if self.exercises is None:
            raise WorkoutValidationError("Add at least one exercise.")

        exercises: list[ParsedExercise] = []
        for item in self.exercises:
            if not item.name:
                continue
            if item.sets is None:
                raise WorkoutValidationError(f'Exercise "{item.name}" is missing sets.')
            sets = [ParsedSet(reps=s.reps, weight_lb=s.weight_lb) for s in item.sets if s.reps]
            if not sets:
                raise WorkoutValidationError(f'Exercise "{item.name}" needs at least one valid set with reps.')
            exercises.append(ParsedExercise(
                name=to_display_name(item.name),
                normalized_key=normalize_key(item.name),
                sets=sets,
            ))

        if not exercises:
            raise WorkoutValidationError("Add at least one exercise with a name.")
        return ParsedWorkout(title=self.title, performed_at=self.performed_at, exercises=exercises)


# --- responses ---

class WorkoutCreated(CamelModel):
    id: int


class SetRead(CamelModel):
    order: int
    reps: int
    weight_lb: float | None = None


class WorkoutExerciseRead(CamelModel):
    order: int
    name: str
    normalized_name: str
    route_key: str
    set_count: int
    total_volume: int
    sets: list[SetRead]


class WorkoutRead(CamelModel):
    id: int
    title: str
    performed_at: datetime
    exercise_count: int
    set_count: int
    total_volume: int


class WorkoutDetail(WorkoutRead):
    exercises: list[WorkoutExerciseRead]


class SuggestionsRead(CamelModel):
    suggestions: list[str]
