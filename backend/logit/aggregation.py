# logit/aggregation.py
"""
Folds over a user's logged sets.

Everything here is pure and total: empty input gives identity values
(zeros / None) and nothing raises. Repositories turn ORM rows into the plain
records below before calling in.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from logit.naming import normalize_key


@dataclass(slots=True)
class SetRecord:
    reps: int
    weight: Optional[float] = None


@dataclass(slots=True)
class ExerciseRecord:
    """One exercise entry inside one logged workout."""
    session_id: int
    session_title: str
    performed_at: datetime
    name: str
    sets: list[SetRecord] = field(default_factory=list)
    normalized_key: str = ""

    def __post_init__(self):
        if not self.normalized_key:
            self.normalized_key = normalize_key(self.name)


@dataclass(slots=True)
class SessionAggregate:
    session_id: Optional[int] = None
    title: str = ""
    performed_at: Optional[datetime] = None
    set_count: int = 0
    total_reps: int = 0
    weighted_set_count: int = 0
    best_weight: Optional[float] = None
    best_weight_reps: Optional[int] = None
    total_volume: float = 0.0

    def add_set(self, reps: int, weight: Optional[float]) -> None:
        self.set_count += 1
        self.total_reps += reps
        if weight is None:
            return
        self.weighted_set_count += 1
        self.total_volume += weight * reps
        if self.best_weight is None or weight > self.best_weight:
            self.best_weight = weight
            self.best_weight_reps = reps
        elif weight == self.best_weight and (self.best_weight_reps is None or reps > self.best_weight_reps):
            self.best_weight_reps = reps


@dataclass(slots=True)
class ExerciseSummary:
    key: str
    name: str
    session_count: int = 0
    set_count: int = 0
    total_reps: int = 0
    best_weight: Optional[float] = None
    total_volume: float = 0.0
    last_performed_at: Optional[datetime] = None


@dataclass(slots=True)
class ExerciseDetail:
    key: str
    name: str
    sessions: list[SessionAggregate]
    set_count: int
    total_reps: int
    total_volume: float
    best_weight: Optional[float]
    average_reps_per_set: float
    average_volume_per_session: float
    last_performed_at: Optional[datetime]
    days_since_last_hit: int


# --- numeric helpers ---

def round_half_up(value: float, places: int = 0) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def display_volume(value: Optional[float]) -> int:
    return int(round_half_up(value or 0.0))


def display_weight(value: Optional[float]) -> Optional[float]:
    return None if value is None else round_half_up(value, 1)


def safe_average(total: float, count: int) -> float:
    if not count:
        return 0.0
    return round_half_up(total / count, 1)


def as_utc(value: datetime) -> datetime:
    """Naive timestamps (SQLite) are stored as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def days_between(later: datetime, earlier: datetime) -> int:
    """Whole calendar days between two instants, never negative."""
    return max(0, (as_utc(later).date() - as_utc(earlier).date()).days)


# --- folds ---

def fold_sets(sets: Iterable[SetRecord], into: Optional[SessionAggregate] = None) -> SessionAggregate:
    agg = into if into is not None else SessionAggregate()
    for s in sets:
        if s.reps is None or s.reps <= 0:
            continue
        agg.add_set(s.reps, s.weight)
    return agg


def aggregate_sessions(records: Iterable[ExerciseRecord]) -> list[SessionAggregate]:
    """Per-session aggregates for one exercise, newest first."""
    by_session: dict[int, SessionAggregate] = {}
    for rec in records:
        agg = by_session.get(rec.session_id)
        if agg is None:
            agg = SessionAggregate(session_id=rec.session_id, title=rec.session_title, performed_at=rec.performed_at)
            by_session[rec.session_id] = agg
        fold_sets(rec.sets, into=agg)
    return sorted(by_session.values(), key=lambda a: as_utc(a.performed_at), reverse=True)


def all_time_best_weight(sessions: Iterable[SessionAggregate]) -> Optional[float]:
    weights = [s.best_weight for s in sessions if s.best_weight is not None]
    return max(weights) if weights else None


def summarize_exercises(records: Iterable[ExerciseRecord]) -> list[ExerciseSummary]:
    """Group entries by normalized key; the latest entry's name labels the group."""
    summaries: dict[str, ExerciseSummary] = {}
    sessions_seen: dict[str, set[int]] = {}

    for rec in records:
        if not rec.normalized_key:
            continue
        summary = summaries.get(rec.normalized_key)
        if summary is None:
            summary = ExerciseSummary(key=rec.normalized_key, name=rec.name, last_performed_at=rec.performed_at)
            summaries[rec.normalized_key] = summary
            sessions_seen[rec.normalized_key] = set()
        elif as_utc(rec.performed_at) > as_utc(summary.last_performed_at):
            summary.last_performed_at = rec.performed_at
            summary.name = rec.name

        sessions_seen[rec.normalized_key].add(rec.session_id)
        totals = fold_sets(rec.sets)
        summary.set_count += totals.set_count
        summary.total_reps += totals.total_reps
        summary.total_volume += totals.total_volume
        if totals.best_weight is not None and (summary.best_weight is None or totals.best_weight > summary.best_weight):
            summary.best_weight = totals.best_weight

    for key, summary in summaries.items():
        summary.session_count = len(sessions_seen[key])

    return sorted(
        summaries.values(),
        key=lambda s: (s.session_count, as_utc(s.last_performed_at)),
        reverse=True,
    )


def exercise_detail(records: list[ExerciseRecord], now: datetime) -> Optional[ExerciseDetail]:
    """Everything the exercise page shows; None when there is no history."""
    if not records:
        return None
    sessions = aggregate_sessions(records)
    latest = max(records, key=lambda r: as_utc(r.performed_at))

    set_count = sum(s.set_count for s in sessions)
    total_reps = sum(s.total_reps for s in sessions)
    total_volume = sum(s.total_volume for s in sessions)
    last = sessions[0].performed_at

    return ExerciseDetail(
        key=latest.normalized_key,
        name=latest.name,
        sessions=sessions,
        set_count=set_count,
        total_reps=total_reps,
        total_volume=total_volume,
        best_weight=all_time_best_weight(sessions),
        average_reps_per_set=safe_average(total_reps, set_count),
        average_volume_per_session=safe_average(total_volume, len(sessions)),
        last_performed_at=last,
        days_since_last_hit=days_between(now, last),
    )
