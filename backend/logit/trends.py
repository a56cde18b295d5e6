# logit/trends.py
"""Dashboard aggregates: weekly series, month-over-month change, personal bests."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable

from logit.aggregation import (
    ExerciseRecord,
    ExerciseSummary,
    as_utc,
    display_volume,
    display_weight,
    fold_sets,
    round_half_up,
    summarize_exercises,
)

PROGRESS_WEEKS = 12
PERSONAL_BEST_LIMIT = 5


@dataclass(slots=True)
class WorkoutRecord:
    id: int
    title: str
    performed_at: datetime
    exercises: list[ExerciseRecord] = field(default_factory=list)

    @property
    def total_volume(self) -> float:
        return sum(fold_sets(e.sets).total_volume for e in self.exercises)

    @property
    def set_count(self) -> int:
        return sum(fold_sets(e.sets).set_count for e in self.exercises)


@dataclass(slots=True)
class WeekPoint:
    week_start: date
    sessions: int = 0
    volume: int = 0


@dataclass(slots=True)
class DayBar:
    day: date
    label: str
    count: int = 0


@dataclass(slots=True)
class PersonalBest:
    lift: str
    weight: float
    reps: int
    performed_at: datetime


@dataclass(slots=True)
class Dashboard:
    total_workouts: int
    workouts_this_week: int
    total_exercises: int
    total_sets: int
    total_weight_lifted: int
    month_change: float
    weekly_bars: list[DayBar]
    personal_bests: list[PersonalBest]
    weekly_series: list[WeekPoint]
    current_week: int
    week_delta: int
    avg_weekly: float


def start_of_week(value: date) -> date:
    """Monday of the week containing ``value``."""
    return value - timedelta(days=value.weekday())


def _month_start(value: date, months_back: int = 0) -> date:
    month_index = value.year * 12 + (value.month - 1) - months_back
    return date(month_index // 12, month_index % 12 + 1, 1)


def month_change(this_month: int, previous_month: int) -> float:
    if previous_month > 0:
        return round_half_up((this_month - previous_month) / previous_month * 100, 1)
    return 100.0 if this_month > 0 else 0.0


def weekly_series(workouts: Iterable[WorkoutRecord], now: datetime, weeks: int = PROGRESS_WEEKS) -> list[WeekPoint]:
    """Sessions and volume per Monday-based week, oldest first, ending with the current week."""
    current = start_of_week(as_utc(now).date())
    points = [WeekPoint(week_start=current - timedelta(weeks=weeks - 1 - i)) for i in range(weeks)]
    by_start = {p.week_start: p for p in points}
    raw_volume: dict[date, float] = {}

    for w in workouts:
        week = start_of_week(as_utc(w.performed_at).date())
        point = by_start.get(week)
        if point is None:
            continue
        point.sessions += 1
        raw_volume[week] = raw_volume.get(week, 0.0) + w.total_volume

    for week, volume in raw_volume.items():
        by_start[week].volume = display_volume(volume)
    return points


def weekday_bars(workouts: Iterable[WorkoutRecord], now: datetime) -> list[DayBar]:
    monday = start_of_week(as_utc(now).date())
    bars = [DayBar(day=monday + timedelta(days=i), label=(monday + timedelta(days=i)).strftime("%a")) for i in range(7)]
    by_day = {b.day: b for b in bars}
    for w in workouts:
        bar = by_day.get(as_utc(w.performed_at).date())
        if bar is not None:
            bar.count += 1
    return bars


def personal_bests(workouts: Iterable[WorkoutRecord], limit: int = PERSONAL_BEST_LIMIT) -> list[PersonalBest]:
    """Heaviest individual sets across all history."""
    candidates = [
        PersonalBest(lift=e.name, weight=display_weight(s.weight), reps=s.reps, performed_at=w.performed_at)
        for w in workouts
        for e in w.exercises
        for s in e.sets
        if s.weight is not None and s.reps > 0
    ]
    candidates.sort(key=lambda pb: (pb.weight, as_utc(pb.performed_at)), reverse=True)
    return candidates[:limit]


def build_dashboard(workouts: list[WorkoutRecord], now: datetime) -> Dashboard:
    today = as_utc(now).date()
    week_start = start_of_week(today)
    month_start = _month_start(today)
    previous_month_start = _month_start(today, 1)

    days = [as_utc(w.performed_at).date() for w in workouts]
    series = weekly_series(workouts, now)
    current_week = series[-1].sessions if series else 0
    previous_week = series[-2].sessions if len(series) > 1 else 0

    return Dashboard(
        total_workouts=len(workouts),
        workouts_this_week=sum(1 for d in days if d >= week_start),
        total_exercises=sum(len(w.exercises) for w in workouts),
        total_sets=sum(w.set_count for w in workouts),
        total_weight_lifted=display_volume(sum(w.total_volume for w in workouts)),
        month_change=month_change(
            sum(1 for d in days if d >= month_start),
            sum(1 for d in days if previous_month_start <= d < month_start),
        ),
        weekly_bars=weekday_bars(workouts, now),
        personal_bests=personal_bests(workouts),
        weekly_series=series,
        current_week=current_week,
        week_delta=current_week - previous_week,
        avg_weekly=round_half_up(sum(p.sessions for p in series) / len(series), 1) if series else 0.0,
    )


def exercise_records(workouts: Iterable[WorkoutRecord]) -> list[ExerciseRecord]:
    return [e for w in workouts for e in w.exercises]


def top_exercises(workouts: Iterable[WorkoutRecord], limit: int = 80) -> list[ExerciseSummary]:
    return summarize_exercises(exercise_records(workouts))[:limit]

