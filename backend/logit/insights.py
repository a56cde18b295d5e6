# logit/insights.py
"""
Comparison of an exercise being typed against its own history.

``build_insight`` runs server-side over stored sets and produces the baseline;
``compare_draft`` runs on every set edit against a cached baseline.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from logit.aggregation import (
    ExerciseRecord,
    SessionAggregate,
    aggregate_sessions,
    all_time_best_weight,
    display_volume,
    display_weight,
    round_half_up,
)
from logit.naming import normalize_key
from logit.schemas.insight import InsightRead, LastSessionRead
from logit.schemas.workout import parse_optional_decimal, parse_positive_int


@dataclass(slots=True)
class Comparison:
    draft: SessionAggregate
    last_session: Optional[LastSessionRead]
    all_time_best_weight: Optional[float]
    volume_delta: Optional[int]
    best_weight_delta: Optional[float]


def build_insight(exercise_name: str, records: Iterable[ExerciseRecord]) -> InsightRead:
    sessions = aggregate_sessions(records)
    last = sessions[0] if sessions else None
    best = all_time_best_weight(sessions)

    return InsightRead(
        exercise_name=exercise_name,
        normalized_name=normalize_key(exercise_name),
        sessions_count=len(sessions),
        last_performed_at=last.performed_at if last else None,
        last_session=LastSessionRead(
            workout_id=last.session_id,
            workout_title=last.title,
            performed_at=last.performed_at,
            set_count=last.set_count,
            total_reps=last.total_reps,
            best_weight=display_weight(last.best_weight),
            best_weight_reps=last.best_weight_reps,
            total_volume=display_volume(last.total_volume),
        ) if last else None,
        all_time_best_weight=display_weight(best),
    )


def summarize_draft(sets: Iterable[object]) -> SessionAggregate:
    """Fold half-typed sets; anything without positive reps is ignored."""
    agg = SessionAggregate()
    for s in sets:
        reps = parse_positive_int(getattr(s, "reps", None))
        if reps is None:
            continue
        weight = parse_optional_decimal(getattr(s, "weight_lb", None))
        agg.add_set(reps, float(weight) if weight is not None else None)
    return agg


def compare_draft(sets: Iterable[object], baseline: Optional[InsightRead]) -> Comparison:
    draft = summarize_draft(sets)
    last = baseline.last_session if baseline else None
    if last is None:
        return Comparison(
            draft=draft,
            last_session=None,
            all_time_best_weight=baseline.all_time_best_weight if baseline else None,
            volume_delta=None,
            best_weight_delta=None,
        )
    return Comparison(
        draft=draft,
        last_session=last,
        all_time_best_weight=baseline.all_time_best_weight,
        volume_delta=display_volume(draft.total_volume) - last.total_volume,
        best_weight_delta=round_half_up((draft.best_weight or 0.0) - (last.best_weight or 0.0), 1),
    )
