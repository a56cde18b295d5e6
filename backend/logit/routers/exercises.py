from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from logit.aggregation import days_between, display_volume, display_weight, exercise_detail
from logit.db import get_db
from logit.deps.auth import get_current_user
from logit.errors import NotFoundError, translate_db_errors
from logit.models import User
from logit.repositories.exercise_repo import ExerciseCatalogRepository
from logit.repositories.workout_repo import WorkoutRepository
from logit.route_keys import default_resolver, to_route_key
from logit.schemas.exercise import ChartPoint, ExerciseDetailRead, ExerciseSessionRead, ExerciseSummaryRead
from logit.trends import top_exercises

router = APIRouter(prefix="/exercises", tags=["exercises"])


@router.get("", response_model=list[ExerciseSummaryRead])
def list_my_exercises(
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    limit: int = Query(80, ge=1, le=200),
):
    now = datetime.now(timezone.utc)
    with translate_db_errors("Unable to load exercises."):
        workouts = WorkoutRepository(db).records_for_user(current.id)
    return [
        ExerciseSummaryRead(
            key=s.key,
            route_key=to_route_key(s.key),
            name=s.name,
            session_count=s.session_count,
            set_count=s.set_count,
            total_reps=s.total_reps,
            best_weight=display_weight(s.best_weight),
            total_volume=display_volume(s.total_volume),
            last_performed_at=s.last_performed_at,
            days_since_last_hit=days_between(now, s.last_performed_at),
        )
        for s in top_exercises(workouts, limit=limit)
    ]


@router.get("/{exercise_key}", response_model=ExerciseDetailRead)
def get_exercise(
    exercise_key: str,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    workouts = WorkoutRepository(db)
    resolver = default_resolver(ExerciseCatalogRepository(db).keys, workouts.history_names)
    with translate_db_errors("Unable to load exercise."):
        key = resolver.resolve(exercise_key, current.id)
        records = workouts.exercise_records(current.id, key)

    detail = exercise_detail(records, datetime.now(timezone.utc))
    if detail is None:
        raise NotFoundError("Exercise not found.")

    return ExerciseDetailRead(
        key=detail.key,
        route_key=to_route_key(detail.key),
        name=detail.name,
        sessions_count=len(detail.sessions),
        set_count=detail.set_count,
        total_reps=detail.total_reps,
        total_volume=display_volume(detail.total_volume),
        best_weight=display_weight(detail.best_weight),
        average_reps_per_set=detail.average_reps_per_set,
        average_volume_per_session=detail.average_volume_per_session,
        last_performed_at=detail.last_performed_at,
        days_since_last_hit=detail.days_since_last_hit,
        sessions=[
            ExerciseSessionRead(
                workout_id=s.session_id,
                workout_title=s.title,
                performed_at=s.performed_at,
                set_count=s.set_count,
                total_reps=s.total_reps,
                best_weight=display_weight(s.best_weight),
                best_weight_reps=s.best_weight_reps,
                total_volume=display_volume(s.total_volume),
            )
            for s in detail.sessions
        ],
        chart=[
            ChartPoint(performed_at=s.performed_at, best_weight=display_weight(s.best_weight))
            for s in reversed(detail.sessions)
        ],
    )
