from datetime import datetime
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from logit.aggregation import as_utc, display_volume, display_weight, fold_sets
from logit.db import get_db
from logit.deps.auth import get_current_user
from logit.errors import NotFoundError, WorkoutValidationError, translate_db_errors
from logit.insights import build_insight
from logit.models import User, WorkoutLog
from logit.naming import normalize_key
from logit.repositories.exercise_repo import ExerciseCatalogRepository
from logit.repositories.workout_repo import WorkoutRepository, to_workout_record
from logit.route_keys import to_route_key
from logit.schemas.insight import ErrorRead, InsightRead
from logit.schemas.workout import (
    SetRead,
    SuggestionsRead,
    WorkoutCreate,
    WorkoutCreated,
    WorkoutDetail,
    WorkoutExerciseRead,
    WorkoutRead,
)
from logit.settings import get_settings
from logit.suggestions import query_tokens

router = APIRouter(prefix="/workouts", tags=["workouts"])

ERRORS = {code: {"model": ErrorRead} for code in (400, 401, 409, 503)}


def to_workout_read(workout: WorkoutLog) -> WorkoutRead:
    record = to_workout_record(workout)
    return WorkoutRead(
        id=record.id,
        title=record.title,
        performed_at=record.performed_at,
        exercise_count=len(record.exercises),
        set_count=record.set_count,
        total_volume=display_volume(record.total_volume),
    )


@router.post("", response_model=WorkoutCreated, status_code=status.HTTP_201_CREATED, responses=ERRORS)
def create_workout(
    payload: WorkoutCreate,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    parsed = payload.to_parsed()
    created = WorkoutRepository(db).create(current.id, parsed)
    return WorkoutCreated(id=created.id)


@router.get("", response_model=list[WorkoutRead])
def list_my_workouts(
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
    since: datetime | None = Query(None),
    until: datetime | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    with translate_db_errors("Unable to load workouts."):
        page = WorkoutRepository(db).list_by_user(
            current.id,
            since=as_utc(since) if since else None,
            until=as_utc(until) if until else None,
            limit=limit,
            offset=offset,
        )
        return [to_workout_read(w) for w in page.items]


@router.get("/exercise-suggestions", response_model=SuggestionsRead)
def exercise_suggestions(
    query: str = Query(""),
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    settings = get_settings()
    tokens = query_tokens(query)[: settings.MAX_SUGGESTION_TOKENS]
    if not tokens:
        return SuggestionsRead(suggestions=[])
    with translate_db_errors("Unable to load exercise suggestions."):
        names = ExerciseCatalogRepository(db).search(current.id, tokens, limit=settings.MAX_SUGGESTIONS)
    return SuggestionsRead(suggestions=names)


@router.get("/insights", response_model=InsightRead, responses=ERRORS)
def exercise_insight(
    exercise: str = Query(""),
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    name = exercise.strip()
    if not name:
        raise WorkoutValidationError("Exercise name is required.")
    with translate_db_errors("Unable to load exercise comparison."):
        records = WorkoutRepository(db).exercise_records(
            current.id, normalize_key(name), limit=get_settings().INSIGHT_HISTORY_LIMIT
        )
    return build_insight(name, records)


@router.get("/{workout_id}", response_model=WorkoutDetail)
def get_workout(
    workout_id: int,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    with translate_db_errors("Unable to load workout."):
        workout = WorkoutRepository(db).get(current.id, workout_id)
    if workout is None:
        raise NotFoundError("Workout not found.")

    summary = to_workout_read(workout)
    exercises = []
    for entry, record in zip(workout.exercises, to_workout_record(workout).exercises):
        totals = fold_sets(record.sets)
        exercises.append(WorkoutExerciseRead(
            order=entry.order,
            name=entry.name,
            normalized_name=entry.normalized_name,
            route_key=to_route_key(entry.normalized_name),
            set_count=totals.set_count,
            total_volume=display_volume(totals.total_volume),
            sets=[
                SetRead(order=s.order, reps=s.reps, weight_lb=display_weight(r.weight))
                for s, r in zip(entry.sets, record.sets)
            ],
        ))
    return WorkoutDetail(**summary.model_dump(), exercises=exercises)


@router.delete("/{workout_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_workout(
    workout_id: int,
    db: Session = Depends(get_db),
    current: User = Depends(get_current_user),
):
    with translate_db_errors("Unable to delete workout."):
        deleted = WorkoutRepository(db).delete(current.id, workout_id)
    if not deleted:
        raise NotFoundError("Workout not found.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

