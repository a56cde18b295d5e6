# logit/repositories/workout_repo.py
from __future__ import annotations
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, contains_eager, selectinload

from logit.aggregation import ExerciseRecord, SetRecord
from logit.errors import classify_db_error
from logit.models import WorkoutExercise, WorkoutLog, WorkoutSet
from logit.naming import normalize_key
from logit.repositories.base import BaseRepository, Page
from logit.repositories.exercise_repo import ExerciseCatalogRepository
from logit.schemas.workout import ParsedExercise, ParsedSet, ParsedWorkout
from logit.trends import WorkoutRecord

log = logging.getLogger("uvicorn")


def to_exercise_record(entry: WorkoutExercise) -> ExerciseRecord:
    workout = entry.workout_log
    return ExerciseRecord(
        session_id=workout.id,
        session_title=workout.title,
        performed_at=workout.performed_at,
        name=entry.name,
        normalized_key=entry.normalized_name or normalize_key(entry.name),
        sets=[
            SetRecord(reps=s.reps, weight=float(s.weight_lb) if s.weight_lb is not None else None)
            for s in entry.sets
        ],
    )


def to_workout_record(workout: WorkoutLog) -> WorkoutRecord:
    return WorkoutRecord(
        id=workout.id,
        title=workout.title,
        performed_at=workout.performed_at,
        exercises=[to_exercise_record(e) for e in workout.exercises],
    )


class WorkoutRepository(BaseRepository[WorkoutLog]):
    model = WorkoutLog

    def __init__(self, db: Session):
        super().__init__(db)
        self.catalog = ExerciseCatalogRepository(db)

    # READS
    def get(self, user_id: int, workout_id: int) -> Optional[WorkoutLog]:
        stmt = (
            select(WorkoutLog)
            .where(WorkoutLog.id == workout_id, WorkoutLog.user_id == user_id)
            .options(selectinload(WorkoutLog.exercises).selectinload(WorkoutExercise.sets))
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def _user_stmt(self, user_id: int, since: Optional[datetime], until: Optional[datetime]):
        stmt = select(WorkoutLog).where(WorkoutLog.user_id == user_id)
        if since is not None:
            stmt = stmt.where(WorkoutLog.performed_at >= since)
        if until is not None:
            stmt = stmt.where(WorkoutLog.performed_at < until)
        return stmt.options(selectinload(WorkoutLog.exercises).selectinload(WorkoutExercise.sets))

    def list_by_user(
        self,
        user_id: int,
        *,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Page[WorkoutLog]:
        stmt = self._user_stmt(user_id, since, until).order_by(WorkoutLog.performed_at.desc(), WorkoutLog.id.desc())
        return self.page_from_stmt(stmt, limit=limit, offset=offset)

    def records_for_user(self, user_id: int, *, since: Optional[datetime] = None) -> list[WorkoutRecord]:
        stmt = self._user_stmt(user_id, since, None).order_by(WorkoutLog.performed_at.desc())
        return [to_workout_record(w) for w in self.db.execute(stmt).scalars().all()]

    def exercise_records(self, user_id: int, normalized_name: str, *, limit: Optional[int] = None) -> list[ExerciseRecord]:
        """Entries for one exercise, newest first. Falls back to re-normalizing raw names."""
        stmt = (
            select(WorkoutExercise)
            .join(WorkoutExercise.workout_log)
            .where(WorkoutLog.user_id == user_id, WorkoutExercise.normalized_name == normalized_name)
            .options(contains_eager(WorkoutExercise.workout_log), selectinload(WorkoutExercise.sets))
            .order_by(WorkoutLog.performed_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        entries = self.db.execute(stmt).scalars().all()
        if entries:
            return [to_exercise_record(e) for e in entries]

        records = [
            to_exercise_record(e) for e in self._all_entries(user_id)
            if normalize_key(e.name) == normalized_name
        ]
        return records[:limit] if limit is not None else records

    def history_names(self, user_id: int) -> list[str]:
        return [e.normalized_name or e.name for e in self._all_entries(user_id, with_sets=False)]

    def _all_entries(self, user_id: int, *, with_sets: bool = True) -> list[WorkoutExercise]:
        options = [contains_eager(WorkoutExercise.workout_log)]
        if with_sets:
            options.append(selectinload(WorkoutExercise.sets))
        stmt = (
            select(WorkoutExercise)
            .join(WorkoutExercise.workout_log)
            .where(WorkoutLog.user_id == user_id)
            .options(*options)
            .order_by(WorkoutLog.performed_at.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    # WRITES
    def create(self, user_id: int, workout: ParsedWorkout) -> WorkoutLog:
        """
        Store a workout with its exercises and sets, or nothing at all.

        The parent row is committed first. Children and catalog upserts share
        one later commit, so a failure rolls all of them back; the parent is
        then deleted again before the error is re-raised as a domain error.
        """
        created_id: Optional[int] = None
        try:
            created = self.add_and_refresh(WorkoutLog(
                user_id=user_id,
                title=workout.title,
                performed_at=workout.performed_at,
                total_weight_lb=workout.total_volume,
            ))
            self.db.commit()
            created_id = created.id

            for order, item in enumerate(workout.exercises, start=1):
                entry = self._insert_exercise(user_id, created_id, order, item, workout.performed_at)
                self._insert_sets(entry.id, item.sets)
            self.db.commit()

            self.db.refresh(created)
            return created
        except Exception as exc:
            self.db.rollback()
            if created_id is not None:
                self._compensate(created_id)
            if isinstance(exc, SQLAlchemyError):
                error = classify_db_error(exc)
                log.error("workout create failure (%s): %s", type(error).__name__, exc)
                raise error from exc
            raise

    def _insert_exercise(
        self, user_id: int, workout_id: int, order: int, item: ParsedExercise, performed_at: datetime
    ) -> WorkoutExercise:
        catalog_entry = self.catalog.upsert(
            user_id, normalized_name=item.normalized_key, name=item.name, performed_at=performed_at
        )
        entry = WorkoutExercise(
            workout_log_id=workout_id,
            exercise_id=catalog_entry.id,
            name=item.name,
            normalized_name=item.normalized_key,
            order=order,
        )
        self.db.add(entry)
        self.db.flush()
        return entry

    def _insert_sets(self, workout_exercise_id: int, sets: list[ParsedSet]) -> None:
        self.db.add_all([
            WorkoutSet(workout_exercise_id=workout_exercise_id, order=order, reps=s.reps, weight_lb=s.weight_lb)
            for order, s in enumerate(sets, start=1)
        ])
        self.db.flush()

    def _compensate(self, workout_id: int) -> None:
        try:
            orphan = self.db.get(WorkoutLog, workout_id)
            if orphan is not None:
                self.db.delete(orphan)
                self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            log.error("compensating delete of workout %s failed: %s", workout_id, exc)

    def delete(self, user_id: int, workout_id: int) -> bool:
        workout = self.get(user_id, workout_id)
        if workout is None:
            return False
        self.db.delete(workout)
        self.db.commit()
        return True
