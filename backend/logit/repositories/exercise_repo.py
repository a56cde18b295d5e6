# logit/repositories/exercise_repo.py
from __future__ import annotations
from datetime import datetime
from typing import Optional

from sqlalchemy import select

from logit.aggregation import as_utc
from logit.models import Exercise
from logit.naming import collapse_whitespace
from logit.repositories.base import BaseRepository

class ExerciseCatalogRepository(BaseRepository[Exercise]):
    model = Exercise

    # READS
    def get_by_key(self, user_id: int, normalized_name: str) -> Optional[Exercise]:
        stmt = select(Exercise).where(Exercise.user_id == user_id, Exercise.normalized_name == normalized_name)
        return self.db.execute(stmt).scalar_one_or_none()

    def keys(self, user_id: int) -> list[str]:
        stmt = select(Exercise.normalized_name).where(Exercise.user_id == user_id)
        return list(self.db.execute(stmt).scalars().all())

    def search(self, user_id: int, tokens: list[str], *, limit: int = 12) -> list[str]:
        """Names containing every token, most recently performed first, de-duplicated."""
        if not tokens:
            return []
        stmt = select(Exercise.name).where(Exercise.user_id == user_id)
        for token in tokens:
            stmt = stmt.where(Exercise.normalized_name.contains(token, autoescape=True))
        stmt = stmt.order_by(
            Exercise.last_performed_at.desc(),
            Exercise.updated_at.desc(),
            Exercise.created_at.desc(),
        ).limit(limit)

        seen: set[str] = set()
        names: list[str] = []
        for raw in self.db.execute(stmt).scalars():
            name = collapse_whitespace(raw)
            if name and name not in seen:
                seen.add(name)
                names.append(name)
        return names

    # WRITES
    def upsert(self, user_id: int, *, normalized_name: str, name: str, performed_at: datetime) -> Exercise:
        """Latest display name wins; last_performed_at only moves forward. Caller commits."""
        entry = self.get_by_key(user_id, normalized_name)
        if entry is None:
            entry = Exercise(
                user_id=user_id,
                name=name,
                normalized_name=normalized_name,
                last_performed_at=performed_at,
            )
            return self.add_and_refresh(entry)

        entry.name = name
        if entry.last_performed_at is None or as_utc(entry.last_performed_at) < as_utc(performed_at):
            entry.last_performed_at = performed_at
        self.db.flush()
        return entry
