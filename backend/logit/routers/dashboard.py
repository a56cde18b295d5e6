from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from logit.db import get_db
from logit.deps.auth import get_current_user
from logit.errors import translate_db_errors
from logit.models import User
from logit.repositories.workout_repo import WorkoutRepository
from logit.schemas.dashboard import DashboardRead
from logit.trends import build_dashboard

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardRead)
def my_dashboard(db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    with translate_db_errors("Unable to load dashboard."):
        workouts = WorkoutRepository(db).records_for_user(current.id)
    return DashboardRead.model_validate(build_dashboard(workouts, datetime.now(timezone.utc)))
