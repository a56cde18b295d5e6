from datetime import datetime
from pydantic import Field
from logit.schemas.common import CamelModel

class LastSessionRead(CamelModel):
    workout_id: int
    workout_title: str
    performed_at: datetime
    set_count: int = 0
    total_reps: int = 0
    best_weight: float | None = None
    best_weight_reps: int | None = None
    total_volume: int = 0

class InsightRead(CamelModel):
    exercise_name: str
    normalized_name: str
    sessions_count: int = 0
    last_performed_at: datetime | None = None
    last_session: LastSessionRead | None = None
    all_time_best_weight: float | None = None

class ErrorRead(CamelModel):
    error: str = Field(description="Human-readable reason")
