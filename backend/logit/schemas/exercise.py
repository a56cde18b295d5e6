from datetime import datetime
from logit.schemas.common import CamelModel

class ExerciseSummaryRead(CamelModel):
    key: str
    route_key: str
    name: str
    session_count: int
    set_count: int
    total_reps: int
    best_weight: float | None = None
    total_volume: int
    last_performed_at: datetime | None = None
    days_since_last_hit: int

class ExerciseSessionRead(CamelModel):
    workout_id: int
    workout_title: str
    performed_at: datetime
    set_count: int
    total_reps: int
    best_weight: float | None = None
    best_weight_reps: int | None = None
    total_volume: int

class ChartPoint(CamelModel):
    performed_at: datetime
    best_weight: float | None = None

class ExerciseDetailRead(CamelModel):
    key: str
    route_key: str
    name: str
    sessions_count: int
    set_count: int
    total_reps: int
    total_volume: int
    best_weight: float | None = None
    average_reps_per_set: float
    average_volume_per_session: float
    last_performed_at: datetime | None = None
    days_since_last_hit: int
    sessions: list[ExerciseSessionRead]
    chart: list[ChartPoint]
