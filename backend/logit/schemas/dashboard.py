from datetime import date, datetime
from logit.schemas.common import CamelModel

class DayBarRead(CamelModel):
    day: date
    label: str
    count: int

class PersonalBestRead(CamelModel):
    lift: str
    weight: float
    reps: int
    performed_at: datetime

class WeekPointRead(CamelModel):
    week_start: date
    sessions: int
    volume: int

class DashboardRead(CamelModel):
    total_workouts: int
    workouts_this_week: int
    total_exercises: int
    total_sets: int
    total_weight_lifted: int
    month_change: float
    weekly_bars: list[DayBarRead]
    personal_bests: list[PersonalBestRead]
    weekly_series: list[WeekPointRead]
    current_week: int
    week_delta: int
    avg_weekly: float
