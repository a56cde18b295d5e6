from logit.models.user import User
from logit.models.exercise import Exercise
from logit.models.workout_log import WorkoutLog
from logit.models.workout_exercise import WorkoutExercise
from logit.models.workout_set import WorkoutSet

__all__ = ["User", "Exercise", "WorkoutLog", "WorkoutExercise", "WorkoutSet"]
