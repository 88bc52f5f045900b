"""ORM models - import all so Base.metadata is complete for migrations."""

from training_tracker.models.exercise import Exercise
from training_tracker.models.user import User
from training_tracker.models.warmup import Warmup
from training_tracker.models.workout import Workout, WorkoutSet

__all__ = [
    "Exercise",
    "User",
    "Warmup",
    "Workout",
    "WorkoutSet",
]
