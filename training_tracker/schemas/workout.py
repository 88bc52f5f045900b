"""Workout, WorkoutSet and superset schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from training_tracker.core.enums import Difficulty


class ExerciseRef(BaseModel):
    """Minimal exercise info for embedding in set responses (id + name only)."""

    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class WorkoutSetCreate(BaseModel):
    """Log a set. The workout is found (or created) by date; the exercise by id or name."""

    workout_date: date
    exercise_id: int | None = None
    exercise_name: str | None = Field(None, min_length=1, max_length=255)
    weight: float = Field(0, ge=0)
    reps: int = Field(0, ge=0)
    difficulty: Difficulty = Difficulty.MITTEL
    created_at: datetime | None = None

    @model_validator(mode="after")
    def exercise_given(self):
        if self.exercise_id is None and not self.exercise_name:
            raise ValueError("exercise_id or exercise_name is required")
        return self


class WorkoutSetUpdate(BaseModel):
    weight: float | None = Field(None, ge=0)
    reps: int | None = Field(None, ge=0)
    difficulty: Difficulty | None = None


class WorkoutSetRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    workout_id: int
    exercise_id: int
    set_number: int
    weight: float
    reps: int
    difficulty: Difficulty
    created_at: datetime
    completed_at: datetime | None = None
    duration_seconds: int | None = None
    duration_cleaned: int | None = None
    superset_id: UUID | None = None
    exercise: ExerciseRef | None = None


class DeleteSetResponse(BaseModel):
    deleted: bool
    renumbered: int


class SupersetLinkRequest(BaseModel):
    set_id: int
    target_set_id: int


class SupersetLinkResponse(BaseModel):
    superset_id: UUID


class LinkCandidateGroup(BaseModel):
    exercise_id: int
    sets: list[WorkoutSetRead] = []


class WorkoutCreate(BaseModel):
    date: date
    notes: str | None = None


class WorkoutUpdate(BaseModel):
    notes: str | None = None


class WorkoutRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    date: date
    notes: str | None = None
    created_at: datetime | None = None


class WorkoutReadWithSets(WorkoutRead):
    """Workout with nested sets (for detail view) and total duration (warmups + rest)."""

    duration_seconds: int = 0
    sets: list[WorkoutSetRead] = []


class DurationRecomputeResponse(BaseModel):
    sets_updated: int
    outliers_found: int
    workouts_processed: int
