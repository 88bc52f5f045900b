"""Warmup schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from training_tracker.core.enums import Difficulty


class WarmupBase(BaseModel):
    type: str = Field(..., min_length=1, max_length=100)
    duration_seconds: int = Field(0, ge=0)
    distance_meters: float | None = Field(None, ge=0)
    avg_heart_rate: int | None = Field(None, ge=0)
    difficulty: Difficulty | None = None
    calories: int | None = Field(None, ge=0)
    notes: str | None = None


class WarmupCreate(WarmupBase):
    workout_date: date
    created_at: datetime | None = None


class WarmupUpdate(BaseModel):
    type: str | None = Field(None, min_length=1, max_length=100)
    duration_seconds: int | None = Field(None, ge=0)
    distance_meters: float | None = Field(None, ge=0)
    avg_heart_rate: int | None = Field(None, ge=0)
    difficulty: Difficulty | None = None
    calories: int | None = Field(None, ge=0)
    notes: str | None = None

    @field_validator("type", "duration_seconds")
    @classmethod
    def not_null(cls, value):
        # Omit the field to keep it; the columns are NOT NULL
        if value is None:
            raise ValueError("must not be null")
        return value


class WarmupRead(WarmupBase):
    model_config = ConfigDict(from_attributes=True)
    id: int
    workout_id: int
    created_at: datetime
