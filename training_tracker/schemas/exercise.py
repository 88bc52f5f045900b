"""Exercise schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ExerciseBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    icon: str | None = Field(None, max_length=16)
    muscle_groups: str | None = Field(None, max_length=255)


class ExerciseCreate(ExerciseBase):
    pass


class ExerciseUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    icon: str | None = Field(None, max_length=16)
    muscle_groups: str | None = Field(None, max_length=255)


class ExerciseRead(ExerciseBase):
    model_config = ConfigDict(from_attributes=True)
    id: int
    created_at: datetime | None = None
