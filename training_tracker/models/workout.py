"""Workout and WorkoutSet models."""

from __future__ import annotations

import datetime as dt
import uuid

from sqlalchemy import (
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from training_tracker.core.enums import Difficulty
from training_tracker.db.base import Base


def difficulty_column_type() -> Enum:
    """Store the display value ("Sehr schwer"), not the member name."""
    return Enum(
        Difficulty,
        values_callable=lambda members: [m.value for m in members],
        native_enum=False,
        length=20,
        name="difficulty",
    )


class Workout(Base):
    """All activity logged by one user on one calendar date."""

    __tablename__ = "workouts"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_workouts_user_date"),
        Index("ix_workouts_date", "date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=lambda: dt.datetime.now(dt.timezone.utc))
    # Null until rest times are computed; cleared whenever sets or warmups change
    durations_computed_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="workouts")
    sets: Mapped[list["WorkoutSet"]] = relationship(
        "WorkoutSet", back_populates="workout", cascade="all, delete-orphan"
    )
    warmups: Mapped[list["Warmup"]] = relationship(
        "Warmup", back_populates="workout", cascade="all, delete-orphan"
    )


class WorkoutSet(Base):
    """One set: weight x reps with difficulty, rest durations and optional superset group.

    set_number is dense (1..N) within (workout_id, exercise_id).
    duration_seconds is the raw rest before this set, duration_cleaned the outlier-corrected one.
    """

    __tablename__ = "sets"
    __table_args__ = (
        UniqueConstraint("workout_id", "exercise_id", "set_number", name="uq_sets_workout_exercise_number"),
        Index("ix_sets_workout_id", "workout_id"),
        Index("ix_sets_exercise_id", "exercise_id"),
        Index("ix_sets_created_at", "created_at"),
        Index("ix_sets_superset_id", "superset_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    workout_id: Mapped[int] = mapped_column(ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False)
    exercise_id: Mapped[int] = mapped_column(ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False)
    set_number: Mapped[int] = mapped_column(Integer, nullable=False)
    weight: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    reps: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    difficulty: Mapped[Difficulty] = mapped_column(
        difficulty_column_type(), nullable=False, default=Difficulty.MITTEL
    )
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=lambda: dt.datetime.now(dt.timezone.utc))
    completed_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    duration_cleaned: Mapped[int | None] = mapped_column(Integer, nullable=True)
    superset_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)

    workout: Mapped["Workout"] = relationship("Workout", back_populates="sets")
    exercise: Mapped["Exercise"] = relationship("Exercise", back_populates="sets")
