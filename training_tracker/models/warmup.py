"""Warmup model - cardio or mobility block logged before the sets of a workout."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from training_tracker.core.enums import Difficulty
from training_tracker.db.base import Base
from training_tracker.models.workout import difficulty_column_type


class Warmup(Base):
    """Warmup entry. Its end (created_at + duration) anchors the rest before the first set."""

    __tablename__ = "warmups"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    workout_id: Mapped[int] = mapped_column(
        ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(String(100), nullable=False)  # e.g. Rudergerät, Laufband
    duration_seconds: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    distance_meters: Mapped[float | None] = mapped_column(Float, nullable=True)
    avg_heart_rate: Mapped[int | None] = mapped_column(Integer, nullable=True)
    difficulty: Mapped[Difficulty | None] = mapped_column(difficulty_column_type(), nullable=True)
    calories: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    workout: Mapped["Workout"] = relationship("Workout", back_populates="warmups")
