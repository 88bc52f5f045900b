"""Set store: create, edit, complete and query logged sets."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from training_tracker.core.enums import Difficulty
from training_tracker.core.exceptions import InvalidStateError
from training_tracker.core.timestamps import as_utc, utc_now
from training_tracker.models.workout import Workout, WorkoutSet
from training_tracker.services.access import get_owned_exercise, get_owned_set, get_owned_workout
from training_tracker.services.durations import mark_durations_stale
from training_tracker.services.set_numbering import next_set_number


async def create_set(
    db: AsyncSession,
    workout_id: int,
    exercise_id: int,
    owner_id: int,
    *,
    weight: float = 0,
    reps: int = 0,
    difficulty: Difficulty = Difficulty.MITTEL,
    created_at: datetime | None = None,
) -> WorkoutSet:
    """Append a set to its (workout, exercise) group as number max + 1."""
    await get_owned_workout(db, workout_id, owner_id)
    await get_owned_exercise(db, exercise_id, owner_id)
    if weight < 0 or reps < 0:
        raise InvalidStateError("Weight and reps must not be negative")

    set_ = WorkoutSet(
        workout_id=workout_id,
        exercise_id=exercise_id,
        set_number=await next_set_number(db, workout_id, exercise_id),
        weight=weight,
        reps=reps,
        difficulty=difficulty,
        created_at=as_utc(created_at) if created_at else utc_now(),
    )
    db.add(set_)
    try:
        await db.flush()
    except IntegrityError as e:
        # Another writer took the same number between our max() and insert
        raise InvalidStateError("Set number already taken, retry the request") from e
    await mark_durations_stale(db, workout_id)
    await db.refresh(set_)
    return set_


async def update_set(
    db: AsyncSession,
    set_id: int,
    owner_id: int,
    *,
    weight: float | None = None,
    reps: int | None = None,
    difficulty: Difficulty | None = None,
) -> WorkoutSet:
    """Edit weight / reps / difficulty. None leaves a field unchanged."""
    set_ = await get_owned_set(db, set_id, owner_id)
    if weight is not None:
        if weight < 0:
            raise InvalidStateError("Weight must not be negative")
        set_.weight = weight
    if reps is not None:
        if reps < 0:
            raise InvalidStateError("Reps must not be negative")
        set_.reps = reps
    if difficulty is not None:
        set_.difficulty = difficulty
    await db.flush()
    return set_


async def complete_set(db: AsyncSession, set_id: int, owner_id: int, at: datetime | None = None) -> WorkoutSet:
    """Stamp completed_at; the next set's rest is measured from here."""
    set_ = await get_owned_set(db, set_id, owner_id)
    set_.completed_at = as_utc(at) if at else utc_now()
    await mark_durations_stale(db, set_.workout_id)
    await db.flush()
    return set_


async def get_sets_for_workout(db: AsyncSession, workout_id: int, owner_id: int) -> list[WorkoutSet]:
    await get_owned_workout(db, workout_id, owner_id)
    result = await db.execute(
        select(WorkoutSet)
        .where(WorkoutSet.workout_id == workout_id)
        .options(selectinload(WorkoutSet.exercise))
        .order_by(WorkoutSet.created_at.asc(), WorkoutSet.set_number.asc())
    )
    return list(result.scalars().all())


async def list_sets(
    db: AsyncSession,
    owner_id: int,
    from_date: date | None = None,
    to_date: date | None = None,
) -> list[WorkoutSet]:
    """All sets of a user, newest workout first, then in logging order."""
    stmt = (
        select(WorkoutSet)
        .join(Workout, Workout.id == WorkoutSet.workout_id)
        .where(Workout.user_id == owner_id)
        .options(selectinload(WorkoutSet.exercise), selectinload(WorkoutSet.workout))
    )
    if from_date:
        stmt = stmt.where(Workout.date >= from_date)
    if to_date:
        stmt = stmt.where(Workout.date <= to_date)
    stmt = stmt.order_by(Workout.date.desc(), WorkoutSet.created_at.asc(), WorkoutSet.set_number.asc())
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def last_set_for_exercise(
    db: AsyncSession,
    exercise_id: int,
    set_number: int,
    owner_id: int,
    before: date | None = None,
) -> WorkoutSet | None:
    """Most recent set with this number for the exercise, used to pre-fill weight and reps."""
    await get_owned_exercise(db, exercise_id, owner_id)
    stmt = (
        select(WorkoutSet)
        .join(Workout, Workout.id == WorkoutSet.workout_id)
        .where(WorkoutSet.exercise_id == exercise_id, WorkoutSet.set_number == set_number)
        .options(selectinload(WorkoutSet.workout), selectinload(WorkoutSet.exercise))
    )
    if before:
        stmt = stmt.where(Workout.date < before)
    result = await db.execute(stmt.order_by(Workout.date.desc()).limit(1))
    return result.scalar_one_or_none()
