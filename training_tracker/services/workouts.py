"""Workouts (one per user and date) and the exercise catalog."""

from __future__ import annotations

from datetime import date

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from training_tracker.core.exceptions import InvalidStateError
from training_tracker.models.exercise import Exercise
from training_tracker.models.user import User
from training_tracker.models.workout import Workout, WorkoutSet
from training_tracker.services.access import get_owned_exercise
from training_tracker.services.durations import mark_durations_stale


async def ensure_user(db: AsyncSession, user_id: int) -> User:
    """Return the user row, creating a bare one on first use (accounts are managed upstream)."""
    user = await db.get(User, user_id)
    if user is None:
        user = User(id=user_id)
        db.add(user)
        await db.flush()
    return user


async def get_workout_by_date(db: AsyncSession, owner_id: int, day: date) -> Workout | None:
    result = await db.execute(select(Workout).where(Workout.user_id == owner_id, Workout.date == day))
    return result.scalar_one_or_none()


async def get_or_create_workout(db: AsyncSession, owner_id: int, day: date) -> Workout:
    workout = await get_workout_by_date(db, owner_id, day)
    if workout is not None:
        return workout
    await ensure_user(db, owner_id)
    workout = Workout(user_id=owner_id, date=day)
    db.add(workout)
    await db.flush()
    await db.refresh(workout)
    return workout


async def get_exercise_by_name(db: AsyncSession, owner_id: int, name: str) -> Exercise | None:
    result = await db.execute(select(Exercise).where(Exercise.user_id == owner_id, Exercise.name == name))
    return result.scalar_one_or_none()


async def create_exercise(
    db: AsyncSession,
    owner_id: int,
    name: str,
    *,
    icon: str | None = None,
    muscle_groups: str | None = None,
) -> Exercise:
    """Create an exercise; an existing one with the same name is returned instead."""
    name = name.strip()
    if not name:
        raise InvalidStateError("Exercise name is required")
    existing = await get_exercise_by_name(db, owner_id, name)
    if existing is not None:
        return existing
    await ensure_user(db, owner_id)
    exercise = Exercise(user_id=owner_id, name=name, icon=icon, muscle_groups=muscle_groups)
    db.add(exercise)
    await db.flush()
    await db.refresh(exercise)
    return exercise


async def rename_exercise(db: AsyncSession, exercise_id: int, owner_id: int, new_name: str) -> Exercise:
    exercise = await get_owned_exercise(db, exercise_id, owner_id)
    new_name = new_name.strip()
    if not new_name:
        raise InvalidStateError("Exercise name is required")
    clash = await get_exercise_by_name(db, owner_id, new_name)
    if clash is not None and clash.id != exercise.id:
        raise InvalidStateError(f"An exercise named '{new_name}' already exists")
    exercise.name = new_name
    try:
        await db.flush()
    except IntegrityError as e:
        raise InvalidStateError(f"An exercise named '{new_name}' already exists") from e
    return exercise


async def delete_exercise(db: AsyncSession, exercise_id: int, owner_id: int) -> None:
    """Delete an exercise together with all of its sets."""
    exercise = await get_owned_exercise(db, exercise_id, owner_id)
    affected = await db.execute(select(WorkoutSet.workout_id).where(WorkoutSet.exercise_id == exercise_id).distinct())
    await mark_durations_stale(db, *affected.scalars().all())
    await db.execute(delete(WorkoutSet).where(WorkoutSet.exercise_id == exercise_id))
    await db.delete(exercise)
    await db.flush()
