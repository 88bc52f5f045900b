"""Ownership lookups shared by the services: fetch a row or raise NotFound / Unauthorized."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from training_tracker.core.exceptions import NotFoundError, UnauthorizedError
from training_tracker.models.exercise import Exercise
from training_tracker.models.warmup import Warmup
from training_tracker.models.workout import Workout, WorkoutSet


async def get_owned_workout(db: AsyncSession, workout_id: int, owner_id: int) -> Workout:
    workout = await db.get(Workout, workout_id)
    if workout is None:
        raise NotFoundError(f"Workout {workout_id} not found")
    if workout.user_id != owner_id:
        raise UnauthorizedError(f"Workout {workout_id} belongs to another user")
    return workout


async def get_owned_exercise(db: AsyncSession, exercise_id: int, owner_id: int) -> Exercise:
    exercise = await db.get(Exercise, exercise_id)
    if exercise is None:
        raise NotFoundError(f"Exercise {exercise_id} not found")
    if exercise.user_id != owner_id:
        raise UnauthorizedError(f"Exercise {exercise_id} belongs to another user")
    return exercise


async def find_owned_set(db: AsyncSession, set_id: int, owner_id: int) -> WorkoutSet | None:
    """Like get_owned_set but returns None for a missing set. Ownership is still enforced."""
    result = await db.execute(
        select(WorkoutSet, Workout.user_id)
        .join(Workout, Workout.id == WorkoutSet.workout_id)
        .where(WorkoutSet.id == set_id)
    )
    row = result.one_or_none()
    if row is None:
        return None
    set_, user_id = row
    if user_id != owner_id:
        raise UnauthorizedError(f"Set {set_id} belongs to another user")
    return set_


async def get_owned_set(db: AsyncSession, set_id: int, owner_id: int) -> WorkoutSet:
    set_ = await find_owned_set(db, set_id, owner_id)
    if set_ is None:
        raise NotFoundError(f"Set {set_id} not found")
    return set_


async def get_owned_warmup(db: AsyncSession, warmup_id: int, owner_id: int) -> Warmup:
    result = await db.execute(
        select(Warmup, Workout.user_id)
        .join(Workout, Workout.id == Warmup.workout_id)
        .where(Warmup.id == warmup_id)
    )
    row = result.one_or_none()
    if row is None:
        raise NotFoundError(f"Warmup {warmup_id} not found")
    warmup, user_id = row
    if user_id != owner_id:
        raise UnauthorizedError(f"Warmup {warmup_id} belongs to another user")
    return warmup
