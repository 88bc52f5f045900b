"""Workout endpoints: one workout per user and calendar date."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from training_tracker.api.deps import get_owner_id
from training_tracker.db.session import get_db
from training_tracker.models.workout import Workout
from training_tracker.schemas.workout import (
    WorkoutCreate,
    WorkoutRead,
    WorkoutReadWithSets,
    WorkoutSetRead,
    WorkoutUpdate,
)
from training_tracker.services import workouts as workout_service
from training_tracker.services.access import get_owned_workout
from training_tracker.services.sets import get_sets_for_workout
from training_tracker.services.stats import workout_duration

router = APIRouter()


@router.get("", response_model=list[WorkoutRead])
async def list_workouts(
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
    limit: int = 5,
    from_date: date | None = None,
    to_date: date | None = None,
):
    """Most recent workouts first (without sets), optionally filtered by date range."""
    stmt = select(Workout).where(Workout.user_id == owner_id)
    if from_date:
        stmt = stmt.where(Workout.date >= from_date)
    if to_date:
        stmt = stmt.where(Workout.date <= to_date)
    result = await db.execute(stmt.order_by(Workout.date.desc()).limit(limit))
    return list(result.scalars().all())


@router.post("", response_model=WorkoutRead, status_code=201)
async def create_workout(
    payload: WorkoutCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
):
    """Start the workout for a date. There is at most one per date; an existing one is returned with 200."""
    workout = await workout_service.get_workout_by_date(db, owner_id, payload.date)
    if workout is not None:
        response.status_code = 200
    else:
        workout = await workout_service.get_or_create_workout(db, owner_id, payload.date)
    if payload.notes is not None:
        workout.notes = payload.notes
        await db.flush()
    return workout


async def _with_sets(db: AsyncSession, workout: Workout, owner_id: int) -> WorkoutReadWithSets:
    sets = await get_sets_for_workout(db, workout.id, owner_id)
    return WorkoutReadWithSets(
        id=workout.id,
        date=workout.date,
        notes=workout.notes,
        created_at=workout.created_at,
        duration_seconds=await workout_duration(db, workout.id, owner_id),
        sets=[WorkoutSetRead.model_validate(s) for s in sets],
    )


@router.get("/by-date/{day}", response_model=WorkoutReadWithSets)
async def get_workout_by_date(
    day: date,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
):
    workout = await workout_service.get_workout_by_date(db, owner_id, day)
    if not workout:
        raise HTTPException(status_code=404, detail="Workout not found")
    return await _with_sets(db, workout, owner_id)


@router.get("/{workout_id}", response_model=WorkoutReadWithSets)
async def get_workout(
    workout_id: int,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
):
    """Workout with all sets in logging order and its total duration."""
    workout = await get_owned_workout(db, workout_id, owner_id)
    return await _with_sets(db, workout, owner_id)


@router.patch("/{workout_id}", response_model=WorkoutRead)
async def update_workout(
    workout_id: int,
    payload: WorkoutUpdate,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
):
    workout = await get_owned_workout(db, workout_id, owner_id)
    for k, v in payload.model_dump(exclude_unset=True).items():
        setattr(workout, k, v)
    await db.flush()
    await db.refresh(workout)
    return workout


@router.delete("/{workout_id}", status_code=204)
async def delete_workout(
    workout_id: int,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
):
    """Delete a workout with its sets and warmups."""
    workout = await get_owned_workout(db, workout_id, owner_id)
    await db.delete(workout)
    return None
