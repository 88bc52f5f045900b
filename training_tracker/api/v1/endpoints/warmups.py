"""Warmup endpoints. A warmup's end anchors the rest time before the first set."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from training_tracker.api.deps import get_owner_id
from training_tracker.core.timestamps import as_utc, utc_now
from training_tracker.db.session import get_db
from training_tracker.models.warmup import Warmup
from training_tracker.models.workout import Workout
from training_tracker.schemas.warmup import WarmupCreate, WarmupRead, WarmupUpdate
from training_tracker.services.access import get_owned_warmup
from training_tracker.services.durations import mark_durations_stale
from training_tracker.services.workouts import get_or_create_workout

router = APIRouter()


@router.get("", response_model=list[WarmupRead])
async def list_warmups(
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
    workout_date: date | None = None,
):
    """Warmups of the user, newest workout first; optionally only one date."""
    stmt = select(Warmup).join(Workout, Workout.id == Warmup.workout_id).where(Workout.user_id == owner_id)
    if workout_date:
        stmt = stmt.where(Workout.date == workout_date)
    result = await db.execute(stmt.order_by(Workout.date.desc(), Warmup.created_at.asc()))
    return list(result.scalars().all())


@router.post("", response_model=WarmupRead, status_code=201)
async def create_warmup(
    payload: WarmupCreate,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
):
    workout = await get_or_create_workout(db, owner_id, payload.workout_date)
    data = payload.model_dump(exclude={"workout_date", "created_at"})
    warmup = Warmup(
        workout_id=workout.id,
        created_at=as_utc(payload.created_at) if payload.created_at else utc_now(),
        **data,
    )
    db.add(warmup)
    await db.flush()
    await mark_durations_stale(db, workout.id)
    await db.refresh(warmup)
    return warmup


@router.patch("/{warmup_id}", response_model=WarmupRead)
async def update_warmup(
    warmup_id: int,
    payload: WarmupUpdate,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
):
    warmup = await get_owned_warmup(db, warmup_id, owner_id)
    for k, v in payload.model_dump(exclude_unset=True).items():
        setattr(warmup, k, v)
    await db.flush()
    await mark_durations_stale(db, warmup.workout_id)
    await db.refresh(warmup)
    return warmup


@router.delete("/{warmup_id}", status_code=204)
async def delete_warmup(
    warmup_id: int,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
):
    warmup = await get_owned_warmup(db, warmup_id, owner_id)
    await db.delete(warmup)
    await mark_durations_stale(db, warmup.workout_id)
    return None
