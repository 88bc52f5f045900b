"""Set endpoints: logging, editing, deleting (with renumbering) and superset links."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from training_tracker.api.deps import get_owner_id
from training_tracker.db.session import get_db
from training_tracker.models.workout import WorkoutSet
from training_tracker.schemas.workout import (
    DeleteSetResponse,
    LinkCandidateGroup,
    SupersetLinkRequest,
    SupersetLinkResponse,
    WorkoutSetCreate,
    WorkoutSetRead,
    WorkoutSetUpdate,
)
from training_tracker.services import sets as set_service
from training_tracker.services import supersets
from training_tracker.services import workouts as workout_service
from training_tracker.services.access import get_owned_exercise
from training_tracker.services.set_numbering import delete_set as delete_set_and_renumber

router = APIRouter()


async def _load_set(db: AsyncSession, set_id: int) -> WorkoutSet:
    """Reload with exercise for frontend display."""
    result = await db.execute(
        select(WorkoutSet)
        .where(WorkoutSet.id == set_id)
        .options(selectinload(WorkoutSet.exercise))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


@router.get("", response_model=list[WorkoutSetRead])
async def list_sets(
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
    from_date: date | None = None,
    to_date: date | None = None,
):
    """All sets of the user, newest workout first."""
    return await set_service.list_sets(db, owner_id, from_date, to_date)


@router.post("", response_model=WorkoutSetRead, status_code=201)
async def create_set(
    payload: WorkoutSetCreate,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
):
    """Log a set. The date's workout is created on demand, as is an exercise given by name."""
    workout = await workout_service.get_or_create_workout(db, owner_id, payload.workout_date)
    if payload.exercise_id is not None:
        exercise = await get_owned_exercise(db, payload.exercise_id, owner_id)
    else:
        exercise = await workout_service.create_exercise(db, owner_id, payload.exercise_name)
    set_ = await set_service.create_set(
        db,
        workout.id,
        exercise.id,
        owner_id,
        weight=payload.weight,
        reps=payload.reps,
        difficulty=payload.difficulty,
        created_at=payload.created_at,
    )
    return await _load_set(db, set_.id)


@router.get("/last", response_model=WorkoutSetRead | None)
async def last_set(
    exercise_id: int,
    set_number: int = 1,
    before: date | None = None,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
):
    """Previous set with the same number for this exercise (weight / reps suggestion)."""
    return await set_service.last_set_for_exercise(db, exercise_id, set_number, owner_id, before)


@router.post("/link", response_model=SupersetLinkResponse)
async def link_sets(
    payload: SupersetLinkRequest,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
):
    """Link two sets as a superset, merging their groups if both already have one."""
    superset_id = await supersets.link_sets(db, payload.set_id, payload.target_set_id, owner_id)
    return SupersetLinkResponse(superset_id=superset_id)


@router.patch("/{set_id}", response_model=WorkoutSetRead)
async def update_set(
    set_id: int,
    payload: WorkoutSetUpdate,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
):
    """Update weight, reps or difficulty."""
    await set_service.update_set(db, set_id, owner_id, **payload.model_dump(exclude_unset=True))
    return await _load_set(db, set_id)


@router.delete("/{set_id}", response_model=DeleteSetResponse)
async def delete_set(
    set_id: int,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
):
    """Delete a set; the remaining sets of its exercise are renumbered 1..N."""
    result = await delete_set_and_renumber(db, set_id, owner_id)
    if not result.deleted:
        raise HTTPException(status_code=404, detail="Set not found")
    return DeleteSetResponse(deleted=result.deleted, renumbered=result.renumbered)


@router.post("/{set_id}/complete", response_model=WorkoutSetRead)
async def complete_set(
    set_id: int,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
):
    await set_service.complete_set(db, set_id, owner_id)
    return await _load_set(db, set_id)


@router.delete("/{set_id}/superset", status_code=204)
async def unlink_set(
    set_id: int,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
):
    """Remove the set from its superset; the other members stay linked."""
    await supersets.unlink_superset(db, set_id, owner_id)
    return None


@router.get("/{set_id}/partners", response_model=list[WorkoutSetRead])
async def superset_partners(
    set_id: int,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
):
    return await supersets.get_superset_partners(db, set_id, owner_id)


@router.get("/{set_id}/link-candidates", response_model=list[LinkCandidateGroup])
async def link_candidates(
    set_id: int,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
):
    """Sets of other exercises in the same workout, grouped by exercise (newest first)."""
    groups = await supersets.get_link_candidates(db, set_id, owner_id)
    return [
        LinkCandidateGroup(exercise_id=exercise_id, sets=[WorkoutSetRead.model_validate(s) for s in members])
        for exercise_id, members in groups.items()
    ]
