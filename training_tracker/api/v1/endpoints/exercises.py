"""Exercise CRUD endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from training_tracker.api.deps import get_owner_id
from training_tracker.db.session import get_db
from training_tracker.models.exercise import Exercise
from training_tracker.schemas.exercise import ExerciseCreate, ExerciseRead, ExerciseUpdate
from training_tracker.services import workouts as workout_service
from training_tracker.services.access import get_owned_exercise

router = APIRouter()


@router.get("", response_model=list[ExerciseRead])
async def list_exercises(
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
    skip: int = 0,
    limit: int = 200,
):
    """List the user's exercises by name."""
    result = await db.execute(
        select(Exercise)
        .where(Exercise.user_id == owner_id)
        .order_by(Exercise.name)
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all())


@router.post("", response_model=ExerciseRead, status_code=201)
async def create_exercise(
    payload: ExerciseCreate,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
):
    """Create an exercise. If the name already exists, that exercise is returned."""
    return await workout_service.create_exercise(
        db, owner_id, payload.name, icon=payload.icon, muscle_groups=payload.muscle_groups
    )


@router.get("/{exercise_id}", response_model=ExerciseRead)
async def get_exercise(
    exercise_id: int,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
):
    return await get_owned_exercise(db, exercise_id, owner_id)


@router.patch("/{exercise_id}", response_model=ExerciseRead)
async def update_exercise(
    exercise_id: int,
    payload: ExerciseUpdate,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
):
    """Rename an exercise or change its icon / muscle groups."""
    data = payload.model_dump(exclude_unset=True)
    if data.get("name"):
        exercise = await workout_service.rename_exercise(db, exercise_id, owner_id, data.pop("name"))
    else:
        data.pop("name", None)
        exercise = await get_owned_exercise(db, exercise_id, owner_id)
    for k, v in data.items():
        setattr(exercise, k, v)
    await db.flush()
    await db.refresh(exercise)
    return exercise


@router.delete("/{exercise_id}", status_code=204)
async def delete_exercise(
    exercise_id: int,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
):
    """Delete an exercise and all of its sets."""
    await workout_service.delete_exercise(db, exercise_id, owner_id)
    return None
