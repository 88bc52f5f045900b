"""Statistics endpoints: overview and per-exercise progression."""

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from training_tracker.api.deps import get_owner_id
from training_tracker.db.session import get_db
from training_tracker.services.stats import overview_stats, weight_progression

router = APIRouter()


@router.get("")
async def get_stats(
    start: date | None = None,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
):
    """Totals, weekly volume and volume per exercise since `start`."""
    return await overview_stats(db, owner_id, start)


@router.get("/exercise/{exercise_id}")
async def get_exercise_stats(
    exercise_id: int,
    start: date | None = None,
    db: AsyncSession = Depends(get_db),
    owner_id: int = Depends(get_owner_id),
):
    """Weight progression of one exercise per workout date."""
    return {"progression": await weight_progression(db, exercise_id, owner_id, start)}
