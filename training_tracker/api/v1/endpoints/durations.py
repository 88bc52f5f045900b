"""On-demand rest-time recomputation (the scheduled worker does the same with tighter bounds)."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from training_tracker.core.config import get_settings
from training_tracker.db.session import get_db
from training_tracker.schemas.workout import DurationRecomputeResponse
from training_tracker.services.durations import recompute_durations
from training_tracker.services.outlier_cleaning import UNCAPPED

router = APIRouter()


@router.post("/recompute", response_model=DurationRecomputeResponse)
async def recompute(db: AsyncSession = Depends(get_db)):
    """Derive raw rest times for every workout and clean outliers per exercise (no 10s/600s caps)."""
    result = await recompute_durations(db, bounds=UNCAPPED, policy=get_settings().raw_duration_policy)
    return DurationRecomputeResponse(
        sets_updated=result.sets_updated,
        outliers_found=result.outliers_found,
        workouts_processed=result.workouts_processed,
    )
