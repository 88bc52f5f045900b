"""Dense set numbering per (workout, exercise).

set_number must stay exactly 1..N inside each group. UNIQUE(workout_id,
exercise_id, set_number) forbids shifting 3,4,5 -> 2,3,4 in place, so
renumbering first moves the whole group above RENUMBER_SET_OFFSET and then
assigns 1..N in the previous order. Both steps run in the caller's transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from training_tracker.core.constants import RENUMBER_SET_OFFSET
from training_tracker.models.workout import WorkoutSet
from training_tracker.services.access import find_owned_set
from training_tracker.services.durations import mark_durations_stale

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeleteSetResult:
    deleted: bool
    renumbered: int = 0


async def next_set_number(db: AsyncSession, workout_id: int, exercise_id: int) -> int:
    """Current max within the group + 1."""
    result = await db.execute(
        select(func.max(WorkoutSet.set_number)).where(
            WorkoutSet.workout_id == workout_id,
            WorkoutSet.exercise_id == exercise_id,
        )
    )
    return (result.scalar() or 0) + 1


async def renumber_sets(db: AsyncSession, workout_id: int, exercise_id: int) -> int:
    """Close gaps in the group's set numbers, keeping relative order. Returns the group size."""
    in_group = (WorkoutSet.workout_id == workout_id, WorkoutSet.exercise_id == exercise_id)

    await db.execute(
        update(WorkoutSet)
        .where(*in_group)
        .values(set_number=WorkoutSet.set_number + RENUMBER_SET_OFFSET)
    )
    result = await db.execute(
        select(WorkoutSet.id).where(*in_group).order_by(WorkoutSet.set_number.asc())
    )
    ids = list(result.scalars().all())
    for number, set_id in enumerate(ids, start=1):
        await db.execute(
            update(WorkoutSet)
            .where(WorkoutSet.id == set_id)
            .values(set_number=number)
        )
    logger.debug("Renumbered %d sets of workout %s / exercise %s", len(ids), workout_id, exercise_id)
    return len(ids)


async def delete_set(db: AsyncSession, set_id: int, owner_id: int) -> DeleteSetResult:
    """
    Delete a set and renumber its remaining siblings.

    A missing set returns deleted=False. A set of another user's workout raises
    UnauthorizedError before anything is changed.
    """
    set_ = await find_owned_set(db, set_id, owner_id)
    if set_ is None:
        return DeleteSetResult(deleted=False)

    workout_id, exercise_id = set_.workout_id, set_.exercise_id
    await db.execute(delete(WorkoutSet).where(WorkoutSet.id == set_id))
    renumbered = await renumber_sets(db, workout_id, exercise_id)
    await mark_durations_stale(db, workout_id)
    return DeleteSetResult(deleted=True, renumbered=renumbered)
