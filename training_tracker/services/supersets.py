"""Superset groups: sets sharing one non-null superset_id.

A group has no row of its own; it exists as long as some set carries its id.
Linking two sets that already belong to different groups merges the groups:
every member of B's group is moved to A's group, not only the two sets.
"""

from __future__ import annotations

import logging
from collections import OrderedDict

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from training_tracker.core.exceptions import InvalidStateError
from training_tracker.core.identifiers import SupersetId, new_superset_id
from training_tracker.models.workout import Workout, WorkoutSet
from training_tracker.services.access import get_owned_set

logger = logging.getLogger(__name__)


async def link_sets(db: AsyncSession, set_id_a: int, set_id_b: int, owner_id: int) -> SupersetId:
    """Put two sets into one superset group and return the group id."""
    if set_id_a == set_id_b:
        raise InvalidStateError("A set cannot be linked to itself")

    set_a = await get_owned_set(db, set_id_a, owner_id)
    set_b = await get_owned_set(db, set_id_b, owner_id)
    if set_a.workout_id != set_b.workout_id:
        raise InvalidStateError("Only sets of the same workout can form a superset")

    group_a, group_b = set_a.superset_id, set_b.superset_id

    if group_a is None and group_b is None:
        group = new_superset_id()
        set_a.superset_id = group
        set_b.superset_id = group
        logger.info("Created superset %s from sets %s and %s", group, set_a.id, set_b.id)
    elif group_a is not None and group_b is None:
        group = SupersetId(group_a)
        set_b.superset_id = group
    elif group_a is None:
        group = SupersetId(group_b)
        set_a.superset_id = group
    elif group_a == group_b:
        return SupersetId(group_a)
    else:
        group = SupersetId(group_a)
        result = await db.execute(
            update(WorkoutSet).where(WorkoutSet.superset_id == group_b).values(superset_id=group)
        )
        logger.info("Merged superset %s into %s (%d sets moved)", group_b, group, result.rowcount)

    await db.flush()
    return group


async def unlink_superset(db: AsyncSession, set_id: int, owner_id: int) -> None:
    """Remove one set from its group. The remaining members keep the group id."""
    set_ = await get_owned_set(db, set_id, owner_id)
    if set_.superset_id is None:
        return
    set_.superset_id = None
    await db.flush()


async def get_superset_members(db: AsyncSession, superset_id: SupersetId, owner_id: int) -> list[WorkoutSet]:
    result = await db.execute(
        select(WorkoutSet)
        .join(Workout, Workout.id == WorkoutSet.workout_id)
        .where(WorkoutSet.superset_id == superset_id, Workout.user_id == owner_id)
        .options(selectinload(WorkoutSet.exercise))
        .order_by(WorkoutSet.created_at.asc(), WorkoutSet.id.asc())
    )
    return list(result.scalars().all())


async def get_superset_partners(db: AsyncSession, set_id: int, owner_id: int) -> list[WorkoutSet]:
    """All other sets sharing the set's group (same user only). Empty when unlinked."""
    set_ = await get_owned_set(db, set_id, owner_id)
    if set_.superset_id is None:
        return []
    members = await get_superset_members(db, SupersetId(set_.superset_id), owner_id)
    return [m for m in members if m.id != set_.id]


async def get_link_candidates(
    db: AsyncSession, set_id: int, owner_id: int
) -> OrderedDict[int, list[WorkoutSet]]:
    """
    Sets that could be linked with the given one: same workout, other exercises.

    Keyed by exercise id, each list ordered by set_number; exercises whose latest
    set is newest come first.
    """
    source = await get_owned_set(db, set_id, owner_id)
    result = await db.execute(
        select(WorkoutSet)
        .where(
            WorkoutSet.workout_id == source.workout_id,
            WorkoutSet.exercise_id != source.exercise_id,
            WorkoutSet.id != source.id,
        )
        .options(selectinload(WorkoutSet.exercise))
        .order_by(WorkoutSet.exercise_id, WorkoutSet.set_number.asc())
    )
    by_exercise: dict[int, list[WorkoutSet]] = {}
    for candidate in result.scalars().all():
        by_exercise.setdefault(candidate.exercise_id, []).append(candidate)

    newest_first = sorted(
        by_exercise.items(),
        key=lambda item: max(s.created_at for s in item[1]),
        reverse=True,
    )
    return OrderedDict(newest_first)
