"""Rest durations between sets: raw derivation and per-exercise outlier cleaning.

Raw rest is measured across exercises in creation order: each set's rest is the
time since the previous set of the same workout was completed (or created, if it
never was). The first set is measured from the end of the workout's latest
warmup, if any. Cleaning then runs per exercise, see outlier_cleaning.
"""

from __future__ import annotations

import logging
import time
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from training_tracker.core.constants import MAX_RAW_DURATION_SECONDS
from training_tracker.core.enums import RawDurationPolicy
from training_tracker.core.timestamps import as_utc, utc_now
from training_tracker.models.warmup import Warmup
from training_tracker.models.workout import Workout, WorkoutSet
from training_tracker.services.outlier_cleaning import (
    UNCAPPED,
    CleaningBounds,
    clean_durations,
    round_half_up,
)

logger = logging.getLogger(__name__)


class TimedSet(Protocol):
    id: int
    created_at: datetime
    completed_at: datetime | None


@dataclass(slots=True)
class DurationRecomputeResult:
    sets_updated: int = 0
    outliers_found: int = 0
    workouts_processed: int = 0

    def add(self, other: "DurationRecomputeResult") -> None:
        self.sets_updated += other.sets_updated
        self.outliers_found += other.outliers_found
        self.workouts_processed += other.workouts_processed


def seconds_between(later: datetime, earlier: datetime) -> int:
    return round_half_up((as_utc(later) - as_utc(earlier)).total_seconds())


def warmup_end(warmup: Warmup | None) -> datetime | None:
    if warmup is None:
        return None
    return as_utc(warmup.created_at) + timedelta(seconds=warmup.duration_seconds or 0)


def _apply_policy(gap: int, set_id: int, policy: RawDurationPolicy) -> int | None:
    if 0 <= gap <= MAX_RAW_DURATION_SECONDS:
        return gap
    if policy is RawDurationPolicy.DISCARD:
        logger.warning("Set %s: discarding anomalous rest gap of %ss", set_id, gap)
        return None
    logger.warning("Set %s: anomalous rest gap of %ss, keeping %ss", set_id, gap, abs(gap))
    return abs(gap)


def derive_raw_durations(
    sets: Sequence[TimedSet],
    baseline: datetime | None = None,
    policy: RawDurationPolicy = RawDurationPolicy.ABSOLUTE,
) -> list[int | None]:
    """
    Raw rest (whole seconds) for each set of one workout, in the given order.

    `sets` must already be ordered by created_at. `baseline` is the end of the
    warmup; without one the first set has no rest. A first set created before
    the warmup ended gets None: that gap is not corrected like later ones.
    """
    durations: list[int | None] = []
    for i, current in enumerate(sets):
        if i == 0:
            if baseline is None:
                durations.append(None)
                continue
            gap = seconds_between(current.created_at, baseline)
            if gap < 0:
                durations.append(None)
                continue
        else:
            previous = sets[i - 1]
            gap = seconds_between(current.created_at, previous.completed_at or previous.created_at)
        durations.append(_apply_policy(gap, current.id, policy))
    return durations


def clean_workout_durations(sets: Sequence[WorkoutSet], bounds: CleaningBounds = UNCAPPED) -> int:
    """Write duration_cleaned on every set, grouped per exercise. Returns the outlier count."""
    by_exercise: dict[int, list[WorkoutSet]] = defaultdict(list)
    for set_ in sets:
        by_exercise[set_.exercise_id].append(set_)

    outliers = 0
    for exercise_sets in by_exercise.values():
        measured = [s for s in exercise_sets if s.duration_seconds is not None]
        result = clean_durations([s.duration_seconds for s in measured], bounds)
        for set_, cleaned in zip(measured, result.cleaned):
            set_.duration_cleaned = cleaned
        for set_ in exercise_sets:
            if set_.duration_seconds is None:
                set_.duration_cleaned = None
        outliers += result.outliers
    return outliers


async def latest_warmup(db: AsyncSession, workout_id: int) -> Warmup | None:
    result = await db.execute(
        select(Warmup)
        .where(Warmup.workout_id == workout_id)
        .order_by(Warmup.created_at.desc(), Warmup.id.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def recompute_workout_durations(
    db: AsyncSession,
    workout_id: int,
    bounds: CleaningBounds = UNCAPPED,
    policy: RawDurationPolicy = RawDurationPolicy.ABSOLUTE,
) -> DurationRecomputeResult:
    """Derive raw durations for one workout and clean them per exercise. Caller commits."""
    result = await db.execute(
        select(WorkoutSet)
        .where(WorkoutSet.workout_id == workout_id)
        .order_by(WorkoutSet.created_at.asc(), WorkoutSet.id.asc())
    )
    sets = list(result.scalars().all())
    if not sets:
        return DurationRecomputeResult()

    warmup = await latest_warmup(db, workout_id)
    raw = derive_raw_durations(sets, warmup_end(warmup), policy)
    updated = 0
    for set_, duration in zip(sets, raw):
        set_.duration_seconds = duration
        if duration is not None:
            updated += 1

    outliers = clean_workout_durations(sets, bounds)
    await db.execute(update(Workout).where(Workout.id == workout_id).values(durations_computed_at=utc_now()))
    await db.flush()
    return DurationRecomputeResult(sets_updated=updated, outliers_found=outliers, workouts_processed=1)


async def mark_durations_stale(db: AsyncSession, *workout_ids: int) -> None:
    """Queue workouts for the next scheduled pass after their sets or warmups changed."""
    if not workout_ids:
        return
    await db.execute(
        update(Workout).where(Workout.id.in_(workout_ids)).values(durations_computed_at=None)
    )


async def workouts_needing_durations(db: AsyncSession, limit: int | None = None) -> list[int]:
    """
    Workouts with sets whose rest times were never computed or went stale, newest date first.

    Sets left null on purpose (first set without warmup, discarded gaps) do not
    keep a workout pending: the marker on the workout decides.
    """
    stmt = (
        select(Workout.id, Workout.date)
        .join(WorkoutSet, WorkoutSet.workout_id == Workout.id)
        .where(Workout.durations_computed_at.is_(None))
        .distinct()
        .order_by(Workout.date.desc())
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    result = await db.execute(stmt)
    return [row.id for row in result.all()]


async def workouts_with_sets(db: AsyncSession) -> list[int]:
    result = await db.execute(select(WorkoutSet.workout_id).distinct().order_by(WorkoutSet.workout_id))
    return list(result.scalars().all())


async def recompute_durations(
    db: AsyncSession,
    bounds: CleaningBounds = UNCAPPED,
    policy: RawDurationPolicy = RawDurationPolicy.ABSOLUTE,
    workout_ids: Sequence[int] | None = None,
) -> DurationRecomputeResult:
    """Recompute raw and cleaned durations for the given workouts (default: every workout with sets)."""
    started = time.monotonic()
    if workout_ids is None:
        workout_ids = await workouts_with_sets(db)

    total = DurationRecomputeResult()
    for workout_id in workout_ids:
        total.add(await recompute_workout_durations(db, workout_id, bounds, policy))

    logger.info(
        "Recomputed durations for %d workouts: %d sets updated, %d outliers cleaned in %dms",
        total.workouts_processed,
        total.sets_updated,
        total.outliers_found,
        int((time.monotonic() - started) * 1000),
    )
    return total
