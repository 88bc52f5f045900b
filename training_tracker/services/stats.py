"""Training statistics: workout duration, weight progression and volume overviews."""

from __future__ import annotations

from datetime import date
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from training_tracker.models.exercise import Exercise
from training_tracker.models.warmup import Warmup
from training_tracker.models.workout import Workout, WorkoutSet
from training_tracker.services.access import get_owned_exercise, get_owned_workout

EPOCH = date(1970, 1, 1)


def total_duration_seconds(warmups: list[Warmup], sets: list[WorkoutSet]) -> int:
    """
    Warmup activity time plus rest before each set.
    Cleaned rest is preferred; raw rest is used where cleaning has not run yet.
    """
    warmup_seconds = sum(w.duration_seconds or 0 for w in warmups)
    rest_seconds = sum(s.duration_cleaned or s.duration_seconds or 0 for s in sets)
    return warmup_seconds + rest_seconds


async def workout_duration(db: AsyncSession, workout_id: int, owner_id: int) -> int:
    await get_owned_workout(db, workout_id, owner_id)
    warmups = (await db.execute(select(Warmup).where(Warmup.workout_id == workout_id))).scalars().all()
    sets = (await db.execute(select(WorkoutSet).where(WorkoutSet.workout_id == workout_id))).scalars().all()
    return total_duration_seconds(list(warmups), list(sets))


async def weight_progression(
    db: AsyncSession,
    exercise_id: int,
    owner_id: int,
    start_date: date | None = None,
) -> list[dict[str, Any]]:
    """Per workout date: max/avg weight, avg reps, volume (weight x reps) and set count."""
    await get_owned_exercise(db, exercise_id, owner_id)
    result = await db.execute(
        select(
            Workout.date.label("workout_date"),
            func.max(WorkoutSet.weight).label("max_weight"),
            func.avg(WorkoutSet.weight).label("avg_weight"),
            func.avg(WorkoutSet.reps).label("avg_reps"),
            func.sum(WorkoutSet.weight * WorkoutSet.reps).label("total_volume"),
            func.count(WorkoutSet.id).label("set_count"),
        )
        .join(Workout, Workout.id == WorkoutSet.workout_id)
        .where(WorkoutSet.exercise_id == exercise_id, Workout.date >= (start_date or EPOCH))
        .group_by(Workout.id, Workout.date)
        .order_by(Workout.date)
    )
    return [
        {
            "workout_date": row.workout_date,
            "max_weight": float(row.max_weight or 0),
            "avg_weight": round(float(row.avg_weight or 0), 2),
            "avg_reps": round(float(row.avg_reps or 0), 2),
            "total_volume": float(row.total_volume or 0),
            "set_count": int(row.set_count),
        }
        for row in result.all()
    ]


def _week_key(day: date) -> str:
    # Monday-based week number, same buckets as SQLite's strftime('%Y-%W')
    return day.strftime("%Y-%W")


async def overview_stats(db: AsyncSession, owner_id: int, start_date: date | None = None) -> dict[str, Any]:
    """Totals, weekly volume and volume per exercise since start_date."""
    start = start_date or EPOCH
    in_range = (Workout.user_id == owner_id, Workout.date >= start)

    totals_row = (
        await db.execute(
            select(
                func.count(func.distinct(Workout.id)).label("total_workouts"),
                func.count(WorkoutSet.id).label("total_sets"),
                func.sum(WorkoutSet.weight * WorkoutSet.reps).label("total_volume"),
                func.count(func.distinct(WorkoutSet.exercise_id)).label("active_exercises"),
            )
            .select_from(WorkoutSet)
            .join(Workout, Workout.id == WorkoutSet.workout_id)
            .where(*in_range)
        )
    ).one()

    # Weekly buckets are built in Python so the query stays portable across SQLite and PostgreSQL
    per_workout = await db.execute(
        select(
            Workout.id,
            Workout.date,
            func.sum(WorkoutSet.weight * WorkoutSet.reps).label("volume"),
        )
        .join(WorkoutSet, WorkoutSet.workout_id == Workout.id)
        .where(*in_range)
        .group_by(Workout.id, Workout.date)
        .order_by(Workout.date)
    )
    weekly: dict[str, dict[str, Any]] = {}
    for row in per_workout.all():
        key = _week_key(row.date)
        bucket = weekly.setdefault(key, {"week": key, "week_start": row.date, "workout_count": 0, "volume": 0.0})
        bucket["workout_count"] += 1
        bucket["volume"] += float(row.volume or 0)

    per_exercise = await db.execute(
        select(
            Exercise.id,
            Exercise.name,
            func.count(WorkoutSet.id).label("set_count"),
            func.sum(WorkoutSet.weight * WorkoutSet.reps).label("volume"),
        )
        .join(WorkoutSet, WorkoutSet.exercise_id == Exercise.id)
        .join(Workout, Workout.id == WorkoutSet.workout_id)
        .where(*in_range)
        .group_by(Exercise.id, Exercise.name)
        .order_by(func.sum(WorkoutSet.weight * WorkoutSet.reps).desc())
    )

    return {
        "totals": {
            "total_workouts": int(totals_row.total_workouts or 0),
            "total_sets": int(totals_row.total_sets or 0),
            "total_volume": float(totals_row.total_volume or 0),
            "active_exercises": int(totals_row.active_exercises or 0),
        },
        "weekly": list(weekly.values()),
        "exercises": [
            {"id": row.id, "name": row.name, "set_count": int(row.set_count), "volume": float(row.volume or 0)}
            for row in per_exercise.all()
        ],
    }
