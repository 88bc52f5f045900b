import asyncio

import pytest
from sqlalchemy import select

from training_tracker.core.config import Settings
from training_tracker.models import WorkoutSet
from training_tracker.workers.duration_calculator import run_duration_pass, run_forever

from factories import make_exercise, make_set, make_workout


@pytest.mark.asyncio
async def test_pass_applies_scheduled_bounds(session_maker, db):
    workout = await make_workout(db)
    curl = await make_exercise(db, "Bizeps – Kabelzug")
    for i, offset in enumerate([0, 5, 11, 18, 26]):
        await make_set(db, workout, curl, i + 1, offset_seconds=offset)
    await db.commit()

    result = await run_duration_pass(session_maker, Settings(duration_calc_batch_limit=10))

    assert result.workouts_processed == 1
    assert result.sets_updated == 4
    assert result.outliers_found == 4
    async with session_maker() as fresh:
        rows = await fresh.execute(
            select(WorkoutSet.duration_seconds, WorkoutSet.duration_cleaned).order_by(WorkoutSet.set_number)
        )
        assert [tuple(r) for r in rows.all()] == [(None, None), (5, 7), (6, 7), (7, 7), (8, 7)]


@pytest.mark.asyncio
async def test_pass_without_pending_workouts(session_maker):
    result = await run_duration_pass(session_maker, Settings())
    assert (result.sets_updated, result.outliers_found, result.workouts_processed) == (0, 0, 0)


@pytest.mark.asyncio
async def test_run_forever_stops_when_signalled(session_maker):
    stop = asyncio.Event()
    stop.set()
    await asyncio.wait_for(run_forever(session_maker, Settings(), stop), timeout=5)


@pytest.mark.asyncio
async def test_passes_reach_older_workouts_beyond_batch_limit(session_maker, db):
    from datetime import date

    curl = await make_exercise(db, "Latzug")
    older = await make_workout(db, day=date(2026, 3, 2))
    newer = await make_workout(db, day=date(2026, 3, 3))
    for workout, base in ((older, 0), (newer, 86400)):
        for n in range(3):
            await make_set(db, workout, curl, n + 1, offset_seconds=base + n * 60)
    await db.commit()

    settings = Settings(duration_calc_batch_limit=1)
    first = await run_duration_pass(session_maker, settings)
    second = await run_duration_pass(session_maker, settings)
    third = await run_duration_pass(session_maker, settings)

    assert (first.workouts_processed, second.workouts_processed, third.workouts_processed) == (1, 1, 0)
    async with session_maker() as fresh:
        rows = await fresh.execute(
            select(WorkoutSet.workout_id, WorkoutSet.duration_seconds)
            .where(WorkoutSet.workout_id == older.id)
            .order_by(WorkoutSet.set_number)
        )
        assert [tuple(r) for r in rows.all()] == [(older.id, None), (older.id, 60), (older.id, 60)]
