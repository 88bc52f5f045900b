from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from sqlalchemy import select

from training_tracker.core.enums import RawDurationPolicy
from training_tracker.core.timestamps import as_utc
from training_tracker.models import WorkoutSet
from training_tracker.services.durations import (
    derive_raw_durations,
    mark_durations_stale,
    recompute_durations,
    recompute_workout_durations,
    workouts_needing_durations,
)
from training_tracker.services.outlier_cleaning import SCHEDULED

from factories import T0, make_exercise, make_set, make_warmup, make_workout


def timed(set_id, offset, completed_offset=None):
    return SimpleNamespace(
        id=set_id,
        created_at=T0 + timedelta(seconds=offset),
        completed_at=None if completed_offset is None else T0 + timedelta(seconds=completed_offset),
    )


def test_first_set_without_warmup_has_no_rest():
    assert derive_raw_durations([timed(1, 0), timed(2, 75)]) == [None, 75]


def test_first_set_measured_from_warmup_end():
    baseline = T0 - timedelta(seconds=240)
    assert derive_raw_durations([timed(1, 0), timed(2, 90)], baseline) == [240, 90]


def test_warmup_ending_after_first_set_gives_none():
    baseline = T0 + timedelta(seconds=30)
    assert derive_raw_durations([timed(1, 0), timed(2, 90)], baseline) == [None, 90]


def test_previous_completion_is_preferred_over_creation():
    sets = [timed(1, 0, completed_offset=40), timed(2, 100)]
    assert derive_raw_durations(sets) == [None, 60]


def test_negative_gap_is_made_absolute():
    # set 1 completed at T+95, set 2 created at T+40
    sets = [timed(1, 0, completed_offset=95), timed(2, 40), timed(3, 150)]
    assert derive_raw_durations(sets) == [None, 55, 110]


def test_discard_policy_drops_anomalous_gaps():
    sets = [timed(1, 0, completed_offset=95), timed(2, 40), timed(3, 2100)]
    assert derive_raw_durations(sets, policy=RawDurationPolicy.DISCARD) == [None, None, None]


def test_long_gap_is_kept_with_absolute_policy():
    assert derive_raw_durations([timed(1, 0), timed(2, 2000)]) == [None, 2000]


def test_durations_round_to_whole_seconds():
    sets = [timed(1, 0), SimpleNamespace(id=2, created_at=T0 + timedelta(seconds=61.5), completed_at=None)]
    assert derive_raw_durations(sets) == [None, 62]


def test_naive_and_aware_timestamps_compare_as_utc():
    naive = datetime(2026, 3, 2, 18, 0, 0)
    assert as_utc(naive) == T0
    sets = [SimpleNamespace(id=1, created_at=naive, completed_at=None), timed(2, 30)]
    assert derive_raw_durations(sets) == [None, 30]


@pytest.mark.asyncio
async def test_rest_chain_runs_across_exercises(db):
    workout = await make_workout(db)
    bench = await make_exercise(db, "Bankdrücken")
    row = await make_exercise(db, "Rudermaschine")
    await make_warmup(db, workout, offset_seconds=-900, duration_seconds=600)
    b1 = await make_set(db, workout, bench, 1, offset_seconds=0)
    r1 = await make_set(db, workout, row, 1, offset_seconds=90, completed_at=T0 + timedelta(seconds=120))
    b2 = await make_set(db, workout, bench, 2, offset_seconds=200)

    result = await recompute_workout_durations(db, workout.id)

    assert [b1.duration_seconds, r1.duration_seconds, b2.duration_seconds] == [300, 90, 80]
    assert result.sets_updated == 3
    assert result.outliers_found == 0
    # fewer than four samples per exercise: cleaned equals raw
    assert [b1.duration_cleaned, r1.duration_cleaned, b2.duration_cleaned] == [300, 90, 80]


@pytest.mark.asyncio
async def test_latest_warmup_is_the_baseline(db):
    workout = await make_workout(db)
    bench = await make_exercise(db, "Bankdrücken")
    await make_warmup(db, workout, offset_seconds=-3600, duration_seconds=300)
    await make_warmup(db, workout, offset_seconds=-400, duration_seconds=300, type="Dehnen")
    first = await make_set(db, workout, bench, 1, offset_seconds=0)

    await recompute_workout_durations(db, workout.id)

    assert first.duration_seconds == 100


@pytest.mark.asyncio
async def test_negative_gap_scenario_keeps_cleaned_equal_to_raw(db):
    workout = await make_workout(db)
    squat = await make_exercise(db, "Kniebeuge")
    s1 = await make_set(db, workout, squat, 1, offset_seconds=0, completed_at=T0 + timedelta(seconds=95))
    s2 = await make_set(db, workout, squat, 2, offset_seconds=40)
    s3 = await make_set(db, workout, squat, 3, offset_seconds=150)

    await recompute_workout_durations(db, workout.id)

    assert [s1.duration_seconds, s2.duration_seconds, s3.duration_seconds] == [None, 55, 110]
    assert [s1.duration_cleaned, s2.duration_cleaned, s3.duration_cleaned] == [None, 55, 110]


@pytest.mark.asyncio
async def test_outliers_are_cleaned_per_exercise(db):
    workout = await make_workout(db)
    curl = await make_exercise(db, "Bizeps – Kabelzug")
    offsets = [0, 30, 62, 93, 126, 726]
    sets = [await make_set(db, workout, curl, i + 1, offset_seconds=o) for i, o in enumerate(offsets)]

    result = await recompute_workout_durations(db, workout.id)

    assert [s.duration_seconds for s in sets] == [None, 30, 32, 31, 33, 600]
    assert [s.duration_cleaned for s in sets] == [None, 30, 32, 31, 33, 32]
    assert result.sets_updated == 5
    assert result.outliers_found == 1


@pytest.mark.asyncio
async def test_scheduled_bounds_apply_rest_floor(db):
    workout = await make_workout(db)
    curl = await make_exercise(db, "Trizeps – Kabelzug")
    offsets = [0, 5, 11, 18, 26]
    sets = [await make_set(db, workout, curl, i + 1, offset_seconds=o) for i, o in enumerate(offsets)]

    result = await recompute_workout_durations(db, workout.id, bounds=SCHEDULED)

    assert [s.duration_cleaned for s in sets] == [None, 7, 7, 7, 7]
    assert result.outliers_found == 4


@pytest.mark.asyncio
async def test_recompute_is_idempotent(db):
    workout = await make_workout(db)
    curl = await make_exercise(db, "Latzug")
    for i, offset in enumerate([0, 30, 62, 93, 126, 726]):
        await make_set(db, workout, curl, i + 1, offset_seconds=offset)

    await recompute_durations(db)
    first = (await db.execute(select(WorkoutSet.duration_cleaned).order_by(WorkoutSet.id))).scalars().all()
    await recompute_durations(db)
    second = (await db.execute(select(WorkoutSet.duration_cleaned).order_by(WorkoutSet.id))).scalars().all()

    assert first == second


@pytest.mark.asyncio
async def test_recompute_durations_totals_all_workouts(db):
    curl = await make_exercise(db, "Latzug")
    monday = await make_workout(db, day=date(2026, 3, 2))
    tuesday = await make_workout(db, day=date(2026, 3, 3))
    await make_set(db, monday, curl, 1, offset_seconds=0)
    await make_set(db, monday, curl, 2, offset_seconds=60)
    await make_set(db, tuesday, curl, 1, offset_seconds=86400)
    await make_set(db, tuesday, curl, 2, offset_seconds=86490)

    result = await recompute_durations(db)

    assert result.workouts_processed == 2
    assert result.sets_updated == 2
    assert result.outliers_found == 0


@pytest.mark.asyncio
async def test_empty_workout_is_noop(db):
    workout = await make_workout(db)
    result = await recompute_workout_durations(db, workout.id)
    assert (result.sets_updated, result.outliers_found, result.workouts_processed) == (0, 0, 0)


@pytest.mark.asyncio
async def test_pending_workouts_newest_first(db):
    curl = await make_exercise(db, "Latzug")
    done = await make_workout(db, day=date(2026, 3, 1))
    older = await make_workout(db, day=date(2026, 3, 2))
    newer = await make_workout(db, day=date(2026, 3, 3))
    done.durations_computed_at = T0
    await make_set(db, done, curl, 1, duration_seconds=60, duration_cleaned=60)
    await make_set(db, older, curl, 1)
    await make_set(db, newer, curl, 1, duration_seconds=45)

    assert await workouts_needing_durations(db) == [newer.id, older.id]
    assert await workouts_needing_durations(db, limit=1) == [newer.id]


@pytest.mark.asyncio
async def test_recompute_marks_workout_done_until_it_changes(db):
    workout = await make_workout(db)
    curl = await make_exercise(db, "Latzug")
    await make_set(db, workout, curl, 1)
    await make_set(db, workout, curl, 2, offset_seconds=60)

    await recompute_workout_durations(db, workout.id)
    assert workout.durations_computed_at is not None
    # the first set keeps a null rest time without keeping the workout pending
    assert await workouts_needing_durations(db) == []

    await mark_durations_stale(db, workout.id)
    assert await workouts_needing_durations(db) == [workout.id]


@pytest.mark.asyncio
async def test_created_set_reopens_computed_workout(db):
    from training_tracker.services.sets import create_set

    workout = await make_workout(db)
    curl = await make_exercise(db, "Latzug")
    await make_set(db, workout, curl, 1)
    await recompute_workout_durations(db, workout.id)

    await create_set(db, workout.id, curl.id, workout.user_id, created_at=T0 + timedelta(seconds=90))

    assert await workouts_needing_durations(db) == [workout.id]


def test_as_utc_converts_offsets():
    offset = datetime(2026, 3, 2, 20, 1, 0, tzinfo=timezone(timedelta(hours=2)))
    assert as_utc(offset) == datetime(2026, 3, 2, 18, 1, 0, tzinfo=timezone.utc)
    assert as_utc(offset).utcoffset() == timedelta(0)
