from datetime import date

import pytest

from training_tracker.core.exceptions import UnauthorizedError
from training_tracker.services.stats import overview_stats, weight_progression, workout_duration

from factories import OTHER_USER_ID, OWNER_ID, make_exercise, make_set, make_warmup, make_workout


@pytest.mark.asyncio
async def test_workout_duration_prefers_cleaned_rest(db):
    workout = await make_workout(db)
    bench = await make_exercise(db, "Bankdrücken")
    await make_warmup(db, workout, duration_seconds=600)
    await make_set(db, workout, bench, 1, duration_seconds=120, duration_cleaned=90)
    await make_set(db, workout, bench, 2, offset_seconds=60, duration_seconds=60)
    await make_set(db, workout, bench, 3, offset_seconds=120)

    assert await workout_duration(db, workout.id, OWNER_ID) == 600 + 90 + 60


@pytest.mark.asyncio
async def test_weight_progression_per_date(db):
    bench = await make_exercise(db, "Bankdrücken")
    monday = await make_workout(db, day=date(2026, 3, 2))
    thursday = await make_workout(db, day=date(2026, 3, 5))
    await make_set(db, monday, bench, 1, weight=60, reps=10)
    await make_set(db, monday, bench, 2, weight=70, reps=8)
    await make_set(db, thursday, bench, 1, weight=72.5, reps=6)

    progression = await weight_progression(db, bench.id, OWNER_ID)

    assert [p["workout_date"] for p in progression] == [date(2026, 3, 2), date(2026, 3, 5)]
    assert progression[0]["max_weight"] == 70
    assert progression[0]["avg_weight"] == 65
    assert progression[0]["total_volume"] == 60 * 10 + 70 * 8
    assert progression[0]["set_count"] == 2
    assert progression[1]["max_weight"] == 72.5

    later = await weight_progression(db, bench.id, OWNER_ID, start_date=date(2026, 3, 3))
    assert len(later) == 1


@pytest.mark.asyncio
async def test_weight_progression_of_foreign_exercise(db):
    foreign = await make_exercise(db, "Bankdrücken", owner_id=OTHER_USER_ID)
    with pytest.raises(UnauthorizedError):
        await weight_progression(db, foreign.id, OWNER_ID)


@pytest.mark.asyncio
async def test_overview_totals_weekly_and_per_exercise(db):
    bench = await make_exercise(db, "Bankdrücken")
    squat = await make_exercise(db, "Kniebeuge")
    monday = await make_workout(db, day=date(2026, 3, 2))
    friday = await make_workout(db, day=date(2026, 3, 6))
    next_monday = await make_workout(db, day=date(2026, 3, 9))
    await make_set(db, monday, bench, 1, weight=50, reps=10)
    await make_set(db, friday, squat, 1, weight=100, reps=5)
    await make_set(db, next_monday, squat, 1, weight=100, reps=6)

    stats = await overview_stats(db, OWNER_ID)

    assert stats["totals"] == {
        "total_workouts": 3,
        "total_sets": 3,
        "total_volume": 500 + 500 + 600,
        "active_exercises": 2,
    }
    assert [(w["workout_count"], w["volume"]) for w in stats["weekly"]] == [(2, 1000.0), (1, 600.0)]
    assert [(e["name"], e["volume"]) for e in stats["exercises"]] == [("Kniebeuge", 1100.0), ("Bankdrücken", 500.0)]


@pytest.mark.asyncio
async def test_overview_ignores_other_users(db):
    foreign_workout = await make_workout(db, owner_id=OTHER_USER_ID)
    foreign_exercise = await make_exercise(db, "Bankdrücken", owner_id=OTHER_USER_ID)
    await make_set(db, foreign_workout, foreign_exercise, 1)

    stats = await overview_stats(db, OWNER_ID)

    assert stats["totals"]["total_sets"] == 0
    assert stats["weekly"] == []
    assert stats["exercises"] == []
