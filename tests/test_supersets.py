import pytest
from sqlalchemy import select

from training_tracker.core.exceptions import InvalidStateError, NotFoundError, UnauthorizedError
from training_tracker.models import WorkoutSet
from training_tracker.services.supersets import (
    get_link_candidates,
    get_superset_partners,
    link_sets,
    unlink_superset,
)

from factories import OTHER_USER_ID, OWNER_ID, make_exercise, make_set, make_workout


async def superset_of(db, set_id):
    return (await db.execute(select(WorkoutSet.superset_id).where(WorkoutSet.id == set_id))).scalar_one()


@pytest.fixture
def workout_sets(db):
    async def build(count, exercises=("Bankdrücken", "Rudermaschine", "Kniebeuge")):
        workout = await make_workout(db)
        made = [await make_exercise(db, name) for name in exercises]
        return [
            await make_set(db, workout, made[i % len(made)], i // len(made) + 1, offset_seconds=i * 60)
            for i in range(count)
        ]

    return build


@pytest.mark.asyncio
async def test_link_two_unlinked_sets_creates_group(db, workout_sets):
    a, b = await workout_sets(2)

    group = await link_sets(db, a.id, b.id, OWNER_ID)

    assert group is not None
    assert await superset_of(db, a.id) == group
    assert await superset_of(db, b.id) == group


@pytest.mark.asyncio
async def test_linking_to_existing_group_joins_it(db, workout_sets):
    a, b, c = await workout_sets(3)
    group = await link_sets(db, a.id, b.id, OWNER_ID)

    assert await link_sets(db, c.id, a.id, OWNER_ID) == group
    assert await superset_of(db, c.id) == group


@pytest.mark.asyncio
async def test_linking_same_group_is_idempotent(db, workout_sets):
    a, b = await workout_sets(2)
    group = await link_sets(db, a.id, b.id, OWNER_ID)

    assert await link_sets(db, b.id, a.id, OWNER_ID) == group


@pytest.mark.asyncio
async def test_linking_two_groups_merges_all_members(db, workout_sets):
    sets = await workout_sets(5)
    first = await link_sets(db, sets[0].id, sets[1].id, OWNER_ID)
    await link_sets(db, sets[2].id, sets[0].id, OWNER_ID)
    second = await link_sets(db, sets[3].id, sets[4].id, OWNER_ID)
    assert first != second

    merged = await link_sets(db, sets[0].id, sets[3].id, OWNER_ID)

    assert merged == first
    assert {await superset_of(db, s.id) for s in sets} == {first}
    partners = await get_superset_partners(db, sets[4].id, OWNER_ID)
    assert sorted(p.id for p in partners) == sorted(s.id for s in sets[:4])


@pytest.mark.asyncio
async def test_unlink_leaves_other_members_linked(db, workout_sets):
    a, b, c = await workout_sets(3)
    group = await link_sets(db, a.id, b.id, OWNER_ID)
    await link_sets(db, a.id, c.id, OWNER_ID)

    await unlink_superset(db, b.id, OWNER_ID)

    assert await superset_of(db, b.id) is None
    assert await superset_of(db, a.id) == group
    assert [p.id for p in await get_superset_partners(db, a.id, OWNER_ID)] == [c.id]


@pytest.mark.asyncio
async def test_unlink_unlinked_set_is_noop(db, workout_sets):
    (a,) = await workout_sets(1)
    await unlink_superset(db, a.id, OWNER_ID)
    assert await superset_of(db, a.id) is None
    assert await get_superset_partners(db, a.id, OWNER_ID) == []


@pytest.mark.asyncio
async def test_link_to_self_is_rejected(db, workout_sets):
    (a,) = await workout_sets(1)
    with pytest.raises(InvalidStateError):
        await link_sets(db, a.id, a.id, OWNER_ID)


@pytest.mark.asyncio
async def test_link_missing_set(db, workout_sets):
    (a,) = await workout_sets(1)
    with pytest.raises(NotFoundError):
        await link_sets(db, a.id, 9999, OWNER_ID)


@pytest.mark.asyncio
async def test_link_foreign_set_is_rejected(db, workout_sets):
    (a,) = await workout_sets(1)
    foreign_workout = await make_workout(db, owner_id=OTHER_USER_ID)
    foreign_exercise = await make_exercise(db, "Bankdrücken", owner_id=OTHER_USER_ID)
    foreign = await make_set(db, foreign_workout, foreign_exercise, 1)

    with pytest.raises(UnauthorizedError):
        await link_sets(db, a.id, foreign.id, OWNER_ID)
    assert await superset_of(db, a.id) is None


@pytest.mark.asyncio
async def test_link_across_workouts_is_rejected(db):
    from datetime import date

    bench = await make_exercise(db, "Bankdrücken")
    monday = await make_workout(db, day=date(2026, 3, 2))
    tuesday = await make_workout(db, day=date(2026, 3, 3))
    a = await make_set(db, monday, bench, 1)
    b = await make_set(db, tuesday, bench, 1)

    with pytest.raises(InvalidStateError):
        await link_sets(db, a.id, b.id, OWNER_ID)


@pytest.mark.asyncio
async def test_link_candidates_grouped_by_exercise(db):
    workout = await make_workout(db)
    bench = await make_exercise(db, "Bankdrücken")
    row = await make_exercise(db, "Rudermaschine")
    squat = await make_exercise(db, "Kniebeuge")
    source = await make_set(db, workout, bench, 1, offset_seconds=0)
    await make_set(db, workout, bench, 2, offset_seconds=30)
    r1 = await make_set(db, workout, row, 1, offset_seconds=60)
    r2 = await make_set(db, workout, row, 2, offset_seconds=90)
    s1 = await make_set(db, workout, squat, 1, offset_seconds=300)

    groups = await get_link_candidates(db, source.id, OWNER_ID)

    assert list(groups) == [squat.id, row.id]
    assert [s.id for s in groups[row.id]] == [r1.id, r2.id]
    assert [s.id for s in groups[squat.id]] == [s1.id]
