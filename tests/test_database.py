import pytest
import pytest_asyncio
from datetime import datetime
from decimal import Decimal
from pydantic import ValidationError

from database import (
    DEMO_USER_ID,
    DatabaseManager,
    DuplicateError,
    NotFoundError,
    seed_demo_data,
)
from models import ActivityType, PracticePlan, ResourceType, User


# ================================================================
# Fixtures
# ================================================================

@pytest.fixture
def db():
    return DatabaseManager()


@pytest_asyncio.fixture
async def user(db):
    return await db.users.create_user(User(username="mike", password="pw", name="Mike"))


def _round_data(**overrides):
    data = {
        "date": datetime(2024, 12, 1),
        "course_name": "Riverside Municipal",
        "total_score": 84,
        "course_rating": Decimal("72.1"),
        "slope_rating": 131,
    }
    data.update(overrides)
    return data


# ================================================================
# Users
# ================================================================

@pytest.mark.asyncio
async def test_create_user_assigns_id_and_timestamp(db):
    u = await db.users.create_user(User(username="a", password="pw", name="A"))
    assert u.id == 1
    assert u.created_at is not None
    assert (await db.users.get_user(1)).username == "a"


@pytest.mark.asyncio
async def test_duplicate_username_rejected(db, user):
    with pytest.raises(DuplicateError):
        await db.users.create_user(User(username="mike", password="x", name="Other"))


@pytest.mark.asyncio
async def test_update_user_merges_and_ignores_unknown_fields(db, user):
    updated = await db.users.update_user(user.id, name="Michael", username="hacker")
    assert updated.name == "Michael"
    assert updated.username == "mike"
    assert updated.password == "pw"


@pytest.mark.asyncio
async def test_update_unknown_user_raises(db):
    with pytest.raises(NotFoundError):
        await db.users.update_handicap(99, Decimal("10.0"))


@pytest.mark.asyncio
async def test_ghin_connection_round_trip(db, user):
    await db.users.update_ghin_connection(
        user.id, ghin_number="1234567", ghin_connected=True,
        ghin_access_token="a", ghin_refresh_token="r",
    )
    linked = await db.users.get_user(user.id)
    assert linked.ghin_connected
    assert linked.ghin_credentials().refresh_token == "r"

    cleared = await db.users.clear_ghin_connection(user.id)
    assert not cleared.ghin_connected
    assert cleared.ghin_credentials() is None


# ================================================================
# Rounds
# ================================================================

@pytest.mark.asyncio
async def test_create_round_computes_differential(db, user):
    r = await db.rounds.create_round(user.id, _round_data(differential=Decimal("99.9")))
    assert r.differential == Decimal("10.3")


@pytest.mark.asyncio
async def test_create_round_without_rating_has_zero_differential(db, user):
    r = await db.rounds.create_round(user.id, _round_data(course_rating=None))
    assert r.differential == Decimal("0.0")


@pytest.mark.asyncio
async def test_update_round_recomputes_differential(db, user):
    r = await db.rounds.create_round(user.id, _round_data())
    updated = await db.rounds.update_round(r.id, slope_rating=105)
    assert updated.differential == Decimal("12.8")

    noted = await db.rounds.update_round(r.id, course_name="Riverside North")
    assert noted.differential == Decimal("12.8")


@pytest.mark.asyncio
async def test_update_round_invalid_value_leaves_round_unchanged(db, user):
    r = await db.rounds.create_round(user.id, _round_data())
    with pytest.raises(ValidationError):
        await db.rounds.update_round(r.id, total_score=5)
    assert (await db.rounds.get_round(r.id)).total_score == 84


@pytest.mark.asyncio
async def test_rounds_listed_most_recent_first(db, user):
    await db.rounds.create_round(user.id, _round_data(date=datetime(2024, 11, 1)))
    await db.rounds.create_round(user.id, _round_data(date=datetime(2024, 12, 1)))
    await db.rounds.create_round(user.id, _round_data(date=datetime(2024, 10, 1)))
    rounds = await db.rounds.get_rounds_for_user(user.id)
    assert [r.date.month for r in rounds] == [12, 11, 10]
    assert len(await db.rounds.get_recent_rounds(user.id, 2)) == 2


@pytest.mark.asyncio
async def test_find_duplicate_matches_day_course_and_score(db, user):
    await db.rounds.create_round(user.id, _round_data(date=datetime(2024, 12, 1, 8, 0)))
    found = await db.rounds.find_duplicate(user.id, datetime(2024, 12, 1), "riverside municipal", 84)
    assert found is not None
    assert await db.rounds.find_duplicate(user.id, datetime(2024, 12, 1), "Riverside Municipal", 85) is None


@pytest.mark.asyncio
async def test_get_missing_round_returns_none(db):
    assert await db.rounds.get_round(42) is None
    with pytest.raises(NotFoundError):
        await db.rounds.update_round(42, total_score=80)


# ================================================================
# Activities
# ================================================================

@pytest.mark.asyncio
async def test_create_activity_derives_duration(db, user):
    a = await db.activities.create_activity(user.id, {
        "date": datetime(2024, 12, 14),
        "activity_type": ActivityType.PRACTICE_AREA,
        "sub_type": "driving-range",
        "start_time": datetime(2024, 12, 14, 17, 0),
        "end_time": datetime(2024, 12, 14, 18, 0),
    })
    assert a.duration == 60
    assert a.comment is None


@pytest.mark.asyncio
async def test_update_activity_times_recompute_duration(db, user):
    a = await db.activities.create_activity(user.id, {
        "date": datetime(2024, 12, 14),
        "activity_type": ActivityType.PRACTICE_AREA,
        "start_time": datetime(2024, 12, 14, 17, 0),
        "end_time": datetime(2024, 12, 14, 18, 0),
    })
    updated = await db.activities.update_activity(a.id, end_time=datetime(2024, 12, 14, 18, 30))
    assert updated.duration == 90


# ================================================================
# Resources
# ================================================================

@pytest.mark.asyncio
async def test_resources_sorted_by_name_and_delete_is_idempotent(db, user):
    await db.resources.create_resource(user.id, {"type": ResourceType.FACILITY, "name": "range"})
    mat = await db.resources.create_resource(user.id, {"type": ResourceType.EQUIPMENT, "name": "Mat"})
    names = [r.name for r in await db.resources.get_resources(user.id)]
    assert names == ["Mat", "range"]

    assert await db.resources.delete_resource(mat.id) is True
    assert await db.resources.delete_resource(mat.id) is False
    assert await db.resources.get_resource(mat.id) is None


@pytest.mark.asyncio
async def test_update_resource_partial(db, user):
    r = await db.resources.create_resource(user.id, {"type": ResourceType.FACILITY, "name": "Range"})
    updated = await db.resources.update_resource(r.id, available=False)
    assert updated.available is False
    assert updated.name == "Range"


# ================================================================
# Practice plans
# ================================================================

def _plan(user_id, name="Plan"):
    return PracticePlan(user_id=user_id, name=name, days_per_week=3, hours_per_session=Decimal("1.5"))


@pytest.mark.asyncio
async def test_activate_plan_leaves_exactly_one_active(db, user):
    first = await db.practice_plans.activate_plan(_plan(user.id, "First"))
    second = await db.practice_plans.activate_plan(_plan(user.id, "Second"))

    plans = await db.practice_plans.get_practice_plans(user.id)
    assert [p.id for p in plans] == [second.id, first.id]
    assert [p.active for p in plans] == [True, False]
    assert (await db.practice_plans.get_active_plan(user.id)).name == "Second"


@pytest.mark.asyncio
async def test_no_active_plan(db, user):
    assert await db.practice_plans.get_active_plan(user.id) is None
    assert await db.practice_plans.deactivate_all(user.id) == 0


# ================================================================
# Seed data
# ================================================================

@pytest.mark.asyncio
async def test_seed_demo_data_is_idempotent(db):
    seeded = await seed_demo_data(db)
    again = await seed_demo_data(db)
    assert seeded.id == again.id == DEMO_USER_ID
    assert seeded.handicap == Decimal("12.4")
    assert len(await db.rounds.get_rounds_for_user(DEMO_USER_ID)) == 4
    assert len(await db.activities.get_activities(DEMO_USER_ID)) == 3
    assert len(await db.resources.get_resources(DEMO_USER_ID)) == 3
