import pytest

from ascend.errors import GoalNotFoundError, GoalValidationError
from ascend.models import Goal
from ascend.services.goal_service import GoalStore

pytestmark = pytest.mark.asyncio


async def test_create_applies_defaults(store: GoalStore):
    goal = await store.create_goal({"title": "Run a marathon"})
    assert goal.id
    assert goal.progress == 0
    assert goal.is_completed is False
    assert goal.expanded is False
    assert goal.created_at > 0
    assert goal.parent_id is None


async def test_create_generates_unique_ids(store: GoalStore):
    ids = {(await store.create_goal({"title": f"goal {i}"})).id for i in range(5)}
    assert len(ids) == 5


async def test_create_ignores_supplied_id(store: GoalStore):
    goal = await store.create_goal({"id": "client-chosen", "title": "x"})
    assert goal.id != "client-chosen"


async def test_create_then_get_round_trip(store: GoalStore):
    fields = {
        "title": "Learn Spanish",
        "description": "B2 by summer",
        "progress": 30,
        "is_completed": False,
        "created_at": 1_700_000_000_000,
        "scheduled_days": [1, 3, 5],
        "one_time_task": 1_700_100_000_000,
        "expanded": True,
        "reminder": 1_700_050_000_000,
    }
    created = await store.create_goal(fields)
    fetched = await store.get_goal(created.id)
    for name, value in fields.items():
        assert getattr(fetched, name) == value
    assert fetched.completed_at is None


async def test_get_unknown_goal(store: GoalStore):
    with pytest.raises(GoalNotFoundError):
        await store.get_goal("missing")


async def test_list_is_ordered_by_created_at(store: GoalStore):
    await store.create_goal({"title": "second", "created_at": 2000})
    await store.create_goal({"title": "third", "created_at": 3000})
    await store.create_goal({"title": "first", "created_at": 1000})
    titles = [g.title for g in await store.list_goals()]
    assert titles == ["first", "second", "third"]


async def test_update_merges_supplied_fields(store: GoalStore, goal: Goal):
    updated = await store.update_goal(goal.id, {"progress": 100, "is_completed": True, "completed_at": 123})
    assert updated.progress == 100
    assert updated.is_completed is True
    assert updated.completed_at == 123
    # untouched fields survive the full-record rewrite
    assert updated.title == "Test goal"
    assert updated.description == "write every day"
    assert updated.created_at == goal.created_at


async def test_update_keeps_id_and_created_at(store: GoalStore, goal: Goal):
    updated = await store.update_goal(goal.id, {"id": "other", "created_at": 1, "title": "Renamed"})
    assert updated.id == goal.id
    assert updated.created_at == goal.created_at
    assert updated.title == "Renamed"


async def test_update_unknown_goal(store: GoalStore):
    with pytest.raises(GoalNotFoundError):
        await store.update_goal("missing", {"title": "x"})


async def test_progress_out_of_range_is_rejected(store: GoalStore, goal: Goal):
    # the failed write rolls back the session and expires loaded goals
    goal_id = goal.id
    with pytest.raises(GoalValidationError):
        await store.update_goal(goal_id, {"progress": 150})
    assert (await store.get_goal(goal_id)).progress == 0


async def test_unknown_parent_is_rejected(store: GoalStore):
    with pytest.raises(GoalValidationError):
        await store.create_goal({"title": "orphan", "parent_id": "no-such-goal"})
    assert await store.list_goals() == []


async def test_delete_cascades_to_descendants(store: GoalStore):
    root = await store.create_goal({"title": "root"})
    child = await store.create_goal({"title": "child", "parent_id": root.id})
    await store.create_goal({"title": "grandchild", "parent_id": child.id})
    other = await store.create_goal({"title": "unrelated"})

    await store.delete_goal(root.id)

    remaining = [g.id for g in await store.list_goals()]
    assert remaining == [other.id]
    with pytest.raises(GoalNotFoundError):
        await store.get_goal(child.id)


async def test_delete_unknown_goal(store: GoalStore):
    with pytest.raises(GoalNotFoundError):
        await store.delete_goal("missing")


async def test_reorder_updates_every_goal(store: GoalStore):
    a = await store.create_goal({"title": "a", "created_at": 1})
    b = await store.create_goal({"title": "b", "created_at": 2})
    await store.reorder_goals([
        {"id": b.id, "title": "b", "expanded": True},
        {"id": a.id, "title": "a", "progress": 60},
    ])
    assert (await store.get_goal(a.id)).progress == 60
    assert (await store.get_goal(b.id)).expanded is True


async def test_reorder_is_all_or_nothing(store: GoalStore):
    a_id = (await store.create_goal({"title": "a"})).id
    with pytest.raises(GoalNotFoundError):
        await store.reorder_goals([
            {"id": a_id, "title": "changed"},
            {"id": "missing", "title": "x"},
        ])
    assert (await store.get_goal(a_id)).title == "a"


async def test_snapshots_newest_first(store: GoalStore):
    await store.save_progress_snapshot(progress=25.0, total_goals=4, completed_goals=1, timestamp=1000)
    await store.save_progress_snapshot(progress=50.0, total_goals=4, completed_goals=2, timestamp=2000)
    history = await store.list_progress_snapshots()
    assert [s.timestamp for s in history] == [2000, 1000]
    assert history[0].completed_goals == 2


async def test_snapshot_checks_ranges(store: GoalStore):
    with pytest.raises(GoalValidationError):
        await store.save_progress_snapshot(progress=120.0, total_goals=1, completed_goals=1)


async def test_operations_are_counted(store: GoalStore, metrics):
    goal_id = (await store.create_goal({"title": "counted"})).id
    with pytest.raises(GoalNotFoundError):
        await store.delete_goal("missing")
    await store.delete_goal(goal_id)

    sample = metrics.registry.get_sample_value
    assert sample("goal_operations_total", {"operation": "create", "status": "success"}) == 1.0
    assert sample("goal_operations_total", {"operation": "delete", "status": "failure"}) == 1.0
    assert sample("goal_operations_total", {"operation": "delete", "status": "success"}) == 1.0
