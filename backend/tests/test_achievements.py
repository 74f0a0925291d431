import asyncio

import pytest

from runlog.core.errors import ApiError
from runlog.tracking.achievements import AchievementTracker

from test_detectors import START, make_goal, make_progress


def completed(goal):
    return goal.model_copy(update={"is_completed": True, "completed_at": START})


def test_newly_achieved_requires_active_unseen_goal():
    goals = [make_goal("a"), make_goal("b"), completed(make_goal("c")), make_goal("d")]
    progress = [
        make_progress(100, goal_id="a"),
        make_progress(50, goal_id="b"),
        make_progress(100, goal_id="c"),
        make_progress(100, goal_id="missing"),
    ]
    tracker = AchievementTracker()
    assert [g.id for g in tracker.newly_achieved(goals, progress)] == ["a"]

    tracker.mark_seen("a")
    assert tracker.newly_achieved(goals, progress) == []
    # an identical snapshot does not bring it back
    assert tracker.newly_achieved(goals, list(progress)) == []
    # seeing a goal does not touch its completion state
    assert goals[0].is_completed is False


def test_completion_candidates_are_distinct():
    goals = [make_goal("a"), make_goal("b")]
    progress = [make_progress(100, goal_id="a"), make_progress(100, goal_id="a"), make_progress(20, goal_id="b")]
    assert AchievementTracker().completion_candidates(goals, progress) == ["a"]


@pytest.mark.asyncio
async def test_reconcile_is_idempotent():
    goals = [make_goal("a"), make_goal("b")]
    progress = [make_progress(100, goal_id="a"), make_progress(100, goal_id="b")]
    calls = []

    async def complete(goal_id):
        calls.append(goal_id)
        done = completed(next(g for g in goals if g.id == goal_id))
        goals[:] = [done if g.id == goal_id else g for g in goals]
        return done

    tracker = AchievementTracker()
    first = await tracker.reconcile(goals, progress, complete)
    second = await tracker.reconcile(goals, progress, complete)

    assert [g.id for g in first] == ["a", "b"]
    assert second == []
    assert calls == ["a", "b"]


@pytest.mark.asyncio
async def test_one_failure_does_not_stop_the_pass(caplog):
    goals = [make_goal("a"), make_goal("b")]
    progress = [make_progress(100, goal_id="a"), make_progress(100, goal_id="b")]

    async def complete(goal_id):
        if goal_id == "a":
            raise ApiError("Goal is already completed", status_code=400)
        return completed(make_goal(goal_id))

    result = await AchievementTracker().reconcile(goals, progress, complete)
    assert [g.id for g in result] == ["b"]
    assert "Failed to auto-complete goal a" in caplog.text


@pytest.mark.asyncio
async def test_overlapping_passes_complete_once():
    goals = [make_goal("a")]
    progress = [make_progress(100, goal_id="a")]
    calls = []

    async def complete(goal_id):
        calls.append(goal_id)
        await asyncio.sleep(0.01)
        return completed(make_goal(goal_id))

    tracker = AchievementTracker()
    await asyncio.gather(
        tracker.reconcile(goals, progress, complete),
        tracker.reconcile(goals, progress, complete),
    )
    assert calls == ["a"]
