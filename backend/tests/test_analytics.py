from datetime import timedelta

import pytest

from runlog.tracking.analytics import goal_stats, time_progress

from test_detectors import START, make_goal, make_progress

MIDWAY = START + timedelta(days=15)
LATE = START + timedelta(days=24)


def completed(goal):
    return goal.model_copy(update={"is_completed": True, "completed_at": START + timedelta(days=3)})


def test_time_progress_is_clamped():
    goal = make_goal()
    assert time_progress(goal, START - timedelta(days=1)) == 0
    assert time_progress(goal, MIDWAY) == pytest.approx(50)
    assert time_progress(goal, START + timedelta(days=60)) == 100


def test_counts_and_average_cover_open_goals_only():
    goals = [
        make_goal("a", title="Run 100 km"),
        make_goal("b", title="Ten runs", type="FREQUENCY"),
        completed(make_goal("c", title="Done")),
        make_goal("d", title="Deleted", is_active=False),
        make_goal("e", title="No progress yet", type="TIME"),
    ]
    progress = [make_progress(60, goal_id="a"), make_progress(30, goal_id="b"), make_progress(90, goal_id="d")]

    stats = goal_stats(goals, progress, MIDWAY)

    assert stats.goals_completed == 1
    assert stats.total_goals == 4
    # a, b and e; e has no progress entry and counts as 0
    assert stats.average_progress == 30.0
    assert stats.top_performing_goal == "Run 100 km"


def test_struggling_goals_need_low_progress_late_in_window():
    goals = [make_goal("a", title="Slow"), make_goal("b", title="Fine", type="PACE")]
    progress = [make_progress(10, goal_id="a"), make_progress(80, goal_id="b")]

    assert goal_stats(goals, progress, MIDWAY - timedelta(days=1)).struggling_goals == []
    stats = goal_stats(goals, progress, LATE)
    assert stats.struggling_goals == ["Slow"]
    assert stats.improvement_suggestions[0].startswith("1 goal(s) are behind schedule")


def test_suggestions_follow_average_and_variety():
    on_track = goal_stats([make_goal("a")], [make_progress(90, goal_id="a")], MIDWAY)
    assert on_track.improvement_suggestions == [
        "Great progress! Consider setting more challenging goals to keep growing.",
        "Consider diversifying your goals with different types (distance, time, frequency, pace).",
    ]

    mixed = [make_goal("a"), make_goal("b", type="TIME")]
    low = goal_stats(mixed, [make_progress(10, goal_id="a"), make_progress(20, goal_id="b")], START)
    assert low.improvement_suggestions == [
        "Overall progress is low. Try setting smaller, more achievable milestones."
    ]


def test_no_goals():
    stats = goal_stats([], [])
    assert stats.goals_completed == 0
    assert stats.total_goals == 0
    assert stats.average_progress == 0
    assert stats.top_performing_goal is None
    assert stats.struggling_goals == []
