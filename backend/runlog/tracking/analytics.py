"""Goal analytics.

Pure summaries over the goal list and the server's progress entries: how
many goals are done, average progress of the open ones, which goal leads,
which are falling behind, and a few plain-language suggestions.
"""

from datetime import datetime
from typing import Iterable, Optional

from runlog.core.constants import (
    BEHIND_SCHEDULE_MARGIN,
    HIGH_PROGRESS_PCT,
    LOW_PROGRESS_PCT,
    STRUGGLING_PROGRESS_PCT,
    STRUGGLING_TIME_PCT,
)
from runlog.core.time_utils import to_utc_naive, utcnow
from runlog.schemas.goal import Goal, GoalProgress, GoalStats


def time_progress(goal: Goal, now: Optional[datetime] = None) -> float:
    """Share of the goal window already elapsed, as a percentage in [0, 100]."""
    now = to_utc_naive(now or utcnow())
    start = to_utc_naive(goal.start_date)
    end = to_utc_naive(goal.end_date)
    elapsed = (now - start) / (end - start) * 100
    return min(100.0, max(0.0, elapsed))


def improvement_suggestions(
    goals: list[Goal],
    progress: dict[str, GoalProgress],
    average_progress: float,
    now: Optional[datetime] = None,
) -> list[str]:
    suggestions: list[str] = []

    behind = [
        g
        for g in goals
        if g.id in progress
        and progress[g.id].progress_percentage < time_progress(g, now) - BEHIND_SCHEDULE_MARGIN
    ]
    if behind:
        suggestions.append(
            f"{len(behind)} goal(s) are behind schedule. Consider adjusting targets or increasing frequency."
        )

    if average_progress < LOW_PROGRESS_PCT:
        suggestions.append("Overall progress is low. Try setting smaller, more achievable milestones.")
    elif average_progress > HIGH_PROGRESS_PCT:
        suggestions.append("Great progress! Consider setting more challenging goals to keep growing.")

    if len({g.type for g in goals}) == 1:
        suggestions.append(
            "Consider diversifying your goals with different types (distance, time, frequency, pace)."
        )

    return suggestions


def goal_stats(
    goals: Iterable[Goal],
    progress: Iterable[GoalProgress],
    now: Optional[datetime] = None,
) -> GoalStats:
    """Summarize goals and their progress.

    Only active, not yet completed goals count toward the average; an open
    goal without a progress entry counts as 0%. Deleted (inactive) goals are
    left out of the total.
    """
    goals = list(goals)
    by_id = {p.goal_id: p for p in progress}
    active = [g for g in goals if g.is_active and not g.is_completed]

    values = [by_id[g.id].progress_percentage if g.id in by_id else 0.0 for g in active]
    average = sum(values) / len(values) if values else 0.0

    top: Optional[str] = None
    best = 0.0
    for goal in active:
        p = by_id.get(goal.id)
        if p is not None and p.progress_percentage > best:
            best = p.progress_percentage
            top = goal.title

    struggling = [
        g.title
        for g in active
        if g.id in by_id
        and by_id[g.id].progress_percentage < STRUGGLING_PROGRESS_PCT
        and time_progress(g, now) > STRUGGLING_TIME_PCT
    ]

    return GoalStats(
        goals_completed=sum(1 for g in goals if g.is_completed),
        total_goals=sum(1 for g in goals if g.is_active),
        average_progress=round(average, 2),
        top_performing_goal=top,
        struggling_goals=struggling,
        improvement_suggestions=improvement_suggestions(active, by_id, average, now),
    )
