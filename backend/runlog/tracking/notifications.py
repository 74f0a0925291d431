"""User-facing text for goal notifications.

The detectors decide *whether* something happened; this module only turns a
detected event into a `GoalNotification` the UI or CLI can show.
"""

from datetime import datetime
from typing import Optional

from runlog.core.time_utils import utcnow
from runlog.schemas.goal import Goal, GoalProgress
from runlog.schemas.notification import DeadlineCheckResult, GoalNotification

MILESTONE_ICONS = {25: "🌟", 50: "⭐", 75: "🔥", 100: "🏆"}
DEFAULT_MILESTONE_ICON = "📈"
DEFAULT_COLOR = "#3b82f6"


def _amount(value: float) -> str:
    # 12.0 -> "12", 12.345 -> "12.35"
    return f"{value:.2f}".rstrip("0").rstrip(".")


def milestone_notification(
    goal: Goal,
    progress: GoalProgress,
    milestone: int,
    now: Optional[datetime] = None,
) -> GoalNotification:
    icon = MILESTONE_ICONS.get(milestone, DEFAULT_MILESTONE_ICON)
    return GoalNotification(
        type="milestone",
        priority="high" if milestone >= 75 else "medium",
        title=f"{milestone}% Complete! {icon}",
        message=(
            f'You\'ve reached {milestone}% of your "{goal.title}" goal! '
            f"{_amount(progress.current_value)}/{_amount(goal.target_value)} "
            f"{goal.target_unit} completed."
        ),
        goal_id=goal.id,
        icon=icon,
        color=goal.color or DEFAULT_COLOR,
        created_at=now or utcnow(),
        milestone_percentage=milestone,
    )


def deadline_notification(
    goal: Goal,
    progress: GoalProgress,
    result: DeadlineCheckResult,
    now: Optional[datetime] = None,
) -> GoalNotification:
    days = result.days_remaining
    if days == 0:
        icon, title = "⏰", "Goal Deadline Today!"
    elif days == 1:
        icon, title = "📅", "Goal Ends Tomorrow"
    elif days <= 3:
        icon, title = "⚠️", f"{days} Days Left"
    else:
        icon, title = "📋", f"{days} Days Remaining"

    priority = {"urgent": "urgent", "warning": "high"}.get(result.notification_level, "medium")
    return GoalNotification(
        type="deadline",
        priority=priority,
        title=f"{icon} {title}",
        message=(
            f'"{goal.title}" - {round(progress.progress_percentage)}% complete '
            f"({_amount(progress.current_value)}/{_amount(goal.target_value)} "
            f"{goal.target_unit}). Keep pushing!"
        ),
        goal_id=goal.id,
        icon=icon,
        color=goal.color or DEFAULT_COLOR,
        created_at=now or utcnow(),
        days_remaining=days,
    )


def achievement_notification(goal: Goal, now: Optional[datetime] = None) -> GoalNotification:
    return GoalNotification(
        type="achievement",
        priority="high",
        title="Goal Achieved! 🏆",
        message=f'You completed "{goal.title}": {_amount(goal.target_value)} {goal.target_unit}.',
        goal_id=goal.id,
        icon="🏆",
        color=goal.color or DEFAULT_COLOR,
        created_at=now or utcnow(),
    )
