from datetime import date
from typing import Optional

from runlog.core.constants import URGENT_DAYS, WARNING_DAYS
from runlog.schemas.goal import Goal, GoalProgress
from runlog.schemas.notification import (
    DeadlineCheckResult,
    NotificationLevel,
    ReminderPolicy,
)


def deadline_level(days_remaining: int) -> NotificationLevel:
    if days_remaining <= URGENT_DAYS:
        return "urgent"
    if days_remaining <= WARNING_DAYS:
        return "warning"
    return "info"


def check_deadline_reminder(
    goal: Goal,
    progress: GoalProgress,
    reminder_days: int,
    acknowledged: bool = False,
) -> DeadlineCheckResult:
    """Decide whether a deadline reminder is due right now.

    Fires while `0 <= days_remaining <= reminder_days` for a goal that is
    not completed, unless the caller says this window was already
    acknowledged. Re-fire suppression lives with the caller.
    """
    days = progress.days_remaining
    level = deadline_level(days)
    done = goal.is_completed or progress.is_completed
    should_notify = 0 <= days <= reminder_days and not done and not acknowledged
    return DeadlineCheckResult(
        should_notify=should_notify,
        days_remaining=days,
        is_urgent=level == "urgent",
        notification_level=level,
    )


def reminder_acknowledged(
    last_notified: Optional[date],
    policy: ReminderPolicy,
    today: date,
) -> bool:
    """Whether a reminder already sent on `last_notified` covers `today`."""
    if last_notified is None:
        return False
    if policy == "window":
        return True
    return last_notified == today
