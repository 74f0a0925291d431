from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from runlog.core.constants import DEFAULT_REMINDER_DAYS, MILESTONES

NotificationLevel = Literal["info", "warning", "urgent"]
NotificationPriority = Literal["low", "medium", "high", "urgent"]
NotificationType = Literal["milestone", "deadline", "achievement"]
ReminderPolicy = Literal["daily", "window"]


def check_thresholds(thresholds: list[int]) -> list[int]:
    if any(t <= 0 or t > 100 for t in thresholds):
        raise ValueError("milestone thresholds must be within (0, 100]")
    return sorted(set(thresholds))


class NotificationPreferences(BaseModel):
    """Which goal notifications to produce; handed to each detection call."""

    enable_milestone_notifications: bool = True
    enable_deadline_reminders: bool = True
    deadline_reminder_days: int = Field(DEFAULT_REMINDER_DAYS, ge=0)
    # daily: at most one reminder per goal per day; window: one per deadline window
    deadline_reminder_policy: ReminderPolicy = "daily"
    milestone_thresholds: list[int] = Field(default_factory=lambda: list(MILESTONES))

    @field_validator("milestone_thresholds")
    @classmethod
    def _check_thresholds(cls, v: list[int]) -> list[int]:
        return check_thresholds(v)


class MilestoneCheckResult(BaseModel):
    new_milestones: list[int]
    has_new_milestones: bool
    next_milestone: Optional[int] = None
    progress_to_next_milestone: float = 0.0


class DeadlineCheckResult(BaseModel):
    should_notify: bool
    days_remaining: int
    is_urgent: bool
    notification_level: NotificationLevel


class GoalNotification(BaseModel):
    type: NotificationType
    priority: NotificationPriority
    title: str
    message: str
    goal_id: str
    icon: Optional[str] = None
    color: Optional[str] = None
    created_at: datetime
    milestone_percentage: Optional[int] = None
    days_remaining: Optional[int] = None
