import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional, Union

from pydantic import ValidationError

from runlog.client.api import GoalsApiClient
from runlog.core.errors import AuthenticationRequired, GoalValidationError, RunlogError
from runlog.core.time_utils import utcnow
from runlog.schemas.goal import Goal, GoalCreate, GoalProgress, GoalStats, GoalUpdate
from runlog.schemas.notification import GoalNotification, NotificationPreferences
from runlog.tracking.achievements import AchievementTracker
from runlog.tracking.analytics import goal_stats
from runlog.tracking.deadlines import check_deadline_reminder, reminder_acknowledged
from runlog.tracking.milestones import check_milestones
from runlog.tracking.notifications import (
    achievement_notification,
    deadline_notification,
    milestone_notification,
)

logger = logging.getLogger(__name__)


def _validated(model, data, what: str):
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        err = exc.errors()[0]
        loc = ".".join(str(p) for p in err["loc"])
        msg = err["msg"].removeprefix("Value error, ")
        raise GoalValidationError(f"Invalid {what}: {loc + ': ' if loc else ''}{msg}") from exc


@dataclass
class SyncResult:
    notifications: list[GoalNotification] = field(default_factory=list)
    auto_completed: list[Goal] = field(default_factory=list)
    error: Optional[str] = None


class GoalStore:
    """Client-side view of the user's goals and their progress.

    Goals and progress are replaced wholesale from the API; mutations patch
    the local list with whatever the server returned and then refresh
    progress. There is no request fencing: when two mutations overlap, the
    response that arrives last wins.
    """

    def __init__(self, api: GoalsApiClient, tracker: Optional[AchievementTracker] = None):
        self.api = api
        self.goals: list[Goal] = []
        self.goal_progress: list[GoalProgress] = []
        self.loading = True
        self.error: Optional[str] = None
        self.achievements = tracker or AchievementTracker()
        # Last progress seen per goal, so milestones fire on crossings only
        self.previous_progress: dict[str, GoalProgress] = {}
        self.deadline_notified: dict[str, date] = {}

    # -- derived views -------------------------------------------------

    @property
    def active_goals(self) -> list[Goal]:
        return [g for g in self.goals if not g.is_completed]

    @property
    def completed_goals(self) -> list[Goal]:
        return [g for g in self.goals if g.is_completed]

    @property
    def newly_achieved_goals(self) -> list[Goal]:
        return self.achievements.newly_achieved(self.goals, self.goal_progress)

    def get_goal_progress(self, goal_id: str) -> Optional[GoalProgress]:
        return next((p for p in self.goal_progress if p.goal_id == goal_id), None)

    def mark_achievement_seen(self, goal_id: str) -> None:
        self.achievements.mark_seen(goal_id)

    def goal_stats(self, now: Optional[datetime] = None) -> GoalStats:
        return goal_stats(self.goals, self.goal_progress, now)

    # -- reads ---------------------------------------------------------

    async def fetch_goals(self) -> None:
        if not self.api.has_token:
            self.loading = False
            return
        try:
            self.error = None
            self.goals = await self.api.list_goals()
        except RunlogError as exc:
            self.error = exc.message
            logger.error("Error fetching goals: %s", exc.message)
        finally:
            self.loading = False

    async def refresh_progress(self) -> None:
        if not self.api.has_token:
            return
        try:
            self.goal_progress = await self.api.list_progress()
        except RunlogError as exc:
            # progress is best effort; the error banner is left alone
            logger.warning("Error fetching goal progress: %s", exc.message)

    # -- writes --------------------------------------------------------

    async def create_goal(self, data: Union[GoalCreate, Mapping[str, Any]]) -> Goal:
        if not self.api.has_token:
            raise AuthenticationRequired()
        payload = _validated(GoalCreate, data, "goal")
        goal = await self.api.create_goal(payload)
        self.goals = [*self.goals, goal]
        await self.refresh_progress()
        return goal

    async def update_goal(self, goal_id: str, patch: Union[GoalUpdate, Mapping[str, Any]]) -> Goal:
        if not self.api.has_token:
            raise AuthenticationRequired()
        payload = _validated(GoalUpdate, patch, "goal update")
        updated = await self.api.update_goal(goal_id, payload)
        self._replace(updated)
        if "end_date" in payload.model_fields_set:
            # a new deadline window gets its own reminder
            self.deadline_notified.pop(goal_id, None)
        await self.refresh_progress()
        return updated

    async def delete_goal(self, goal_id: str) -> None:
        await self.api.delete_goal(goal_id)
        self.goals = [g for g in self.goals if g.id != goal_id]
        self.goal_progress = [p for p in self.goal_progress if p.goal_id != goal_id]
        self.previous_progress.pop(goal_id, None)
        self.deadline_notified.pop(goal_id, None)

    async def complete_goal(self, goal_id: str) -> Goal:
        completed = await self.api.complete_goal(goal_id)
        self._replace(completed)
        await self.refresh_progress()
        return completed

    def _replace(self, goal: Goal) -> None:
        self.goals = [goal if g.id == goal.id else g for g in self.goals]

    # -- reconciliation ------------------------------------------------

    async def reconcile_achievements(self) -> list[Goal]:
        """Complete every goal whose progress reached 100%; safe to call repeatedly."""
        return await self.achievements.reconcile(self.goals, self.goal_progress, self.complete_goal)

    def check_notifications(
        self,
        preferences: NotificationPreferences,
        today: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> list[GoalNotification]:
        """Run milestone and deadline detection over the current progress.

        Updates the previous-progress snapshot and the deadline log, so
        calling twice with unchanged progress yields nothing the second time.
        """
        if not (preferences.enable_milestone_notifications or preferences.enable_deadline_reminders):
            return []
        now = now or utcnow()
        today = today or now.date()
        by_id = {g.id: g for g in self.goals}
        notifications: list[GoalNotification] = []

        for progress in self.goal_progress:
            goal = by_id.get(progress.goal_id)
            if goal is None or goal.is_completed:
                continue
            previous = self.previous_progress.get(goal.id)

            if preferences.enable_milestone_notifications:
                result = check_milestones(goal, progress, previous, preferences.milestone_thresholds)
                for milestone in result.new_milestones:
                    notifications.append(milestone_notification(goal, progress, milestone, now))

            if preferences.enable_deadline_reminders:
                acknowledged = reminder_acknowledged(
                    self.deadline_notified.get(goal.id),
                    preferences.deadline_reminder_policy,
                    today,
                )
                deadline = check_deadline_reminder(
                    goal, progress, preferences.deadline_reminder_days, acknowledged
                )
                if deadline.should_notify:
                    self.deadline_notified[goal.id] = today
                    notifications.append(deadline_notification(goal, progress, deadline, now))

            self.previous_progress[goal.id] = progress

        return notifications

    async def sync(self, preferences: NotificationPreferences) -> SyncResult:
        """Fetch, refresh, detect, then auto-complete; one full update cycle."""
        await self.fetch_goals()
        if self.error:
            return SyncResult(error=self.error)
        await self.refresh_progress()
        notifications = self.check_notifications(preferences)
        completed = await self.reconcile_achievements()
        notifications.extend(achievement_notification(g) for g in completed)
        return SyncResult(notifications=notifications, auto_completed=completed)
