import logging
from typing import Awaitable, Callable, Iterable

from runlog.core.errors import RunlogError
from runlog.schemas.goal import Goal, GoalProgress

logger = logging.getLogger(__name__)


class AchievementTracker:
    """Tracks which reached goals the user has been shown and auto-completes them.

    The seen set lives only as long as the tracker; nothing is persisted.
    """

    def __init__(self):
        self.seen: set[str] = set()
        self._completing: set[str] = set()

    def mark_seen(self, goal_id: str) -> None:
        self.seen.add(goal_id)

    def newly_achieved(self, goals: Iterable[Goal], progress: Iterable[GoalProgress]) -> list[Goal]:
        """Active goals whose progress reports completion and that are not yet seen.

        Goals without a progress entry are simply not considered.
        """
        active = {g.id: g for g in goals if not g.is_completed}
        achieved: list[Goal] = []
        for p in progress:
            goal = active.get(p.goal_id)
            if p.is_completed and goal is not None and p.goal_id not in self.seen:
                if goal not in achieved:
                    achieved.append(goal)
        return achieved

    def completion_candidates(self, goals: Iterable[Goal], progress: Iterable[GoalProgress]) -> list[str]:
        """Ids of goals done according to progress but not yet flagged complete."""
        open_ids = {g.id for g in goals if not g.is_completed}
        candidates: list[str] = []
        for p in progress:
            if p.is_completed and p.goal_id in open_ids and p.goal_id not in candidates:
                candidates.append(p.goal_id)
        return candidates

    async def reconcile(
        self,
        goals: Iterable[Goal],
        progress: Iterable[GoalProgress],
        complete: Callable[[str], Awaitable[Goal]],
    ) -> list[Goal]:
        """Run one auto-completion pass and return the goals it completed.

        A failure on one goal is logged and the pass moves on. Goals whose
        completion is already in flight (an overlapping pass) are skipped.
        """
        completed: list[Goal] = []
        for goal_id in self.completion_candidates(goals, progress):
            if goal_id in self._completing:
                continue
            self._completing.add(goal_id)
            try:
                completed.append(await complete(goal_id))
            except RunlogError as exc:
                logger.warning("Failed to auto-complete goal %s: %s", goal_id, exc.message)
            finally:
                self._completing.discard(goal_id)
        return completed
