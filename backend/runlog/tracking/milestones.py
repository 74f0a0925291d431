import math
from typing import Iterable, Optional

from runlog.core.constants import MILESTONES
from runlog.schemas.goal import Goal, GoalProgress
from runlog.schemas.notification import MilestoneCheckResult


def check_milestones(
    goal: Goal,
    progress: GoalProgress,
    previous: Optional[GoalProgress] = None,
    thresholds: Iterable[int] = MILESTONES,
) -> MilestoneCheckResult:
    """Report milestone thresholds crossed between `previous` and `progress`.

    A threshold is new when the previous percentage was below it and the
    current one is at or above it. Percentages are floored first, so 74.9%
    has not reached 75. With no previous snapshot the goal is treated as
    starting from 0%.
    """
    if progress.goal_id != goal.id:
        raise ValueError(f"progress for {progress.goal_id} does not belong to goal {goal.id}")

    marks = sorted(set(thresholds))
    current = math.floor(progress.progress_percentage)
    before = math.floor(previous.progress_percentage) if previous is not None else 0

    new_milestones = [m for m in marks if before < m <= current]

    next_milestone = next((m for m in marks if current < m), None)
    progress_to_next = 0.0
    if next_milestone is not None:
        lower = max((m for m in marks if m < next_milestone), default=0)
        progress_to_next = (current - lower) / (next_milestone - lower) * 100

    return MilestoneCheckResult(
        new_milestones=new_milestones,
        has_new_milestones=bool(new_milestones),
        next_milestone=next_milestone,
        progress_to_next_milestone=max(0.0, min(100.0, progress_to_next)),
    )
