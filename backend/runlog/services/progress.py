"""Server-side goal progress.

Progress is always derived from the runs logged inside a goal's window; it is
never stored. Distances are logged in miles and converted when a goal is
expressed in km.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from runlog.core.constants import KM_PER_MILE
from runlog.core.time_utils import days_until, run_window, utcnow
from runlog.models.goal import Goal
from runlog.models.run import Run
from runlog.schemas.goal import GoalProgress, GoalType


def _distance(miles, unit: str) -> float:
    miles = float(miles)
    return miles * KM_PER_MILE if unit.lower() in ("km", "kilometers") else miles


def runs_for_goal(db: Session, goal: Goal) -> list[Run]:
    first, last = run_window(goal.start_date, goal.end_date)
    return (
        db.query(Run)
        .filter(Run.user_id == goal.user_id)
        .filter(Run.date >= first)
        .filter(Run.date <= last)
        .all()
    )


def current_value(goal: Goal, runs: list[Run]) -> float:
    unit = goal.target_unit
    gtype = GoalType(goal.type)

    if gtype is GoalType.DISTANCE:
        return sum(_distance(r.distance_mi, unit) for r in runs)

    if gtype is GoalType.TIME:
        minutes = sum(r.duration_seconds for r in runs) / 60
        return minutes / 60 if unit == "hours" else minutes

    if gtype is GoalType.FREQUENCY:
        return float(len(runs))

    if gtype is GoalType.LONGEST_RUN:
        return max((_distance(r.distance_mi, unit) for r in runs), default=0.0)

    # PACE: mean of per-run pace in minutes per unit distance
    paces = [
        (r.duration_seconds / 60) / _distance(r.distance_mi, "km" if "km" in unit else "mi")
        for r in runs
        if float(r.distance_mi) > 0
    ]
    return sum(paces) / len(paces) if paces else 0.0


def build_progress(goal: Goal, value: float, now: Optional[datetime] = None) -> GoalProgress:
    now = now or utcnow()
    target = goal.target_value
    if GoalType(goal.type) is GoalType.PACE:
        # lower is better; no runs yet means no progress
        done = 0 < value <= target
        percentage = min(target / value * 100, 100) if value > 0 else 0.0
        remaining = max(value - target, 0) if value > 0 else target
    else:
        done = value >= target
        percentage = min(value / target * 100, 100)
        remaining = max(target - value, 0)

    # runs are matched by calendar day, but a goal cannot complete before it starts
    if now <= goal.start_date:
        done = False

    days = days_until(goal.end_date, now)
    # amount still needed per remaining day; meaningless for pace goals
    average_required = None
    if days and not done and GoalType(goal.type) is not GoalType.PACE:
        average_required = remaining / days

    return GoalProgress(
        goal_id=goal.id,
        current_value=round(value, 2),
        progress_percentage=100.0 if done else round(percentage, 2),
        remaining_value=round(remaining, 2),
        days_remaining=days,
        is_completed=done,
        average_required=round(average_required, 2) if average_required is not None else None,
    )


def goal_progress(db: Session, goal: Goal, now: Optional[datetime] = None) -> GoalProgress:
    return build_progress(goal, current_value(goal, runs_for_goal(db, goal)), now)
