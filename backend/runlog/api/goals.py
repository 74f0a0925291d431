from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from runlog.api.deps import get_current_user
from runlog.core.time_utils import to_utc_naive, utcnow
from runlog.db import get_db
from runlog.models.goal import Goal
from runlog.schemas.goal import Goal as GoalRead
from runlog.schemas.goal import GoalCreate, GoalProgress, GoalUpdate
from runlog.services.progress import goal_progress


router = APIRouter(prefix="/api/goals", tags=["goals"])


def _owned_goal(db: Session, goal_id: str, user_id: str, action: str) -> Goal:
    goal = db.query(Goal).filter(Goal.id == goal_id).first()
    if not goal or not goal.is_active:
        raise HTTPException(status_code=404, detail="Goal not found")
    if goal.user_id != user_id:
        raise HTTPException(status_code=403, detail=f"You do not have permission to {action} this goal")
    return goal


@router.get("", response_model=list[GoalRead])
def list_goals(user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    # Active goals first, newest first within each group
    return (
        db.query(Goal)
        .filter(Goal.user_id == user_id)
        .filter(Goal.is_active.is_(True))
        .order_by(Goal.is_completed.asc(), Goal.created_at.desc())
        .all()
    )


@router.get("/progress/all", response_model=list[GoalProgress])
def list_progress(user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    """Progress for every active, not yet completed goal."""
    goals = (
        db.query(Goal)
        .filter(Goal.user_id == user_id)
        .filter(Goal.is_active.is_(True))
        .filter(Goal.is_completed.is_(False))
        .all()
    )
    now = utcnow()
    return [goal_progress(db, g, now) for g in goals]


@router.get("/{goal_id}", response_model=GoalRead)
def get_goal(goal_id: str, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    return _owned_goal(db, goal_id, user_id, "access")


@router.post("", response_model=GoalRead, status_code=201)
def create_goal(
    payload: GoalCreate,
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    goal = Goal(
        user_id=user_id,
        title=payload.title,
        description=payload.description.strip() if payload.description else None,
        type=payload.type.value,
        period=payload.period.value,
        target_value=payload.target_value,
        target_unit=payload.target_unit,
        start_date=to_utc_naive(payload.start_date),
        end_date=to_utc_naive(payload.end_date),
        current_value=0.0,
        color=payload.color,
        icon=payload.icon,
        is_active=True,
        is_completed=False,
    )
    db.add(goal)
    db.commit()
    db.refresh(goal)
    return goal


@router.put("/{goal_id}", response_model=GoalRead)
def update_goal(
    goal_id: str,
    payload: GoalUpdate,
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    goal = _owned_goal(db, goal_id, user_id, "update")
    if goal.is_completed:
        raise HTTPException(status_code=400, detail="Cannot edit completed goals")

    update_data = payload.model_dump(exclude_unset=True)

    # Explicit nulls only make sense for the optional columns
    optional = {"description", "color", "icon"}
    update_data = {k: v for k, v in update_data.items() if v is not None or k in optional}

    for key in ("type", "period"):
        if key in update_data:
            update_data[key] = update_data[key].value
    for key in ("start_date", "end_date"):
        if key in update_data:
            update_data[key] = to_utc_naive(update_data[key])

    start = update_data.get("start_date", goal.start_date)
    end = update_data.get("end_date", goal.end_date)
    if start >= end:
        raise HTTPException(status_code=422, detail="End date must be after start date")

    for key, value in update_data.items():
        setattr(goal, key, value)

    # Reaching the target through a manual current value completes the goal,
    # once the goal has started
    now = utcnow()
    if "current_value" in update_data and goal.current_value >= goal.target_value and now > goal.start_date:
        goal.is_completed = True
        goal.completed_at = now

    db.commit()
    db.refresh(goal)
    return goal


@router.delete("/{goal_id}", status_code=204)
def delete_goal(goal_id: str, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    goal = _owned_goal(db, goal_id, user_id, "delete")
    # Soft delete; the row stays for history
    goal.is_active = False
    db.commit()
    return Response(status_code=204)


@router.post("/{goal_id}/complete", response_model=GoalRead)
def complete_goal(goal_id: str, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    goal = _owned_goal(db, goal_id, user_id, "complete")
    if goal.is_completed:
        raise HTTPException(status_code=400, detail="Goal is already completed")

    now = utcnow()
    if now <= goal.start_date:
        raise HTTPException(status_code=400, detail="Goal has not started yet")

    goal.is_completed = True
    goal.completed_at = now
    goal.current_value = goal.target_value
    db.commit()
    db.refresh(goal)
    return goal
