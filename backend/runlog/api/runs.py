from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, HTTPException
from sqlalchemy.orm import Session
from runlog.api.deps import get_current_user
from runlog.schemas.run import RunCreate, RunRead, RunType
from runlog.models.run import Run
from runlog.db import get_db
from runlog.core.time_utils import hhmmss_to_seconds, compute_pace, seconds_to_hhmmss

router = APIRouter(prefix="/api/runs", tags=["runs"])


def _to_read(run: Run) -> RunRead:
    return RunRead(
        id=run.id,
        date=run.date,
        title=run.title,
        notes=run.notes,
        distance_mi=float(run.distance_mi),
        duration=seconds_to_hhmmss(run.duration_seconds),
        run_type=run.run_type,
        pace=compute_pace(run.duration_seconds, float(run.distance_mi)),
    )


@router.post("", response_model=RunRead, status_code=201)
def create_run(
    payload: RunCreate,
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    # Convert duration string -> seconds
    try:
        duration_seconds = hhmmss_to_seconds(payload.duration)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    # Validate inputs
    if payload.distance_mi <= 0:
        raise HTTPException(status_code=422, detail="distance_mi must be > 0")

    run = Run(
        user_id=user_id,
        date=payload.date,
        title=payload.title,
        notes=payload.notes,
        distance_mi=payload.distance_mi,
        duration_seconds=duration_seconds,
        run_type=payload.run_type.value,
    )

    db.add(run)
    db.commit()
    db.refresh(run)
    return _to_read(run)


@router.get("", response_model=list[RunRead])
def list_runs(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    run_type: Optional[RunType] = Query(None),
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    List the caller's runs, optionally filtered by [start_date, end_date].

      GET /api/runs?start_date=2025-01-06&end_date=2025-01-12
    """
    query = db.query(Run).filter(Run.user_id == user_id)

    if start_date is not None:
        query = query.filter(Run.date >= start_date)
    if end_date is not None:
        query = query.filter(Run.date <= end_date)
    if run_type is not None:
        query = query.filter(Run.run_type == run_type.value)

    # Most recent first
    return [_to_read(run) for run in query.order_by(Run.date.desc()).all()]
