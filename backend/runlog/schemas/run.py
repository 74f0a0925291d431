from datetime import date
from typing import Optional
from enum import Enum

from runlog.schemas.goal import ApiModel


class RunType(str, Enum):
    easy = "easy"
    workout = "workout"
    long = "long"
    race = "race"


class RunBase(ApiModel):
    date: date
    title: str
    notes: Optional[str] = None

    distance_mi: float  # what the user types, e.g. 7.35
    duration: str       # "HH:MM:SS" as seen in the UI, e.g. "00:45:32"

    run_type: RunType = RunType.easy


class RunCreate(RunBase):
    """Schema for logging a new run."""
    pass


class RunRead(RunBase):
    """Schema returned when reading a run."""

    id: int
    pace: str  # e.g. "6:30/mi"
