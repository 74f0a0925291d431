from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from runlog.core.errors import GoalParseError
from runlog.core.time_utils import to_utc_naive


class ApiModel(BaseModel):
    """Base for wire models: camelCase JSON keys, snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class GoalType(str, Enum):
    DISTANCE = "DISTANCE"
    TIME = "TIME"
    FREQUENCY = "FREQUENCY"
    PACE = "PACE"
    LONGEST_RUN = "LONGEST_RUN"


class GoalPeriod(str, Enum):
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"
    CUSTOM = "CUSTOM"


def _check_window(start: Optional[datetime], end: Optional[datetime]) -> None:
    if start is not None and end is not None and to_utc_naive(start) >= to_utc_naive(end):
        raise ValueError("End date must be after start date")


class GoalCreate(ApiModel):
    """Payload for POST /api/goals (CreateGoalData)."""

    title: str
    description: Optional[str] = None
    type: GoalType
    period: GoalPeriod
    target_value: float
    target_unit: str
    start_date: datetime
    end_date: datetime
    color: Optional[str] = None
    icon: Optional[str] = None

    @field_validator("title", "target_unit")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("target_value")
    @classmethod
    def _positive_target(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Target value must be positive")
        return v

    @model_validator(mode="after")
    def _window(self):
        _check_window(self.start_date, self.end_date)
        return self


class GoalUpdate(ApiModel):
    """Partial update for PUT /api/goals/{id}; only set fields are sent."""

    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[GoalType] = None
    period: Optional[GoalPeriod] = None
    target_value: Optional[float] = None
    target_unit: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    is_active: Optional[bool] = None
    current_value: Optional[float] = None

    # Be lenient with extra fields from clients (e.g. a whole Goal echoed back)
    model_config = ConfigDict(extra="ignore")

    @field_validator("title")
    @classmethod
    def _not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("target_value")
    @classmethod
    def _positive_target(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("Target value must be positive")
        return v

    @field_validator("current_value")
    @classmethod
    def _non_negative_current(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError("Current value cannot be negative")
        return v

    @model_validator(mode="after")
    def _window(self):
        _check_window(self.start_date, self.end_date)
        return self


class Goal(ApiModel):
    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    type: GoalType
    period: GoalPeriod
    target_value: float = Field(gt=0)
    target_unit: str
    start_date: datetime
    end_date: datetime
    current_value: float = 0
    is_completed: bool = False
    completed_at: Optional[datetime] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _consistent(self):
        _check_window(self.start_date, self.end_date)
        # completed_at is set iff the goal is completed
        if self.is_completed and self.completed_at is None:
            raise ValueError("completed goal is missing completedAt")
        if not self.is_completed and self.completed_at is not None:
            raise ValueError("completedAt set on a goal that is not completed")
        return self


class GoalProgress(ApiModel):
    """Server-computed progress for one goal; the client only consumes it."""

    goal_id: str
    current_value: float
    progress_percentage: float = Field(ge=0, le=100)
    remaining_value: float = Field(ge=0)
    days_remaining: int = Field(ge=0)
    is_completed: bool
    average_required: Optional[float] = None

    @model_validator(mode="after")
    def _completion_implies_full(self):
        if self.is_completed and self.progress_percentage < 100:
            raise ValueError("completed progress must be at 100%")
        return self


_goal_list = TypeAdapter(list[Goal])
_progress_list = TypeAdapter(list[GoalProgress])


def _parse(adapter: TypeAdapter, payload: Any, what: str):
    try:
        return adapter.validate_python(payload)
    except ValidationError as exc:
        raise GoalParseError(f"Malformed {what} payload: {exc.errors()[0]['msg']}") from exc


def parse_goal(payload: Any) -> Goal:
    return _parse(TypeAdapter(Goal), payload, "goal")


def parse_goals(payload: Any) -> list[Goal]:
    return _parse(_goal_list, payload, "goal list")


def parse_progress_list(payload: Any) -> list[GoalProgress]:
    return _parse(_progress_list, payload, "goal progress")


class GoalStats(ApiModel):
    """Summary of a user's goals, computed client side from goals and progress."""

    goals_completed: int
    total_goals: int
    average_progress: float
    top_performing_goal: Optional[str] = None
    struggling_goals: list[str] = Field(default_factory=list)
    improvement_suggestions: list[str] = Field(default_factory=list)
