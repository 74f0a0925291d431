import uuid

from sqlalchemy import Boolean, Column, DateTime, Float, String
from sqlalchemy.sql import func
from runlog.db import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class Goal(Base):
    __tablename__ = "goals"

    id = Column(String(32), primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)

    title = Column(String, nullable=False)
    description = Column(String, nullable=True)

    # DISTANCE, TIME, FREQUENCY, PACE, LONGEST_RUN
    type = Column(String(20), nullable=False)
    # WEEKLY, MONTHLY, YEARLY, CUSTOM
    period = Column(String(20), nullable=False)

    target_value = Column(Float, nullable=False)
    target_unit = Column(String(20), nullable=False)

    # Stored as naive UTC
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)

    current_value = Column(Float, nullable=False, default=0.0)
    is_completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime, nullable=True)

    # Presentation only
    color = Column(String(20), nullable=True)
    icon = Column(String(20), nullable=True)

    # Soft delete flag
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime,
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
