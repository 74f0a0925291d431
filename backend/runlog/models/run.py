from sqlalchemy import Column, Integer, String, Date, DateTime, Numeric
from sqlalchemy.sql import func
from runlog.db import Base

class Run(Base):
    __tablename__ = "runs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)

    date = Column(Date, nullable=False)

    title = Column(String, nullable=False)
    notes = Column(String, nullable=True)

    distance_mi = Column(Numeric(5, 2), nullable=False)  # e.g. 7.35 miles

    # Duration stored as **total seconds** (int)
    # API converts HH:MM:SS <-> seconds
    duration_seconds = Column(Integer, nullable=False)

    # Run categorization
    run_type = Column(
        String(20),
        nullable=False,
        server_default="easy",   # easy, workout, long, race
    )

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    # Pace is NOT stored; it is computed on the fly
