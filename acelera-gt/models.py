# models.py
import enum
from sqlalchemy import (
    JSON,
    Column,
    Integer,
    String,
    DateTime,
    Enum,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

class PointEventType(enum.Enum):
    QUIZ_COMPLETED = "QUIZ_COMPLETED"
    COURSE_COMPLETED = "COURSE_COMPLETED"
    MISSION_COMPLETED = "MISSION_COMPLETED"
    MANUAL_ADJUSTMENT = "MANUAL_ADJUSTMENT"

class PointsLedger(Base):
    __tablename__ = 'points_ledger'

    id = Column(Integer, primary_key=True, index=True)
    seller_id = Column(String, nullable=False, index=True)
    event_type = Column(Enum(PointEventType), nullable=False)
    points = Column(Integer, nullable=False)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

class CycleArchive(Base):
    __tablename__ = 'cycle_archive'

    id = Column(Integer, primary_key=True, index=True)
    snapshot_id = Column(String, nullable=False, unique=True, index=True)
    ended_at = Column(DateTime(timezone=True), nullable=False)
    # Snapshot plus its computed ranking, as JSON.
    payload = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
