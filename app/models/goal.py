from sqlalchemy import Column, String, DateTime, ForeignKey, Float, Text, Enum
from sqlalchemy.orm import relationship
import enum
from app.database import Base, generate_uuid, utcnow


class GoalType(str, enum.Enum):
    PERFORMANCE = "PERFORMANCE"
    DEVELOPMENT = "DEVELOPMENT"
    PROJECT = "PROJECT"
    PERSONAL = "PERSONAL"


class GoalStatus(str, enum.Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    ON_HOLD = "ON_HOLD"
    CANCELLED = "CANCELLED"


class Goal(Base):
    __tablename__ = "goals"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    type = Column(Enum(GoalType), default=GoalType.PERFORMANCE, nullable=False)
    status = Column(Enum(GoalStatus), default=GoalStatus.NOT_STARTED, nullable=False, index=True)
    target_value = Column(Float, nullable=True)
    current_value = Column(Float, default=0, nullable=False)
    due_date = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    employee_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    team_id = Column(String(36), ForeignKey("teams.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    employee = relationship("User", back_populates="goals")
    team = relationship("Team", back_populates="goals")
