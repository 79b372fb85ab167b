from pydantic import Field
from typing import Optional
from datetime import datetime
from app.core.schemas import CamelModel
from app.models.goal import GoalStatus, GoalType


class GoalCreate(CamelModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    type: GoalType = GoalType.PERFORMANCE
    status: GoalStatus = GoalStatus.NOT_STARTED
    target_value: Optional[float] = None
    current_value: float = 0
    due_date: Optional[datetime] = None
    employee_id: str
    team_id: Optional[str] = None


class GoalUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    type: Optional[GoalType] = None
    status: Optional[GoalStatus] = None
    target_value: Optional[float] = None
    current_value: Optional[float] = None
    due_date: Optional[datetime] = None
    employee_id: Optional[str] = None
    team_id: Optional[str] = None


class GoalResponse(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    type: GoalType
    status: GoalStatus
    target_value: Optional[float] = None
    current_value: float
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    employee_id: str
    team_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
