from pydantic import Field
from typing import List, Optional
from datetime import datetime
from app.core.schemas import CamelModel
from app.schemas.user import UserSummary


class TeamCreate(CamelModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    branch_id: str
    leader_id: Optional[str] = None


class TeamUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    branch_id: Optional[str] = None
    leader_id: Optional[str] = None
    is_active: Optional[bool] = None


class TeamResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    branch_id: str
    leader_id: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    member_count: int = 0


class TeamDetail(TeamResponse):
    leader: Optional[UserSummary] = None
    members: List[UserSummary] = []
