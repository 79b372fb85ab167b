from pydantic import EmailStr, Field
from typing import Optional
from datetime import datetime
from app.core.schemas import CamelModel


class BranchBase(CamelModel):
    name: str = Field(min_length=1)
    location: str = Field(min_length=1)
    description: Optional[str] = None
    contact_number: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None


class BranchCreate(BranchBase):
    pass


class BranchUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    location: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    contact_number: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    is_active: Optional[bool] = None


class BranchResponse(BranchBase):
    id: str
    email: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    employee_count: int = 0
    team_count: int = 0


class BranchStats(CamelModel):
    branch_id: str
    name: str
    total_employees: int
    active_employees: int
    total_teams: int
    active_teams: int
    employees_by_role: dict
