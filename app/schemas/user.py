from pydantic import EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime
from app.core.schemas import CamelModel
from app.models.user import ADMIN_ROLES, UserRole


class UserSummary(CamelModel):
    id: str
    email: str
    display_name: str
    role: UserRole
    title: Optional[str] = None
    avatar_url: Optional[str] = None


class UserResponse(UserSummary):
    first_name: str
    last_name: str
    phone_number: Optional[str] = None
    is_active: bool
    team_id: Optional[str] = None
    branch_id: Optional[str] = None
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None


class UserUpdate(CamelModel):
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    display_name: Optional[str] = Field(default=None, min_length=1)
    title: Optional[str] = None
    phone_number: Optional[str] = None
    avatar_url: Optional[str] = None


class RoleUpdate(CamelModel):
    role: UserRole


class AdminCreate(CamelModel):
    email: EmailStr
    password: str = Field(min_length=6)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    role: UserRole = UserRole.ADMIN

    @field_validator("role")
    @classmethod
    def must_be_admin_role(cls, role: UserRole) -> UserRole:
        if role not in ADMIN_ROLES:
            raise ValueError("Role must be ADMIN or SUPER_ADMIN")
        return role
