from pydantic import EmailStr, Field
from typing import Optional
from app.core.schemas import CamelModel
from app.schemas.user import UserResponse


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=6)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    display_name: Optional[str] = None


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class RefreshRequest(CamelModel):
    # Optional so a missing token surfaces as 400 rather than a validation error
    refresh_token: Optional[str] = None


class TokenResponse(CamelModel):
    access_token: str
    refresh_token: str
    expires_in: int


class AuthResponse(CamelModel):
    user: UserResponse
    tokens: TokenResponse
