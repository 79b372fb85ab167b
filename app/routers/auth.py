import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.core.exceptions import BadRequestError
from app.core.limiter import auth_limit, limiter
from app.core.schemas import ApiResponse
from app.database import get_db
from app.models.user import User
from app.routers.auth_deps import get_current_user
from app.schemas.auth import AuthResponse, LoginRequest, RefreshRequest, RegisterRequest, TokenResponse
from app.schemas.user import UserResponse
from app.services import auth as auth_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)


def _auth_payload(user: User) -> AuthResponse:
    return AuthResponse(
        user=UserResponse.model_validate(user),
        tokens=TokenResponse(**auth_service.issue_tokens(user)),
    )


@router.get("/test")
def auth_test():
    """Unauthenticated smoke endpoint for the auth router."""
    return ApiResponse.ok(message="Auth route is working")


@router.post("/register", status_code=status.HTTP_201_CREATED)
@limiter.limit(auth_limit)
def register(request: Request, data: RegisterRequest, db: Session = Depends(get_db)):
    user = auth_service.register_user(
        db,
        email=data.email,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
        display_name=data.display_name,
    )
    return ApiResponse.ok(_auth_payload(user))


@router.post("/login")
@limiter.limit(auth_limit)
def login(request: Request, data: LoginRequest, db: Session = Depends(get_db)):
    user = auth_service.authenticate(db, data.email, data.password)
    logger.info("User logged in", extra={"user_id": user.id})
    return ApiResponse.ok(_auth_payload(user))


@router.get("/me")
def get_me(current_user: User = Depends(get_current_user)):
    return ApiResponse.ok(UserResponse.model_validate(current_user))


@router.post("/refresh-token")
@limiter.limit(auth_limit)
def refresh_token(request: Request, data: Optional[RefreshRequest] = None, db: Session = Depends(get_db)):
    if data is None or not data.refresh_token:
        raise BadRequestError("Refresh token is required")
    user = auth_service.refresh(db, data.refresh_token)
    return ApiResponse.ok(TokenResponse(**auth_service.issue_tokens(user)))


@router.post("/logout")
def logout(current_user: User = Depends(get_current_user)):
    # Tokens are stateless; the client discards them
    logger.info("User logged out", extra={"user_id": current_user.id})
    return ApiResponse.ok(message="Successfully logged out")
