"""
Authentication and RBAC dependencies.
Resolves the bearer token into the acting user and gates routes by role.
"""
import logging
from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AuthenticationError, InvalidTokenError
from app.core.permissions import (
    Actor,
    authorize,
    ensure_admin,
    ensure_super_admin,
    ensure_team_leader_or_admin,
)
from app.database import get_db
from app.models.user import User, UserRole
from app.services import auth as auth_service

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_prefix}/auth/login", auto_error=False)


def get_current_user(token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    """
    Extracts and validates the current user from the bearer token.
    """
    if not token:
        raise AuthenticationError("No token provided")

    payload = auth_service.decode_token(token)

    if payload.get("type") != auth_service.ACCESS:
        logger.warning("Authentication failed: invalid token type")
        raise InvalidTokenError()

    user = db.query(User).filter(User.id == payload.get("id")).first()
    if user is None or not user.is_active:
        logger.warning("Authentication failed: user missing or inactive", extra={"user_id": payload.get("id")})
        raise AuthenticationError("User no longer exists or is inactive")
    return user


def get_actor(current_user: User = Depends(get_current_user)) -> Actor:
    return Actor.from_user(current_user)


def require_role(*allowed_roles: UserRole) -> Callable:
    """
    Dependency factory that checks if the actor has one of the allowed roles.

    Usage:
        @router.get("/admin-only")
        def admin_endpoint(actor: Actor = Depends(require_role(UserRole.ADMIN))):
            ...
    """
    def role_checker(actor: Actor = Depends(get_actor)) -> Actor:
        return authorize(actor, allowed_roles)
    return role_checker


def require_admin(actor: Actor = Depends(get_actor)) -> Actor:
    return ensure_admin(actor)


def require_super_admin(actor: Actor = Depends(get_actor)) -> Actor:
    return ensure_super_admin(actor)


def require_team_leader_or_admin(actor: Actor = Depends(get_actor)) -> Actor:
    return ensure_team_leader_or_admin(actor)
