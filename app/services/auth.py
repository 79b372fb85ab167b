"""
Authentication Service Layer

Password hashing (passlib/bcrypt), bearer token signing and verification
(python-jose, HS256) and the register / login / refresh flows built on them.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import (
    AccessDeniedError,
    AuthenticationError,
    ConflictError,
    InvalidTokenError,
    TokenExpiredError,
)
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN_EXPIRE_MINUTES = settings.access_token_expire_minutes
REFRESH_TOKEN_EXPIRE_DAYS = settings.refresh_token_expire_days

ACCESS = "access"
REFRESH = "refresh"


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Malformed or unknown hash format
        return False


# --- Token primitive ---

def create_token(payload: Dict[str, Any], expires_delta: timedelta) -> str:
    to_encode = payload.copy()
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Dict[str, Any]:
    """Verify signature and expiry. Raises TokenExpiredError or InvalidTokenError."""
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError:
        raise InvalidTokenError()


def _claims(user: User, token_type: str) -> Dict[str, Any]:
    return {"id": user.id, "email": user.email, "role": user.role.value, "type": token_type}


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    return create_token(_claims(user, ACCESS), expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))


def create_refresh_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    return create_token(_claims(user, REFRESH), expires_delta or timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS))


def issue_tokens(user: User) -> Dict[str, Any]:
    return {
        "access_token": create_access_token(user),
        "refresh_token": create_refresh_token(user),
        "expires_in": ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    }


# --- Flows ---

def register_user(
    db: Session,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    display_name: Optional[str] = None,
) -> User:
    """Self-registration always yields an active MEMBER."""
    email = email.lower()
    if db.query(User).filter(User.email == email).first():
        raise ConflictError("Email already in use")

    user = User(
        email=email,
        hashed_password=get_password_hash(password),
        first_name=first_name,
        last_name=last_name,
        display_name=display_name or f"{first_name} {last_name}",
        role=UserRole.MEMBER,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User registered", extra={"user_id": user.id})
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == email.lower()).first()
    if not user or not verify_password(password, user.hashed_password):
        logger.warning("Failed login attempt", extra={"email": email})
        raise AuthenticationError("Invalid email or password")
    if not user.is_active:
        raise AccessDeniedError("Your account has been deactivated")

    user.last_login = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)
    return user


def refresh(db: Session, refresh_token: str) -> User:
    payload = decode_token(refresh_token)
    if payload.get("type") != REFRESH:
        raise InvalidTokenError("Invalid refresh token")

    user = db.query(User).filter(User.id == payload.get("id")).first()
    if not user or not user.is_active:
        raise AuthenticationError("User no longer exists or is inactive")
    return user
