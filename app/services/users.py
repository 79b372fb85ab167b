"""
User management: listing, profile edits, role changes and soft deletion.
"""
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import or_

from app.core.exceptions import ConflictError, NotFoundError
from app.core.permissions import Actor, ensure_not_last_super_admin
from app.models.user import ADMIN_ROLES, User, UserRole
from app.schemas.user import AdminCreate, UserUpdate
from app.services import auth as auth_service
from app.services.base import BaseService


class UserService(BaseService):
    not_found_message = "User not found"

    def get(self, user_id: str) -> User:
        return self.get_or_404(User, user_id)

    def list_users(
        self,
        offset: int,
        limit: int,
        search: Optional[str] = None,
        role: Optional[UserRole] = None,
        team_id: Optional[str] = None,
    ) -> Tuple[List[User], int]:
        query = self.db.query(User).filter(User.is_active.is_(True))
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                User.display_name.ilike(pattern),
                User.email.ilike(pattern),
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern),
            ))
        if role:
            query = query.filter(User.role == role)
        if team_id:
            query = query.filter(User.team_id == team_id)

        total = query.count()
        users = query.order_by(User.created_at.desc()).offset(offset).limit(limit).all()
        return users, total

    def team_members(self, actor: Actor, team_id: Optional[str] = None) -> List[User]:
        """Admins may look at any team; everyone else sees only their own."""
        target_team = team_id if (actor.is_admin and team_id) else actor.team_id
        if target_team is None:
            return []
        return (
            self.db.query(User)
            .filter(User.team_id == target_team, User.is_active.is_(True))
            .order_by(User.display_name)
            .all()
        )

    def update_profile(self, user_id: str, data: UserUpdate) -> User:
        user = self.get(user_id)
        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(user, field, value)
        self.commit()
        self.db.refresh(user)
        return user

    def active_super_admin_count(self) -> int:
        return (
            self.db.query(User)
            .filter(User.role == UserRole.SUPER_ADMIN, User.is_active.is_(True))
            .count()
        )

    def change_role(self, user_id: str, role: UserRole) -> User:
        user = self.get(user_id)
        if user.role != role:
            ensure_not_last_super_admin(user.role, self.active_super_admin_count(), "change role of")
            self.logger.info("Changing user role", extra={"user_id": user.id, "from": user.role.value, "to": role.value})
            user.role = role
            self.commit()
            self.db.refresh(user)
        return user

    def soft_delete(self, user_id: str) -> None:
        user = self.get(user_id)
        if not user.is_active:
            raise NotFoundError(self.not_found_message)
        ensure_not_last_super_admin(user.role, self.active_super_admin_count(), "delete")

        stamp = int(datetime.now(timezone.utc).timestamp() * 1000)
        user.is_active = False
        user.email = f"deleted-{stamp}-{user.email}"
        # Detach from any team this user leads
        for team in user.led_teams:
            team.leader_id = None
        self.commit()
        self.logger.info("User deactivated", extra={"user_id": user.id})

    def list_admins(self) -> List[User]:
        return (
            self.db.query(User)
            .filter(User.role.in_(list(ADMIN_ROLES)), User.is_active.is_(True))
            .order_by(User.created_at)
            .all()
        )

    def create_admin(self, data: AdminCreate) -> User:
        email = data.email.lower()
        if self.db.query(User).filter(User.email == email).first():
            raise ConflictError("User already exists")
        user = User(
            email=email,
            hashed_password=auth_service.get_password_hash(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            display_name=f"{data.first_name} {data.last_name}",
            role=data.role,
            is_active=True,
        )
        self.db.add(user)
        self.commit("User already exists")
        self.db.refresh(user)
        self.logger.info("Admin user created", extra={"user_id": user.id, "role": user.role.value})
        return user
