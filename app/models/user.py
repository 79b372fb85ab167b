"""
User model with role-based access.
Users belong to at most one team and one branch.
"""
from sqlalchemy import Column, String, Enum, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
import enum
from app.database import Base, generate_uuid, utcnow


class UserRole(str, enum.Enum):
    """
    User roles. Compared by set membership only, never by rank.

    - SUPER_ADMIN: platform owner, manages admins
    - ADMIN: manages users, branches, teams and reviews
    - LEADER: leads a single team
    - SUB_LEADER: deputy inside a team
    - MEMBER: self-service access
    """
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    LEADER = "LEADER"
    SUB_LEADER = "SUB_LEADER"
    MEMBER = "MEMBER"


ADMIN_ROLES = frozenset({UserRole.ADMIN, UserRole.SUPER_ADMIN})
LEADERSHIP_ROLES = frozenset({UserRole.ADMIN, UserRole.SUPER_ADMIN, UserRole.LEADER, UserRole.SUB_LEADER})


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    display_name = Column(String, nullable=False)
    title = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)

    role = Column(Enum(UserRole), default=UserRole.MEMBER, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    team_id = Column(String(36), ForeignKey("teams.id", use_alter=True, name="fk_user_team_id"), nullable=True, index=True)
    branch_id = Column(String(36), ForeignKey("branches.id"), nullable=True, index=True)

    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    team = relationship("Team", foreign_keys=[team_id], back_populates="members")
    branch = relationship("Branch", back_populates="employees")
    led_teams = relationship("Team", foreign_keys="Team.leader_id", back_populates="leader")
    goals = relationship("Goal", back_populates="employee", cascade="all, delete-orphan")
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")
    settings = relationship("UserSettings", back_populates="user", uselist=False, cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User {self.email} ({self.role.value})>"

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN
