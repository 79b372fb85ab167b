"""
Authorization rules.

Every rule is a pure predicate over the acting user (`Actor`) and plain
attributes of the target resource. Callers load whatever the rule needs
(a goal's owner, a team's leader) and pass it in; nothing here touches the
database. `ensure_*` helpers raise the matching AppException on denial.
"""
from dataclasses import dataclass
from typing import Iterable, Optional

from app.core.exceptions import AccessDeniedError, AuthenticationError, BadRequestError
from app.models.user import ADMIN_ROLES, LEADERSHIP_ROLES, UserRole


@dataclass(frozen=True)
class Actor:
    """The authenticated caller of a request."""
    id: str
    email: str
    role: UserRole
    team_id: Optional[str] = None

    @classmethod
    def from_user(cls, user) -> "Actor":
        return cls(id=user.id, email=user.email, role=user.role, team_id=user.team_id)

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN


# --- Role gates ---

def authorize(actor: Optional[Actor], allowed_roles: Iterable[UserRole]) -> Actor:
    """Role gate. An empty `allowed_roles` admits any authenticated actor."""
    if actor is None:
        raise AuthenticationError("Not authorized to access this route")
    allowed = set(allowed_roles)
    if allowed and actor.role not in allowed:
        raise AccessDeniedError(f"User role {actor.role.value} is not authorized to access this route")
    return actor


def ensure_admin(actor: Actor) -> Actor:
    if not actor.is_admin:
        raise AccessDeniedError("You must be an admin to access this resource")
    return actor


def ensure_super_admin(actor: Actor) -> Actor:
    if not actor.is_super_admin:
        raise AccessDeniedError("You must be a super admin to access this resource")
    return actor


def is_owner_or_admin(actor: Actor, resource_owner_id: Optional[str]) -> bool:
    return actor.is_admin or (resource_owner_id is not None and resource_owner_id == actor.id)


def ensure_owner_or_admin(actor: Actor, resource_owner_id: Optional[str]) -> Actor:
    if not is_owner_or_admin(actor, resource_owner_id):
        raise AccessDeniedError("You do not have permission to access this resource")
    return actor


def is_team_leader_or_admin(actor: Actor) -> bool:
    return actor.role in LEADERSHIP_ROLES


def ensure_team_leader_or_admin(actor: Actor) -> Actor:
    if not is_team_leader_or_admin(actor):
        raise AccessDeniedError("You must be a team leader or admin to access this resource")
    return actor


# --- Super admin protection ---

def ensure_not_last_super_admin(target_role: UserRole, active_super_admins: int, action: str) -> None:
    """
    Refuse to demote or delete the only remaining active SUPER_ADMIN.

    Applies to every actor, super admins included. `action` is "change role of"
    or "delete".
    """
    if target_role == UserRole.SUPER_ADMIN and active_super_admins <= 1:
        raise BadRequestError(f"Cannot {action} the last Super Admin")


# --- Goals ---

def can_view_goal(actor: Actor, employee_id: str, team_id: Optional[str]) -> bool:
    if actor.is_admin or actor.id == employee_id:
        return True
    return actor.team_id is not None and actor.team_id == team_id


def can_modify_goal(actor: Actor, employee_id: str, team_id: Optional[str]) -> bool:
    if actor.is_admin or actor.id == employee_id:
        return True
    return (
        actor.role == UserRole.LEADER
        and actor.team_id is not None
        and actor.team_id == team_id
    )


# --- Performance reviews ---

@dataclass(frozen=True)
class ReviewRule:
    admin: bool
    reviewer: bool


# Creating a review is admin-only while the assigned reviewer may edit and
# finalize it afterwards.
REVIEW_POLICY = {
    "create": ReviewRule(admin=True, reviewer=False),
    "update": ReviewRule(admin=True, reviewer=True),
    "finalize": ReviewRule(admin=True, reviewer=True),
    "delete": ReviewRule(admin=True, reviewer=False),
}


def can_act_on_review(actor: Actor, action: str, reviewer_id: Optional[str] = None) -> bool:
    rule = REVIEW_POLICY[action]
    if rule.admin and actor.is_admin:
        return True
    return rule.reviewer and reviewer_id is not None and reviewer_id == actor.id


def can_view_reviews(actor: Actor, reviewee_id: str, reviewee_team_leader_id: Optional[str]) -> bool:
    """
    Reviews are visible to the reviewee, admins, and the leader of the
    reviewee's team. A reviewee without a team is visible only to admins
    and themselves.
    """
    if actor.id == reviewee_id or actor.is_admin:
        return True
    return reviewee_team_leader_id is not None and reviewee_team_leader_id == actor.id


def can_view_team_performance(actor: Actor, team_leader_id: Optional[str]) -> bool:
    return actor.is_admin or (team_leader_id is not None and team_leader_id == actor.id)
