"""
Team management.

Team creation commits the team first and attaches the leader afterwards as a
best-effort step. Updates and deletes that touch several rows are committed
as a single unit.
"""
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import AccessDeniedError, BadRequestError, ConflictError, NotFoundError
from app.core.permissions import Actor
from app.models.branch import Branch
from app.models.goal import Goal
from app.models.team import Team
from app.models.user import LEADERSHIP_ROLES, User, UserRole
from app.schemas.team import TeamCreate, TeamDetail, TeamResponse, TeamUpdate
from app.schemas.user import UserSummary
from app.services.base import BaseService

DUPLICATE_NAME = "Team with this name already exists"


class TeamService(BaseService):
    not_found_message = "Team not found"

    def get(self, team_id: str) -> Team:
        return self.get_or_404(Team, team_id)

    def to_response(self, team: Team) -> TeamResponse:
        return TeamResponse.model_validate(team).model_copy(update={"member_count": len(team.active_members)})

    def to_detail(self, team: Team) -> TeamDetail:
        return TeamDetail.model_validate(team).model_copy(update={
            "member_count": len(team.active_members),
            "members": [UserSummary.model_validate(member) for member in team.active_members],
        })

    def list_teams(
        self, offset: int, limit: int, branch_id: Optional[str] = None, search: Optional[str] = None
    ) -> Tuple[List[Team], int]:
        query = self.db.query(Team)
        if branch_id:
            query = query.filter(Team.branch_id == branch_id)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Team.name.ilike(pattern), Team.description.ilike(pattern)))
        total = query.count()
        teams = query.order_by(Team.name).offset(offset).limit(limit).all()
        return teams, total

    def _ensure_branch(self, branch_id: str) -> Branch:
        return self.get_or_404(Branch, branch_id, "Branch not found")

    def _ensure_leader(self, leader_id: str) -> User:
        leader = self.db.get(User, leader_id)
        if leader is None or not leader.is_active:
            raise NotFoundError("Leader not found")
        return leader

    def _ensure_unique_name(self, name: str, exclude_id: Optional[str] = None) -> None:
        query = self.db.query(Team).filter(Team.name == name)
        if exclude_id:
            query = query.filter(Team.id != exclude_id)
        if query.first():
            raise ConflictError(DUPLICATE_NAME)

    @staticmethod
    def _assign_leader(team: Team, leader: User) -> None:
        team.leader_id = leader.id
        leader.team_id = team.id
        if leader.branch_id is None:
            leader.branch_id = team.branch_id
        # Admin-tier and sub-leader roles are kept; plain members get promoted
        if leader.role not in LEADERSHIP_ROLES:
            leader.role = UserRole.LEADER

    def create(self, data: TeamCreate) -> Team:
        self._ensure_branch(data.branch_id)
        leader = self._ensure_leader(data.leader_id) if data.leader_id else None
        self._ensure_unique_name(data.name)

        team = Team(name=data.name, description=data.description, branch_id=data.branch_id)
        self.db.add(team)
        self.commit(DUPLICATE_NAME)
        self.db.refresh(team)
        self.logger.info("Team created", extra={"team_id": team.id})

        if leader is not None:
            try:
                self._assign_leader(team, leader)
                self.db.commit()
            except SQLAlchemyError:
                self.db.rollback()
                self.logger.warning(
                    "Could not attach leader to new team",
                    extra={"team_id": team.id, "leader_id": leader.id},
                    exc_info=True,
                )
            self.db.refresh(team)
        return team

    def update(self, team_id: str, data: TeamUpdate) -> Team:
        team = self.get(team_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        leader_id = changes.pop("leader_id", None)

        if changes.get("name") and changes["name"] != team.name:
            self._ensure_unique_name(changes["name"], exclude_id=team.id)
        if changes.get("branch_id"):
            self._ensure_branch(changes["branch_id"])
        leader = self._ensure_leader(leader_id) if leader_id and leader_id != team.leader_id else None

        try:
            for field, value in changes.items():
                setattr(team, field, value)
            if leader is not None:
                self._assign_leader(team, leader)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            self.logger.error("Team update failed", extra={"team_id": team_id}, exc_info=True)
            raise
        self.db.refresh(team)
        return team

    def delete(self, team_id: str) -> None:
        team = self.get(team_id)
        try:
            self.db.query(User).filter(User.team_id == team.id).update(
                {User.team_id: None}, synchronize_session=False
            )
            self.db.query(Goal).filter(Goal.team_id == team.id).update(
                {Goal.team_id: None}, synchronize_session=False
            )
            self.db.delete(team)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            self.logger.error("Team deletion failed", extra={"team_id": team_id}, exc_info=True)
            raise
        self.db.expire_all()
        self.logger.info("Team deleted", extra={"team_id": team_id})

    def employees(self, team_id: str) -> List[User]:
        return sorted(self.get(team_id).active_members, key=lambda member: member.display_name)

    def _ensure_can_manage(self, actor: Actor, team: Team) -> None:
        if not actor.is_admin and team.leader_id != actor.id:
            raise AccessDeniedError("You can only manage members of your own team")

    def add_member(self, actor: Actor, team_id: str, user_id: str) -> User:
        team = self.get(team_id)
        self._ensure_can_manage(actor, team)
        user = self.get_or_404(User, user_id, "User not found")
        if user.team_id == team.id:
            raise BadRequestError("User is already an employee of this team")
        if user.team_id is not None:
            raise BadRequestError("User is already an employee of another team")

        user.team_id = team.id
        if user.branch_id is None:
            user.branch_id = team.branch_id
        self.commit()
        self.db.refresh(user)
        return user

    def remove_member(self, actor: Actor, team_id: str, user_id: str) -> None:
        team = self.get(team_id)
        self._ensure_can_manage(actor, team)
        user = self.get_or_404(User, user_id, "User not found")
        if user.team_id != team.id:
            raise BadRequestError("User is not a member of this team")

        user.team_id = None
        if team.leader_id == user.id:
            team.leader_id = None
        if user.role == UserRole.LEADER:
            user.role = UserRole.MEMBER
        self.commit()
