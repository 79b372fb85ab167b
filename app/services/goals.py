from datetime import datetime, timezone
from typing import List, Optional

from app.core.exceptions import AccessDeniedError
from app.core.permissions import Actor, can_modify_goal, can_view_goal
from app.models.goal import Goal, GoalStatus
from app.models.team import Team
from app.models.user import User
from app.schemas.goal import GoalCreate, GoalUpdate
from app.services.base import BaseService


class GoalService(BaseService):
    not_found_message = "Goal not found"

    def get(self, goal_id: str) -> Goal:
        return self.get_or_404(Goal, goal_id)

    def for_employee(self, employee_id: str) -> List[Goal]:
        return (
            self.db.query(Goal)
            .filter(Goal.employee_id == employee_id)
            .order_by(Goal.created_at.desc())
            .all()
        )

    def for_team(self, team_id: str, status: Optional[GoalStatus] = None) -> List[Goal]:
        self.get_or_404(Team, team_id, "Team not found")
        query = self.db.query(Goal).filter(Goal.team_id == team_id)
        if status:
            query = query.filter(Goal.status == status)
        return query.order_by(Goal.created_at.desc()).all()

    def view(self, actor: Actor, goal_id: str) -> Goal:
        goal = self.get(goal_id)
        if not can_view_goal(actor, goal.employee_id, goal.team_id):
            raise AccessDeniedError("Not authorized to view this goal")
        return goal

    def create(self, data: GoalCreate) -> Goal:
        self.get_or_404(User, data.employee_id, "Employee not found")
        if data.team_id:
            self.get_or_404(Team, data.team_id, "Team not found")

        goal = Goal(**data.model_dump())
        if goal.status == GoalStatus.COMPLETED:
            goal.completed_at = datetime.now(timezone.utc)
        self.db.add(goal)
        self.commit()
        self.db.refresh(goal)
        self.logger.info("Goal created", extra={"goal_id": goal.id, "employee_id": goal.employee_id})
        return goal

    def update(self, actor: Actor, goal_id: str, data: GoalUpdate) -> Goal:
        goal = self.get(goal_id)
        if not can_modify_goal(actor, goal.employee_id, goal.team_id):
            raise AccessDeniedError("Not authorized to update this goal")

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "employee_id" in changes:
            self.get_or_404(User, changes["employee_id"], "Employee not found")
        if "team_id" in changes:
            self.get_or_404(Team, changes["team_id"], "Team not found")
        if changes.get("status") == GoalStatus.COMPLETED and goal.status != GoalStatus.COMPLETED:
            goal.completed_at = datetime.now(timezone.utc)
        for field, value in changes.items():
            setattr(goal, field, value)
        self.commit()
        self.db.refresh(goal)
        return goal

    def delete(self, actor: Actor, goal_id: str) -> None:
        goal = self.get(goal_id)
        if not can_modify_goal(actor, goal.employee_id, goal.team_id):
            raise AccessDeniedError("Not authorized to delete this goal")
        self.db.delete(goal)
        self.commit()
