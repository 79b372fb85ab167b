from collections import Counter
from typing import List, Optional, Tuple

from sqlalchemy import or_

from app.core.exceptions import BadRequestError, ConflictError
from app.models.branch import Branch
from app.models.team import Team
from app.models.user import User
from app.schemas.branch import BranchCreate, BranchResponse, BranchStats, BranchUpdate
from app.services.base import BaseService

DUPLICATE_NAME = "Branch with this name already exists"


class BranchService(BaseService):
    not_found_message = "Branch not found"

    def get(self, branch_id: str) -> Branch:
        return self.get_or_404(Branch, branch_id)

    def to_response(self, branch: Branch) -> BranchResponse:
        return BranchResponse.model_validate(branch).model_copy(update={
            "employee_count": sum(1 for user in branch.employees if user.is_active),
            "team_count": len(branch.teams),
        })

    def list_active(self) -> List[Branch]:
        return (
            self.db.query(Branch)
            .filter(Branch.is_active.is_(True))
            .order_by(Branch.name)
            .all()
        )

    def list_branches(self, offset: int, limit: int, search: Optional[str] = None) -> Tuple[List[Branch], int]:
        query = self.db.query(Branch)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Branch.name.ilike(pattern), Branch.location.ilike(pattern)))
        total = query.count()
        branches = query.order_by(Branch.name).offset(offset).limit(limit).all()
        return branches, total

    def _ensure_unique_name(self, name: str, exclude_id: Optional[str] = None) -> None:
        query = self.db.query(Branch).filter(Branch.name == name)
        if exclude_id:
            query = query.filter(Branch.id != exclude_id)
        if query.first():
            raise ConflictError(DUPLICATE_NAME)

    def create(self, data: BranchCreate) -> Branch:
        self._ensure_unique_name(data.name)
        branch = Branch(**data.model_dump())
        self.db.add(branch)
        self.commit(DUPLICATE_NAME)
        self.db.refresh(branch)
        self.logger.info("Branch created", extra={"branch_id": branch.id})
        return branch

    def update(self, branch_id: str, data: BranchUpdate) -> Branch:
        branch = self.get(branch_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if changes.get("name") and changes["name"] != branch.name:
            self._ensure_unique_name(changes["name"], exclude_id=branch.id)
        for field, value in changes.items():
            setattr(branch, field, value)
        self.commit(DUPLICATE_NAME)
        self.db.refresh(branch)
        return branch

    def delete(self, branch_id: str) -> None:
        branch = self.get(branch_id)
        has_employees = self.db.query(User).filter(User.branch_id == branch.id).first() is not None
        has_teams = self.db.query(Team).filter(Team.branch_id == branch.id).first() is not None
        if has_employees or has_teams:
            raise BadRequestError("Cannot delete branch with associated employees or teams")
        self.db.delete(branch)
        self.commit()
        self.logger.info("Branch deleted", extra={"branch_id": branch_id})

    def stats(self, branch_id: str) -> BranchStats:
        branch = self.get(branch_id)
        active_employees = [user for user in branch.employees if user.is_active]
        return BranchStats(
            branch_id=branch.id,
            name=branch.name,
            total_employees=len(branch.employees),
            active_employees=len(active_employees),
            total_teams=len(branch.teams),
            active_teams=sum(1 for team in branch.teams if team.is_active),
            employees_by_role=dict(Counter(user.role.value for user in active_employees)),
        )
