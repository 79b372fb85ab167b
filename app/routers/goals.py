from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.core.permissions import Actor, ensure_owner_or_admin
from app.core.schemas import ApiResponse
from app.database import get_db
from app.models.goal import GoalStatus
from app.routers.auth_deps import get_actor, require_admin
from app.schemas.goal import GoalCreate, GoalResponse, GoalUpdate
from app.services.goals import GoalService

router = APIRouter(
    prefix="/goals",
    tags=["goals"]
)


@router.get("/employee/{employee_id}")
def get_employee_goals(employee_id: str, db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    ensure_owner_or_admin(actor, employee_id)
    goals = GoalService(db).for_employee(employee_id)
    return ApiResponse.ok([GoalResponse.model_validate(goal) for goal in goals])


@router.get("/team/{team_id}")
def get_team_goals(
    team_id: str,
    goal_status: Optional[GoalStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
):
    goals = GoalService(db).for_team(team_id, goal_status)
    return ApiResponse.ok([GoalResponse.model_validate(goal) for goal in goals])


@router.get("/{goal_id}")
def get_goal(goal_id: str, db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    return ApiResponse.ok(GoalResponse.model_validate(GoalService(db).view(actor, goal_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_goal(data: GoalCreate, db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    return ApiResponse.ok(GoalResponse.model_validate(GoalService(db).create(data)))


@router.put("/{goal_id}")
def update_goal(goal_id: str, data: GoalUpdate, db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    return ApiResponse.ok(GoalResponse.model_validate(GoalService(db).update(actor, goal_id, data)))


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_goal(goal_id: str, db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    GoalService(db).delete(actor, goal_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
