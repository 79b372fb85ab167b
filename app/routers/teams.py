from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.core.permissions import Actor
from app.core.schemas import ApiResponse, PageParams, Pagination, page_params
from app.database import get_db
from app.models.user import UserRole
from app.routers.auth_deps import get_actor, require_role
from app.schemas.team import TeamCreate, TeamUpdate
from app.schemas.user import UserResponse, UserSummary
from app.services.teams import TeamService

router = APIRouter(
    prefix="/teams",
    tags=["teams"]
)

admin_only = require_role(UserRole.ADMIN, UserRole.SUPER_ADMIN)
member_managers = require_role(UserRole.ADMIN, UserRole.LEADER)


@router.get("")
def list_teams(
    branch_id: Optional[str] = Query(None, alias="branchId"),
    search: Optional[str] = None,
    paging: PageParams = Depends(page_params),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    service = TeamService(db)
    teams, total = service.list_teams(paging.offset, paging.limit, branch_id, search)
    return ApiResponse.ok(
        [service.to_response(team) for team in teams],
        pagination=Pagination.build(total, paging.page, paging.limit),
    )


@router.get("/{team_id}")
def get_team(team_id: str, db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    service = TeamService(db)
    return ApiResponse.ok(service.to_detail(service.get(team_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_team(data: TeamCreate, db: Session = Depends(get_db), actor: Actor = Depends(admin_only)):
    service = TeamService(db)
    return ApiResponse.ok(service.to_detail(service.create(data)))


@router.put("/{team_id}")
def update_team(team_id: str, data: TeamUpdate, db: Session = Depends(get_db), actor: Actor = Depends(admin_only)):
    service = TeamService(db)
    return ApiResponse.ok(service.to_detail(service.update(team_id, data)))


@router.delete("/{team_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_team(team_id: str, db: Session = Depends(get_db), actor: Actor = Depends(admin_only)):
    TeamService(db).delete(team_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{team_id}/employees")
def get_team_employees(team_id: str, db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    members = TeamService(db).employees(team_id)
    return ApiResponse.ok([UserSummary.model_validate(member) for member in members])


@router.post("/{team_id}/members/{user_id}")
def add_team_member(team_id: str, user_id: str, db: Session = Depends(get_db), actor: Actor = Depends(member_managers)):
    user = TeamService(db).add_member(actor, team_id, user_id)
    return ApiResponse.ok(UserResponse.model_validate(user), message="Employee added to team")


@router.delete("/{team_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_team_member(
    team_id: str, user_id: str, db: Session = Depends(get_db), actor: Actor = Depends(member_managers)
):
    TeamService(db).remove_member(actor, team_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
