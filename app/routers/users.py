from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.core.permissions import Actor, ensure_owner_or_admin
from app.core.schemas import ApiResponse, PageParams, Pagination, page_params
from app.database import get_db
from app.models.user import User, UserRole
from app.routers.auth_deps import (
    get_actor,
    get_current_user,
    require_role,
    require_super_admin,
    require_team_leader_or_admin,
)
from app.schemas.user import AdminCreate, RoleUpdate, UserResponse, UserSummary, UserUpdate
from app.services.users import UserService

router = APIRouter(
    prefix="/users",
    tags=["users"]
)

admin_only = require_role(UserRole.ADMIN, UserRole.SUPER_ADMIN)


@router.get("/me")
def get_me(current_user: User = Depends(get_current_user)):
    return ApiResponse.ok(UserResponse.model_validate(current_user))


@router.get("/admins")
def list_admins(db: Session = Depends(get_db), actor: Actor = Depends(require_super_admin)):
    admins = UserService(db).list_admins()
    return ApiResponse.ok([UserResponse.model_validate(user) for user in admins])


@router.post("/admins", status_code=status.HTTP_201_CREATED)
def add_admin(data: AdminCreate, db: Session = Depends(get_db), actor: Actor = Depends(require_super_admin)):
    user = UserService(db).create_admin(data)
    return ApiResponse.ok(UserResponse.model_validate(user))


@router.get("")
def list_users(
    search: Optional[str] = None,
    role: Optional[UserRole] = None,
    team_id: Optional[str] = Query(None, alias="teamId"),
    paging: PageParams = Depends(page_params),
    db: Session = Depends(get_db),
    actor: Actor = Depends(admin_only),
):
    users, total = UserService(db).list_users(paging.offset, paging.limit, search, role, team_id)
    return ApiResponse.ok(
        [UserResponse.model_validate(user) for user in users],
        pagination=Pagination.build(total, paging.page, paging.limit),
    )


@router.get("/team/members")
def team_members(
    team_id: Optional[str] = Query(None, alias="teamId"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_team_leader_or_admin),
):
    members = UserService(db).team_members(actor, team_id)
    return ApiResponse.ok([UserSummary.model_validate(user) for user in members])


@router.get("/{user_id}")
def get_user(user_id: str, db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    ensure_owner_or_admin(actor, user_id)
    return ApiResponse.ok(UserResponse.model_validate(UserService(db).get(user_id)))


@router.put("/{user_id}")
def update_user(user_id: str, data: UserUpdate, db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    ensure_owner_or_admin(actor, user_id)
    user = UserService(db).update_profile(user_id, data)
    return ApiResponse.ok(UserResponse.model_validate(user))


@router.put("/{user_id}/role")
def update_user_role(user_id: str, data: RoleUpdate, db: Session = Depends(get_db), actor: Actor = Depends(admin_only)):
    user = UserService(db).change_role(user_id, data.role)
    return ApiResponse.ok(UserResponse.model_validate(user))


@router.patch("/{user_id}/role")
def patch_user_role(
    user_id: str, data: RoleUpdate, db: Session = Depends(get_db), actor: Actor = Depends(require_super_admin)
):
    user = UserService(db).change_role(user_id, data.role)
    return ApiResponse.ok(UserResponse.model_validate(user))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: str, db: Session = Depends(get_db), actor: Actor = Depends(admin_only)):
    UserService(db).soft_delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
