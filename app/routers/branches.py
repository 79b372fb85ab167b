from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.core.permissions import Actor
from app.core.schemas import ApiResponse, PageParams, Pagination, page_params
from app.database import get_db
from app.models.user import UserRole
from app.routers.auth_deps import get_actor, require_role, require_super_admin
from app.schemas.branch import BranchCreate, BranchUpdate
from app.services.branches import BranchService

router = APIRouter(
    prefix="/branches",
    tags=["branches"]
)

admin_only = require_role(UserRole.ADMIN, UserRole.SUPER_ADMIN)


@router.get("/list")
def fetch_branches(db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    """Active branches with member and team counts, for pickers."""
    service = BranchService(db)
    return ApiResponse.ok([service.to_response(branch) for branch in service.list_active()])


@router.post("/add", status_code=status.HTTP_201_CREATED)
def add_branch(data: BranchCreate, db: Session = Depends(get_db), actor: Actor = Depends(require_role(UserRole.ADMIN))):
    service = BranchService(db)
    return ApiResponse.ok(service.to_response(service.create(data)))


@router.get("")
def list_branches(
    search: Optional[str] = None,
    paging: PageParams = Depends(page_params),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    service = BranchService(db)
    branches, total = service.list_branches(paging.offset, paging.limit, search)
    return ApiResponse.ok(
        [service.to_response(branch) for branch in branches],
        pagination=Pagination.build(total, paging.page, paging.limit),
    )


@router.get("/{branch_id}")
def get_branch(branch_id: str, db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    service = BranchService(db)
    return ApiResponse.ok(service.to_response(service.get(branch_id)))


@router.get("/{branch_id}/stats")
def get_branch_stats(branch_id: str, db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    return ApiResponse.ok(BranchService(db).stats(branch_id))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_branch(data: BranchCreate, db: Session = Depends(get_db), actor: Actor = Depends(admin_only)):
    service = BranchService(db)
    return ApiResponse.ok(service.to_response(service.create(data)))


@router.put("/{branch_id}")
def update_branch(branch_id: str, data: BranchUpdate, db: Session = Depends(get_db), actor: Actor = Depends(admin_only)):
    service = BranchService(db)
    return ApiResponse.ok(service.to_response(service.update(branch_id, data)))


@router.delete("/{branch_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_branch(branch_id: str, db: Session = Depends(get_db), actor: Actor = Depends(require_super_admin)):
    BranchService(db).delete(branch_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
