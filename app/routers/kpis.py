from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.permissions import Actor
from app.core.schemas import ApiResponse
from app.database import get_db
from app.models.user import UserRole
from app.routers.auth_deps import require_role
from app.services.kpis import KpiService

router = APIRouter(
    prefix="/kpis",
    tags=["kpis"]
)

@router.get("/team")
def get_team_kpis(
    period: Literal["week", "month", "quarter", "year", "all"] = "month",
    team_id: Optional[str] = Query(None, alias="teamId"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_role(UserRole.ADMIN, UserRole.SUPER_ADMIN, UserRole.LEADER)),
):
    return ApiResponse.ok(KpiService(db).team_kpis(actor, team_id, period))
