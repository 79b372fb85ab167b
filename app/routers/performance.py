from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.core.permissions import Actor
from app.core.schemas import ApiResponse, PageParams, Pagination, page_params
from app.database import get_db
from app.routers.auth_deps import get_actor, require_admin, require_team_leader_or_admin
from app.schemas.performance import ReviewCreate, ReviewResponse, ReviewUpdate
from app.services.performance import PerformanceService

router = APIRouter(
    prefix="/performance",
    tags=["performance"]
)


@router.get("/employees")
def get_all_employee_performance(db: Session = Depends(get_db), actor: Actor = Depends(require_team_leader_or_admin)):
    return ApiResponse.ok(PerformanceService(db).employees_overview())


@router.get("/weekly")
def get_weekly_performance(
    weeks: int = Query(8, ge=1, le=52),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    return ApiResponse.ok(PerformanceService(db).weekly(weeks))


@router.get("/overall")
def get_overall_performance(db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    return ApiResponse.ok(PerformanceService(db).overall())


@router.get("/employee/{employee_id}")
def get_employee_performance(
    employee_id: str,
    paging: PageParams = Depends(page_params),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    result, total = PerformanceService(db).employee_performance(actor, employee_id, paging.offset, paging.limit)
    return ApiResponse.ok(result, pagination=Pagination.build(total, paging.page, paging.limit))


@router.get("/team/{team_id}")
def get_team_performance(
    team_id: str,
    period: str = "current",
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    return ApiResponse.ok(PerformanceService(db).team_performance(actor, team_id, period))


@router.post("/reviews", status_code=status.HTTP_201_CREATED)
def create_review(data: ReviewCreate, db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    review = PerformanceService(db).create(actor, data)
    return ApiResponse.ok(ReviewResponse.model_validate(review))


@router.put("/reviews/{review_id}")
def update_review(review_id: str, data: ReviewUpdate, db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    review = PerformanceService(db).update(actor, review_id, data)
    return ApiResponse.ok(ReviewResponse.model_validate(review))


@router.delete("/reviews/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(review_id: str, db: Session = Depends(get_db), actor: Actor = Depends(require_admin)):
    PerformanceService(db).delete(actor, review_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/reviews/{review_id}/finalize")
def finalize_review(review_id: str, db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    review = PerformanceService(db).finalize(actor, review_id)
    return ApiResponse.ok(ReviewResponse.model_validate(review), message="Performance review finalized")
