from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.permissions import Actor
from app.core.schemas import ApiResponse, PageParams, Pagination, page_params
from app.database import get_db
from app.routers.auth_deps import get_actor, require_admin
from app.schemas.notification import NotificationCreate, NotificationResponse
from app.services.notification import NotificationService

router = APIRouter(
    prefix="/notifications",
    tags=["notifications"]
)


@router.get("")
def get_notifications(
    read: Optional[bool] = None,
    paging: PageParams = Depends(page_params),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    """List current user's notifications, newest first."""
    items, total = NotificationService.list_for_user(db, actor.id, paging.offset, paging.limit, read)
    return ApiResponse.ok(
        [NotificationResponse.model_validate(item) for item in items],
        pagination=Pagination.build(total, paging.page, paging.limit),
    )


@router.post("", status_code=status.HTTP_201_CREATED)
def add_notification(data: NotificationCreate, db: Session = Depends(get_db), actor: Actor = Depends(require_admin)):
    notification = NotificationService.create_notification(
        db, data.user_id, data.title, data.message, data.type, data.link
    )
    return ApiResponse.ok(NotificationResponse.model_validate(notification))


@router.patch("/read-all")
def mark_all_read(db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    updated = NotificationService.mark_all_read(db, actor.id)
    return ApiResponse.ok({"updatedCount": updated})


@router.patch("/{notification_id}/read")
def mark_read(notification_id: str, db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    notification = NotificationService.mark_read(db, actor.id, notification_id)
    return ApiResponse.ok(NotificationResponse.model_validate(notification))


@router.delete("/{notification_id}")
def clear_notification(notification_id: str, db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    NotificationService.delete(db, actor.id, notification_id)
    return ApiResponse.ok(message="Notification cleared")


@router.delete("")
def clear_all_notifications(db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    deleted = NotificationService.clear_all(db, actor.id)
    return ApiResponse.ok({"deletedCount": deleted})
