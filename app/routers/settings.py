from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.permissions import Actor
from app.core.schemas import ApiResponse
from app.database import get_db
from app.routers.auth_deps import get_actor
from app.schemas.settings import (
    NotificationSettings,
    NotificationSettingsUpdate,
    ThemeSettings,
    ThemeSettingsUpdate,
)
from app.services import settings as settings_service

router = APIRouter(
    prefix="/settings",
    tags=["settings"]
)


@router.get("/theme")
def get_theme_settings(db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    return ApiResponse.ok(ThemeSettings.model_validate(settings_service.get_or_create(db, actor.id)))


@router.put("/theme")
def update_theme_settings(data: ThemeSettingsUpdate, db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    prefs = settings_service.update(db, actor.id, data.model_dump(exclude_unset=True, exclude_none=True))
    return ApiResponse.ok(ThemeSettings.model_validate(prefs))


@router.get("/notifications")
def get_notification_settings(db: Session = Depends(get_db), actor: Actor = Depends(get_actor)):
    return ApiResponse.ok(NotificationSettings.model_validate(settings_service.get_or_create(db, actor.id)))


@router.put("/notifications")
def update_notification_settings(
    data: NotificationSettingsUpdate, db: Session = Depends(get_db), actor: Actor = Depends(get_actor)
):
    prefs = settings_service.update(db, actor.id, data.model_dump(exclude_unset=True, exclude_none=True))
    return ApiResponse.ok(NotificationSettings.model_validate(prefs))
