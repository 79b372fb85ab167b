from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.exceptions import AccessDeniedError, NotFoundError
from app.models.notification import Notification, NotificationType
from app.models.user import User
from app.models.user_settings import UserSettings


class NotificationService:
    @staticmethod
    def create_notification(
        db: Session,
        user_id: str,
        title: str,
        message: str,
        type: NotificationType = NotificationType.SYSTEM,
        link: Optional[str] = None
    ) -> Notification:
        """
        Internal utility for creating notifications.
        """
        if db.get(User, user_id) is None:
            raise NotFoundError("User not found")
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            link=link
        )
        db.add(notification)
        db.commit()
        db.refresh(notification)
        return notification

    @staticmethod
    def notify_performance_update(db: Session, user_id: str, title: str, message: str, link: Optional[str] = None):
        """
        Sends a PERFORMANCE notification unless the user opted out of performance updates.
        """
        prefs = db.query(UserSettings).filter(UserSettings.user_id == user_id).first()
        if prefs is not None and not prefs.performance_updates:
            return None
        return NotificationService.create_notification(db, user_id, title, message, NotificationType.PERFORMANCE, link)

    @staticmethod
    def list_for_user(
        db: Session, user_id: str, offset: int, limit: int, read: Optional[bool] = None
    ) -> Tuple[List[Notification], int]:
        query = db.query(Notification).filter(Notification.user_id == user_id)
        if read is not None:
            query = query.filter(Notification.is_read.is_(read))
        total = query.count()
        items = query.order_by(Notification.created_at.desc()).offset(offset).limit(limit).all()
        return items, total

    @staticmethod
    def get_owned(db: Session, user_id: str, notification_id: str) -> Notification:
        notification = db.get(Notification, notification_id)
        if notification is None:
            raise NotFoundError("Notification not found")
        if notification.user_id != user_id:
            raise AccessDeniedError("Not authorized to access this notification")
        return notification

    @staticmethod
    def mark_read(db: Session, user_id: str, notification_id: str) -> Notification:
        notification = NotificationService.get_owned(db, user_id, notification_id)
        notification.is_read = True
        db.commit()
        db.refresh(notification)
        return notification

    @staticmethod
    def mark_all_read(db: Session, user_id: str) -> int:
        updated = (
            db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .update({Notification.is_read: True}, synchronize_session=False)
        )
        db.commit()
        return updated

    @staticmethod
    def delete(db: Session, user_id: str, notification_id: str) -> None:
        notification = NotificationService.get_owned(db, user_id, notification_id)
        db.delete(notification)
        db.commit()

    @staticmethod
    def clear_all(db: Session, user_id: str) -> int:
        deleted = (
            db.query(Notification)
            .filter(Notification.user_id == user_id)
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted
