from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base, generate_uuid, utcnow

THEMES = ("light", "dark", "system")
FONT_SIZES = ("small", "medium", "large")


class UserSettings(Base):
    """Per-user UI and notification preferences, created lazily with defaults."""
    __tablename__ = "user_settings"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    theme = Column(String(16), default="light", nullable=False)
    dark_mode = Column(Boolean, default=False, nullable=False)
    high_contrast = Column(Boolean, default=False, nullable=False)
    font_size = Column(String(16), default="medium", nullable=False)
    language = Column(String(8), default="en", nullable=False)

    email_notifications = Column(Boolean, default=True, nullable=False)
    push_notifications = Column(Boolean, default=True, nullable=False)
    performance_updates = Column(Boolean, default=True, nullable=False)
    newsletter = Column(Boolean, default=False, nullable=False)

    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="settings")
