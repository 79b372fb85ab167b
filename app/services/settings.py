from sqlalchemy.orm import Session

from app.models.user_settings import UserSettings


def get_or_create(db: Session, user_id: str) -> UserSettings:
    """Returns the user's settings row, creating it with defaults on first access."""
    prefs = db.query(UserSettings).filter(UserSettings.user_id == user_id).first()
    if prefs is None:
        prefs = UserSettings(user_id=user_id)
        db.add(prefs)
        db.commit()
        db.refresh(prefs)
    return prefs


def update(db: Session, user_id: str, changes: dict) -> UserSettings:
    prefs = get_or_create(db, user_id)
    for field, value in changes.items():
        setattr(prefs, field, value)
    # Keep the boolean flag consistent with an explicit theme choice
    if "theme" in changes and "dark_mode" not in changes and changes["theme"] != "system":
        prefs.dark_mode = changes["theme"] == "dark"
    db.commit()
    db.refresh(prefs)
    return prefs
