from typing import Literal, Optional
from app.core.schemas import CamelModel

Theme = Literal["light", "dark", "system"]
FontSize = Literal["small", "medium", "large"]


class ThemeSettings(CamelModel):
    theme: Theme
    dark_mode: bool
    high_contrast: bool
    font_size: FontSize
    language: str


class ThemeSettingsUpdate(CamelModel):
    theme: Optional[Theme] = None
    dark_mode: Optional[bool] = None
    high_contrast: Optional[bool] = None
    font_size: Optional[FontSize] = None
    language: Optional[str] = None


class NotificationSettings(CamelModel):
    email_notifications: bool
    push_notifications: bool
    performance_updates: bool
    newsletter: bool


class NotificationSettingsUpdate(CamelModel):
    email_notifications: Optional[bool] = None
    push_notifications: Optional[bool] = None
    performance_updates: Optional[bool] = None
    newsletter: Optional[bool] = None
