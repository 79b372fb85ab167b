# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import (
    user, branch, team, goal,
    performance_review, performance_metric,
    notification, user_settings,
)

# Explicit class exports for cleaner imports
from .user import User, UserRole
from .branch import Branch
from .team import Team
from .goal import Goal, GoalStatus, GoalType
from .performance_review import PerformanceReview, PerformanceRating, ReviewStatus
from .performance_metric import PerformanceMetric
from .notification import Notification, NotificationType
from .user_settings import UserSettings

__all__ = [
    "User",
    "UserRole",
    "Branch",
    "Team",
    "Goal",
    "GoalStatus",
    "GoalType",
    "PerformanceReview",
    "PerformanceRating",
    "ReviewStatus",
    "PerformanceMetric",
    "Notification",
    "NotificationType",
    "UserSettings",
]
