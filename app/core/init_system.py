import logging
from sqlalchemy.orm import Session
from app.core.config import settings
from app.models.branch import Branch
from app.models.team import Team
from app.models.user import User, UserRole
from app.services import auth as auth_service

logger = logging.getLogger(__name__)


def init_system_data(db: Session) -> bool:
    """
    Checks if the system needs initialization.
    If no user exists, creates a super admin, a "Head Office" branch and a
    "Management" team led by that admin. Returns True when data was created.
    """
    try:
        user_count = db.query(User).count()
        if user_count > 0:
            logger.info(f"System initialization check: {user_count} user(s) found.")
            return False

        logger.info("Running startup initialization...")

        admin = User(
            email=settings.admin_email.lower(),
            hashed_password=auth_service.get_password_hash(settings.admin_password),
            first_name="System",
            last_name="Administrator",
            display_name="System Administrator",
            title="Administrator",
            role=UserRole.SUPER_ADMIN,
            is_active=True,
        )
        branch = Branch(
            name="Head Office",
            location="Headquarters",
            description="Main branch",
        )
        db.add_all([admin, branch])
        db.flush()

        team = Team(
            name="Management",
            description="Management team",
            branch_id=branch.id,
            leader_id=admin.id,
        )
        db.add(team)
        db.flush()

        admin.team_id = team.id
        admin.branch_id = branch.id
        db.commit()
        logger.info(f"Created default super admin: {admin.email} (change the password immediately)")
        return True
    except Exception:
        db.rollback()
        logger.error("Error during system initialization", exc_info=True)
        raise
