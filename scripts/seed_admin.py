"""
Creates the schema and bootstraps the default super admin, branch and team.

Usage:
    ADMIN_EMAIL=owner@example.com ADMIN_PASSWORD=... python -m scripts.seed_admin
"""
import logging

from app.core.config import settings
from app.core.init_system import init_system_data
from app.database import Database

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def main() -> None:
    db_handle = Database(settings.database_url)
    db_handle.init()
    db = db_handle.session()
    try:
        if init_system_data(db):
            logger.info(f"Seeded default data. Log in as {settings.admin_email}.")
        else:
            logger.warning("Users already exist, nothing to seed.")
    finally:
        db.close()
        db_handle.dispose()


if __name__ == "__main__":
    main()
