import os
import logging
from pydantic import BaseModel, Field
from typing import List
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Config(BaseModel):
    app_name: str = "Employee KPI Dashboard API"
    environment: str = Field(default_factory=lambda: os.getenv("APP_ENV", "development"))
    api_prefix: str = Field(default_factory=lambda: os.getenv("API_PREFIX", "/api/v1"))
    version: str = "1.0.0"
    request_id_header: str = "X-Request-ID"

    # Database
    database_url: str = Field(
        default_factory=lambda: os.getenv("DATABASE_URL", "sqlite:///./kpi_dashboard.db")
    )

    # Auth
    jwt_secret: str = Field(
        default_factory=lambda: os.getenv("JWT_SECRET", "dev-only-insecure-key-DO-NOT-USE-IN-PROD")
    )
    jwt_algorithm: str = Field(default_factory=lambda: os.getenv("JWT_ALGORITHM", "HS256"))
    access_token_expire_minutes: int = Field(
        default_factory=lambda: int(os.getenv("JWT_ACCESS_EXPIRATION_MINUTES", "60"))
    )
    refresh_token_expire_days: int = Field(
        default_factory=lambda: int(os.getenv("JWT_REFRESH_EXPIRATION_DAYS", "30"))
    )

    # CORS: comma-separated origins
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:3000,http://127.0.0.1:3000",
            ).split(",")
            if o.strip()
        ]
    )

    # Rate limiting (slowapi limit strings)
    rate_limit_enabled: bool = Field(default_factory=lambda: _env_flag("RATE_LIMIT_ENABLED", "true"))
    rate_limit_default: str = Field(default_factory=lambda: os.getenv("RATE_LIMIT_DEFAULT", "100/15minutes"))
    rate_limit_auth: str = Field(default_factory=lambda: os.getenv("RATE_LIMIT_AUTH", "20/15minutes"))

    # Bootstrap data
    seed_on_startup: bool = Field(default_factory=lambda: _env_flag("SEED_ON_STARTUP", "false"))
    admin_email: str = Field(default_factory=lambda: os.getenv("ADMIN_EMAIL", "admin@example.com"))
    admin_password: str = Field(default_factory=lambda: os.getenv("ADMIN_PASSWORD", "Admin@123"))


settings = Config()

# --- Startup Validation for Production ---
_logger = logging.getLogger(__name__)
if settings.environment not in ("development", "testing"):
    if "dev-only" in settings.jwt_secret:
        raise RuntimeError(
            "FATAL: JWT_SECRET must be set for non-development environments. "
            "Set it as an environment variable."
        )
else:
    if "dev-only" in settings.jwt_secret:
        _logger.warning("Using insecure default JWT_SECRET, only acceptable in development.")
