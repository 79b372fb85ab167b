from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

# Per-IP limits. The default applies to every route through SlowAPIMiddleware;
# credential endpoints add the stricter `auth_limit` with @limiter.limit.
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled,
)

auth_limit = settings.rate_limit_auth
