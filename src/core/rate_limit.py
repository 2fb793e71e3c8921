"""
Request rate limiting.

One slowapi ``Limiter`` shared by the app. Every route gets
``RATE_LIMIT_DEFAULT`` per client address; login, registration, token refresh
and password changes carry tighter ``@limiter.limit`` decorators. Counters live
in Redis when ``REDIS_URL`` is set so that several workers share them.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from src.core.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_default],
    storage_uri=settings.rate_limit_storage_uri,
    enabled=settings.rate_limit_enabled,
)
