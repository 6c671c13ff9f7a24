"""Process-wide rate limiter shared by the app factory and module routers."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from src.config import settings

# Keyed by client IP address
limiter = Limiter(key_func=get_remote_address, default_limits=[settings.default_rate_limit])
