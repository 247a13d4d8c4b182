"""
backend/softwarepros/core/limiter.py

Per-IP Rate Limiter Configuration

Initializes the SlowAPI limiter using the remote address as the client key.
This guards public endpoints against request floods; per-submitter
throttling of contact emails lives in `core.rate_limiter`.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from softwarepros.core.config import settings

# ---------------------------------------------------
# Rate Limiter Initialization
# ---------------------------------------------------
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
