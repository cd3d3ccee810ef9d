# reunion/api/deps.py: shared FastAPI dependencies (overridden in tests).
from typing import Iterator, Optional

import requests
from fastapi import Depends

from reunion.core.config import Settings, get_settings
from reunion.utils.ratelimit import InMemoryRateLimitStore, RateLimitStore

_rate_limiter: Optional[InMemoryRateLimitStore] = None


def get_rate_limiter(settings: Settings = Depends(get_settings)) -> RateLimitStore:
    """Process-wide store, created on first use with the configured quota."""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = InMemoryRateLimitStore(
            limit=settings.rate_limit, window_seconds=settings.rate_window_seconds
        )
    return _rate_limiter


def get_session() -> Iterator[requests.Session]:
    """One upstream HTTP session per request."""
    session = requests.Session()
    try:
        yield session
    finally:
        session.close()
