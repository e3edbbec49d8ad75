"""Rate limiting for the /api endpoints.

The limiter has to exist at import time for the route decorators, so the
limit string and the on/off switch are applied per app by ``configure_rate_limit``.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

DEFAULT_API_RATE_LIMIT = "100 per 15 minutes"

limiter = Limiter(key_func=get_remote_address)

_api_rate_limit = DEFAULT_API_RATE_LIMIT


def api_rate_limit() -> str:
    """Current limit for API routes, evaluated on every request."""
    return _api_rate_limit


def configure_rate_limit(limit: str, enabled: bool = True) -> None:
    """Set the API limit and enable or disable limiting.

    Args:
        limit: Limit in limits-library notation, e.g. "100 per 15 minutes"
        enabled: False turns every limit into a no-op
    """
    global _api_rate_limit
    _api_rate_limit = limit
    limiter.enabled = enabled
