"""Rate limiting configuration."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from teamhub.settings import Settings


def build_limiter(settings: Settings) -> Limiter:
    """Shared limiter instance, disabled outside production."""
    return Limiter(
        key_func=get_remote_address,
        default_limits=["200/minute"],
        storage_uri="memory://",
        enabled=settings.env == "production",
    )
