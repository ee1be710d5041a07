"""Process-wide pooled HTTP client for Google Places calls."""
import httpx
import logging
from typing import Optional

from places_backend.config import settings as cache_settings
from places_backend.core.settings import settings

logger = logging.getLogger(__name__)

_shared_client: Optional[httpx.AsyncClient] = None


def build_timeout() -> httpx.Timeout:
    """Overall provider budget with a tighter connect phase."""
    return httpx.Timeout(
        cache_settings.PROVIDER_TIMEOUT_SECONDS,
        connect=min(settings.HTTP_CONNECT_TIMEOUT_SECONDS, cache_settings.PROVIDER_TIMEOUT_SECONDS),
    )


def get_shared_client() -> httpx.AsyncClient:
    """Get or lazily create the pooled client used by GooglePlacesClient.

    Pool and timeout settings from environment:
    - Max connections: HTTP_MAX_CONNECTIONS (default: 100)
    - Max keepalive: HTTP_MAX_KEEPALIVE (default: 50)
    - Read/write/pool timeout: PROVIDER_TIMEOUT_SECONDS (default: 10)
    - Connect timeout: HTTP_CONNECT_TIMEOUT_SECONDS (default: 5, capped at the above)
    """
    global _shared_client

    if _shared_client is None:
        limits = httpx.Limits(
            max_connections=settings.HTTP_MAX_CONNECTIONS,
            max_keepalive_connections=settings.HTTP_MAX_KEEPALIVE,
        )
        timeout = build_timeout()

        _shared_client = httpx.AsyncClient(timeout=timeout, limits=limits)

        logger.info(
            f"Places HTTP client initialized: max_conn={settings.HTTP_MAX_CONNECTIONS}, "
            f"keepalive={settings.HTTP_MAX_KEEPALIVE}, timeout={timeout.read}s, connect={timeout.connect}s"
        )

    return _shared_client


async def close_shared_client():
    """Close the pooled client on shutdown. A later call to get_shared_client opens a new one."""
    global _shared_client

    if _shared_client is not None:
        await _shared_client.aclose()
        _shared_client = None
        logger.info("Places HTTP client closed")
