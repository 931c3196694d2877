"""Async HTTP client factory for the Leon API."""

from typing import Optional

import httpx

from .config import AppSettings, get_settings
from .harvest_logging import get_logger

logger = get_logger(__name__)


def build_client(
    settings: Optional[AppSettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create an httpx client bound to the Leon base URL.

    Event payloads are large; httpx buffers whole bodies without a size cap,
    so no limit is configured here.

    Args:
        settings: Settings to read base URL, timeout and user agent from
        transport: Optional transport, e.g. ``httpx.MockTransport`` in tests
    """
    settings = settings or get_settings()

    client = httpx.AsyncClient(
        base_url=settings.LEON_BASE_URL,
        timeout=httpx.Timeout(settings.TIMEOUT_S, connect=10.0),
        headers={
            'User-Agent': settings.USER_AGENT,
            'Accept': 'application/json',
            'Accept-Encoding': 'gzip, deflate',
            'Accept-Language': 'en-US,en;q=0.9',
        },
        follow_redirects=True,
        limits=httpx.Limits(
            max_keepalive_connections=10,
            max_connections=20,
        ),
        transport=transport,
    )
    logger.debug("HTTP client initialized", base_url=settings.LEON_BASE_URL)
    return client
