"""Client lifespan middleware - closes the grants service client on shutdown."""

import logging
from typing import Any

from grantscope.infrastructure.grants_api import GrantsApiClient

logger = logging.getLogger(__name__)


class ClientLifespanMiddleware:
    """Middleware that releases the HTTP connection pool when the ASGI server stops."""

    def __init__(self, client: GrantsApiClient) -> None:
        self._client = client

    async def process_startup(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        logger.info("GrantScope API starting")

    async def process_shutdown(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        """Close the grants service client when the ASGI server shuts down."""
        await self._client.aclose()
        logger.info("GrantScope API stopped")
