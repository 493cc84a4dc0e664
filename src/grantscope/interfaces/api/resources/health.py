"""Health check endpoints."""

import falcon.asgi

from grantscope import __version__
from grantscope.application.services.session_registry import SessionRegistry


class HealthResource:
    """Liveness, plus readiness that requires a configured grants service."""

    def __init__(self, registry: SessionRegistry, grants_api_url: str | None = None) -> None:
        self._registry = registry
        self._grants_api_url = grants_api_url

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health - liveness."""
        resp.media = {"status": "ok", "version": __version__}
        resp.status = falcon.HTTP_200

    async def on_get_ready(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health/ready - 503 until the grants service URL is set."""
        if not self._grants_api_url:
            resp.media = {"status": "unavailable", "reason": "Grants service URL is not configured"}
            resp.status = falcon.HTTP_503
            return
        resp.media = {
            "status": "ready",
            "grants_api_url": self._grants_api_url,
            "sessions": len(self._registry),
        }
        resp.status = falcon.HTTP_200
