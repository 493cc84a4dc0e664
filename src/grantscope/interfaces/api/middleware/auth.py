"""Auth middleware - identifies the operator from a Keycloak token or runs anonymous."""

from dataclasses import dataclass

import falcon.asgi


@dataclass
class RequestOperator:
    """Operator from request context."""

    operator_id: str
    username: str | None = None


ANONYMOUS = RequestOperator(operator_id="anonymous")


class AuthMiddleware:
    """Middleware that validates the bearer token and sets req.context.operator."""

    def __init__(self, keycloak_provider=None) -> None:
        self._keycloak = keycloak_provider

    async def process_request(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        """Extract operator from Authorization header."""
        if self._keycloak is None:
            req.context.operator = ANONYMOUS
            return

        req.context.operator = None
        auth = req.get_header("Authorization")
        if auth and auth.startswith("Bearer "):
            identity = self._keycloak.identify(auth[7:])
            if identity:
                req.context.operator = RequestOperator(
                    operator_id=identity.operator_id,
                    username=identity.username,
                )
