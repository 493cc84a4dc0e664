"""Keycloak OIDC provider - identifies the operator behind a bearer token."""

import logging
from dataclasses import dataclass, field

from keycloak import KeycloakOpenID
from keycloak.exceptions import KeycloakError

logger = logging.getLogger(__name__)


@dataclass
class OperatorIdentity:
    """Operator authenticated through Keycloak token introspection."""

    operator_id: str
    username: str | None = None
    realm_roles: list[str] = field(default_factory=list)


class KeycloakProvider:
    """Introspects tokens and admits only operators holding the required realm role."""

    def __init__(
        self,
        server_url: str,
        realm: str,
        client_id: str,
        client_secret: str = "",
        required_role: str | None = None,
    ) -> None:
        self._keycloak = KeycloakOpenID(
            server_url=server_url,
            realm_name=realm,
            client_id=client_id,
            client_secret_key=client_secret,
        )
        self._required_role = required_role

    def identify(self, token: str) -> OperatorIdentity | None:
        """Return the operator for an active token, or None."""
        try:
            info = self._keycloak.introspect(token)
        except KeycloakError as e:
            logger.warning("Token introspection failed: %s", e)
            return None
        return self.operator_from_introspection(info)

    def operator_from_introspection(self, info: dict) -> OperatorIdentity | None:
        if not info.get("active") or not info.get("sub"):
            return None
        roles = info.get("realm_access", {}).get("roles", [])
        if self._required_role and self._required_role not in roles:
            logger.info("Operator %s lacks role %s", info["sub"], self._required_role)
            return None
        return OperatorIdentity(
            operator_id=info["sub"],
            username=info.get("preferred_username"),
            realm_roles=list(roles),
        )
