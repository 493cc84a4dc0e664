"""Application entry point and composition root."""

import logging

from grantscope import __version__
from grantscope.application.services.inspector_session import InspectorSession
from grantscope.application.services.session_registry import SessionRegistry
from grantscope.application.use_cases.users.list_active_users import ListActiveUsersUseCase
from grantscope.config import Settings, get_settings
from grantscope.infrastructure.auth.keycloak_provider import KeycloakProvider
from grantscope.infrastructure.grants_api import GrantsApiClient
from grantscope.interfaces.api.app import build_app
from grantscope.interfaces.api.middleware.auth import AuthMiddleware
from grantscope.interfaces.api.middleware.client_lifespan import ClientLifespanMiddleware

logger = logging.getLogger(__name__)


def main() -> None:
    """CLI entry point."""
    print(f"GrantScope v{__version__}")


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_grantscope_app():
    """Composition root - build Falcon app with all dependencies."""
    settings = get_settings()
    configure_logging(settings)

    client = GrantsApiClient(
        base_url=settings.grants_api_url,
        api_token=settings.grants_api_token,
        timeout=settings.grants_api_timeout,
    )
    keycloak = (
        KeycloakProvider(
            server_url=settings.keycloak_url,
            realm=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret,
            required_role=settings.operator_role,
        )
        if settings.keycloak_client_secret
        else None
    )
    if keycloak is None:
        logger.warning("Keycloak is not configured; all requests run as the anonymous operator")

    def new_session() -> InspectorSession:
        return InspectorSession(
            grant_source=client,
            user_directory=client,
            remediation_gateway=client,
            object_page_size=settings.object_page_size,
            field_page_size=settings.field_page_size,
            search_min_length=settings.search_min_length,
            result_cap=settings.server_result_cap,
            strip_tokens=settings.object_name_strip_tokens,
        )

    return build_app(
        registry=SessionRegistry(new_session),
        list_active_users=ListActiveUsersUseCase(client),
        grants_api_url=settings.grants_api_url,
        middleware=[
            ClientLifespanMiddleware(client),
            AuthMiddleware(keycloak),
        ],
    )


def run_server() -> None:
    """Run uvicorn server."""
    import uvicorn

    uvicorn.run(create_grantscope_app(), host="0.0.0.0", port=8000)
