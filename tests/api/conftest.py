"""Fixtures for API tests."""

import pytest
from falcon.testing import TestClient

from grantscope.application.services.inspector_session import InspectorSession
from grantscope.application.services.session_registry import SessionRegistry
from grantscope.application.use_cases.users.list_active_users import ListActiveUsersUseCase
from grantscope.interfaces.api.app import build_app
from grantscope.interfaces.api.middleware.auth import AuthMiddleware


class RejectingKeycloak:
    """Keycloak stand-in that only knows the token ``good``."""

    def identify(self, token: str):
        if token != "good":
            return None
        return type("Identity", (), {"operator_id": "op-1", "username": "ops"})()


@pytest.fixture
def registry(grant_source, user_directory, remediation_gateway) -> SessionRegistry:
    def _new_session() -> InspectorSession:
        return InspectorSession(
            grant_source=grant_source,
            user_directory=user_directory,
            remediation_gateway=remediation_gateway,
            object_page_size=2,
            field_page_size=2,
        )

    return SessionRegistry(_new_session)


@pytest.fixture
def app(registry, user_directory):
    """Falcon ASGI app running every request as the anonymous operator."""
    return build_app(
        registry=registry,
        list_active_users=ListActiveUsersUseCase(user_directory),
        middleware=[AuthMiddleware()],
        grants_api_url="http://grants.test/api",
    )


@pytest.fixture
def client(app) -> TestClient:
    """Falcon ASGI test client."""
    return TestClient(app)


@pytest.fixture
def secured_client(registry, user_directory) -> TestClient:
    app = build_app(
        registry=registry,
        list_active_users=ListActiveUsersUseCase(user_directory),
        middleware=[AuthMiddleware(RejectingKeycloak())],
    )
    return TestClient(app)
