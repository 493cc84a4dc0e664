"""Falcon ASGI app assembly."""

import logging

import falcon
import falcon.asgi

from grantscope.application.services.session_registry import SessionRegistry
from grantscope.application.use_cases.users.list_active_users import ListActiveUsersUseCase
from grantscope.interfaces.api.resources.health import HealthResource
from grantscope.interfaces.api.resources.inspector import (
    FieldGrantsResource,
    InspectorResource,
    ObjectGrantsResource,
    RemediationResource,
    SectionResource,
)
from grantscope.interfaces.api.resources.users import UsersResource

logger = logging.getLogger(__name__)


async def handle_unexpected_error(req, resp, ex, params) -> None:
    """Log any unhandled exception and answer with a generic 500."""
    logger.error("Unhandled exception on %s %s", req.method, req.path, exc_info=ex)
    resp.status = falcon.HTTP_500
    resp.media = {"title": "500 Internal Server Error"}


def build_app(
    registry: SessionRegistry,
    list_active_users: ListActiveUsersUseCase,
    middleware: list | None = None,
    grants_api_url: str | None = None,
) -> falcon.asgi.App:
    """Register all inspector routes on a new ASGI app."""
    app = falcon.asgi.App(middleware=middleware or [])
    app.add_error_handler(Exception, handle_unexpected_error)

    health = HealthResource(registry, grants_api_url)
    inspector = InspectorResource(registry)
    objects = ObjectGrantsResource(registry)
    fields = FieldGrantsResource(registry)
    remediation = RemediationResource(registry)

    app.add_route("/v1/health", health)
    app.add_route("/v1/health/ready", health, suffix="ready")
    app.add_route("/v1/users", UsersResource(list_active_users))
    app.add_route("/v1/inspector", inspector)
    app.add_route("/v1/inspector/objects", objects)
    app.add_route("/v1/inspector/objects/search", objects, suffix="search")
    app.add_route("/v1/inspector/objects/next", objects, suffix="next")
    app.add_route("/v1/inspector/objects/previous", objects, suffix="previous")
    app.add_route("/v1/inspector/fields", fields)
    app.add_route("/v1/inspector/fields/search", fields, suffix="search")
    app.add_route("/v1/inspector/fields/more", fields, suffix="more")
    app.add_route("/v1/inspector/sections/{section}", SectionResource(registry))
    app.add_route("/v1/inspector/remediation", remediation)
    app.add_route("/v1/inspector/remediation/undo", remediation, suffix="undo")
    return app
