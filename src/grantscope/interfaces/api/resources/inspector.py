"""Inspector API resources - one session per operator."""

import logging

import falcon.asgi

from grantscope.application.services.inspector_session import InspectorSession
from grantscope.application.services.session_registry import SessionRegistry
from grantscope.domain.exceptions import NetworkError, RemediationRestriction, ValidationError
from grantscope.interfaces.api.resources.serializers import (
    decision_media,
    fields_media,
    notice_media,
    objects_media,
    record_media,
    snapshot_media,
)

logger = logging.getLogger(__name__)


class _SessionResource:
    def __init__(self, registry: SessionRegistry) -> None:
        self._registry = registry

    def _session(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> InspectorSession | None:
        operator = getattr(req.context, "operator", None)
        if not operator:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return None
        return self._registry.get(operator.operator_id)

    @staticmethod
    async def _body(req: falcon.asgi.Request) -> dict:
        body = await req.get_media(default_when_empty={})
        if not isinstance(body, dict):
            raise falcon.HTTPBadRequest(title="Request body must be a JSON object")
        return body


class InspectorResource(_SessionResource):
    """GET/PUT /v1/inspector - current snapshot and user selection."""

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        session = self._session(req, resp)
        if session is None:
            return
        resp.media = snapshot_media(session.snapshot(), session.drain_notices())
        resp.status = falcon.HTTP_200

    async def on_put(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Select the user to inspect and load their access data."""
        session = self._session(req, resp)
        if session is None:
            return
        body = await self._body(req)
        try:
            await session.select_user(body.get("user_id"))
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        resp.media = snapshot_media(session.snapshot(), session.drain_notices())
        resp.status = falcon.HTTP_200


class ObjectGrantsResource(_SessionResource):
    """Object grants: current page, search and page navigation."""

    def _respond(self, session: InspectorSession, resp: falcon.asgi.Response, **extra) -> None:
        media = objects_media(session.snapshot().objects)
        media["notices"] = [notice_media(n) for n in session.drain_notices()]
        media.update(extra)
        resp.media = media
        resp.status = falcon.HTTP_200

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        session = self._session(req, resp)
        if session is not None:
            self._respond(session, resp)

    async def on_post_search(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        session = self._session(req, resp)
        if session is None:
            return
        body = await self._body(req)
        decision = await session.search_objects(body.get("term", ""))
        self._respond(session, resp, search=decision_media(decision))

    async def on_post_next(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        session = self._session(req, resp)
        if session is None:
            return
        moved = await session.next_object_page()
        self._respond(session, resp, moved=moved)

    async def on_post_previous(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        session = self._session(req, resp)
        if session is None:
            return
        moved = await session.previous_object_page()
        self._respond(session, resp, moved=moved)


class FieldGrantsResource(_SessionResource):
    """Field grants: local pages over the accumulated buffer, search and fetch-more."""

    def _respond(self, session: InspectorSession, resp: falcon.asgi.Response, **extra) -> None:
        media = fields_media(session.snapshot().fields)
        media["notices"] = [notice_media(n) for n in session.drain_notices()]
        media.update(extra)
        resp.media = media
        resp.status = falcon.HTTP_200

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/inspector/fields?page=N - fetches more batches when page N is not buffered."""
        session = self._session(req, resp)
        if session is None:
            return
        page = req.get_param_as_int("page", min_value=1)
        await session.field_page(page)
        self._respond(session, resp)

    async def on_post_search(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        session = self._session(req, resp)
        if session is None:
            return
        body = await self._body(req)
        decision = await session.search_fields(body.get("term", ""))
        self._respond(session, resp, search=decision_media(decision))

    async def on_post_more(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        session = self._session(req, resp)
        if session is None:
            return
        fetched = await session.load_more_fields()
        self._respond(session, resp, fetched=fetched)


class SectionResource(_SessionResource):
    """PUT /v1/inspector/sections/{section} - show or hide a section."""

    async def on_put(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, section: str
    ) -> None:
        session = self._session(req, resp)
        if session is None:
            return
        try:
            visible = await session.toggle_section(section)
        except ValidationError as e:
            resp.status = falcon.HTTP_404
            resp.media = {"error": str(e)}
            return
        media = snapshot_media(session.snapshot(), session.drain_notices())
        media["toggled"] = {"section": section, "visible": visible}
        resp.media = media
        resp.status = falcon.HTTP_200


class RemediationResource(_SessionResource):
    """POST /v1/inspector/remediation[/undo] - apply or undo a remediation action."""

    async def _run(self, resp: falcon.asgi.Response, session: InspectorSession, call) -> None:
        try:
            record = await call
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        except RemediationRestriction as e:
            resp.status = falcon.HTTP_403
            resp.media = {"error": str(e)}
            return
        except NetworkError as e:
            logger.warning("Remediation call failed: %s", e)
            resp.status = falcon.HTTP_502
            resp.media = {"error": str(e)}
            return
        media = snapshot_media(session.snapshot(), session.drain_notices())
        media["record"] = record_media(record)
        resp.media = media
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        session = self._session(req, resp)
        if session is None:
            return
        body = await self._body(req)
        await self._run(resp, session, session.apply_remediation(body.get("action")))

    async def on_post_undo(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        session = self._session(req, resp)
        if session is None:
            return
        body = await self._body(req)
        await self._run(resp, session, session.undo_remediation(body.get("action")))
