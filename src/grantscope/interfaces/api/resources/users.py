"""Users API resource."""

import logging

import falcon.asgi

from grantscope.application.use_cases.users.list_active_users import ListActiveUsersUseCase
from grantscope.domain.exceptions import NetworkError

logger = logging.getLogger(__name__)


class UsersResource:
    """GET /v1/users - active users for the user picker."""

    def __init__(self, list_active_users: ListActiveUsersUseCase) -> None:
        self._list = list_active_users

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        if not getattr(req.context, "operator", None):
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        try:
            users = await self._list.execute()
        except NetworkError as e:
            logger.warning("Active user load failed: %s", e)
            resp.status = falcon.HTTP_502
            resp.media = {"error": str(e)}
            return

        resp.media = {"items": [{"label": u.name, "value": u.user_id} for u in users]}
        resp.status = falcon.HTTP_200
