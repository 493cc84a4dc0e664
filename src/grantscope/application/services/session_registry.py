"""In-process registry of inspector sessions, one per operator."""

import logging
from collections.abc import Callable

from grantscope.application.services.inspector_session import InspectorSession

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Creates an operator's session on first use and keeps it for the process."""

    def __init__(self, session_factory: Callable[[], InspectorSession]) -> None:
        self._factory = session_factory
        self._sessions: dict[str, InspectorSession] = {}

    def get(self, operator_id: str) -> InspectorSession:
        session = self._sessions.get(operator_id)
        if session is None:
            logger.debug("Opening inspector session for operator %s", operator_id)
            session = self._factory()
            self._sessions[operator_id] = session
        return session

    def discard(self, operator_id: str) -> None:
        self._sessions.pop(operator_id, None)

    def __len__(self) -> int:
        return len(self._sessions)
