"""Remediation state machine - tracks the last applied action and its undo.

States are ``Idle`` and ``Applied(action)``. A successful apply always moves
to ``Applied`` for the new action, superseding any earlier undo; a
successful undo of that action returns to ``Idle``. Failed calls leave the
state exactly as it was. Apply and undo never overlap.
"""

import asyncio
import logging
from datetime import UTC, datetime
from enum import StrEnum

from grantscope.application.ports import RemediationGateway
from grantscope.domain.entities import RemediationRecord
from grantscope.domain.exceptions import ValidationError
from grantscope.domain.value_objects import RemediationAction

logger = logging.getLogger(__name__)


class RemediationState(StrEnum):
    IDLE = "idle"
    APPLIED = "applied"


class RemediationTracker:
    """Applies remediation actions and keeps the single undoable record."""

    def __init__(self, gateway: RemediationGateway) -> None:
        self._gateway = gateway
        self._record: RemediationRecord | None = None
        self._lock = asyncio.Lock()

    @property
    def record(self) -> RemediationRecord | None:
        return self._record

    @property
    def state(self) -> RemediationState:
        if self._record is not None and self._record.undoable:
            return RemediationState.APPLIED
        return RemediationState.IDLE

    @property
    def undoable_action(self) -> RemediationAction | None:
        if self.state is RemediationState.APPLIED:
            return self._record.action_type
        return None

    def can_undo(self, action: RemediationAction | str | None) -> bool:
        return action is not None and self.undoable_action == action

    async def apply(
        self,
        user_id: str | None,
        action: RemediationAction | str | None,
    ) -> RemediationRecord:
        """Run an action against a user; the new record becomes the only undoable one."""
        if not user_id or not action:
            raise ValidationError("Select a user and a remediation action first")
        try:
            action = RemediationAction(action)
        except ValueError as e:
            raise ValidationError(f"Unknown remediation action: {action}") from e

        async with self._lock:
            await self._gateway.apply(user_id, action)

            if self._record is not None and self._record.undoable:
                logger.info(
                    "Remediation %s on %s superseded by %s",
                    self._record.action_type,
                    self._record.target_user_id,
                    action,
                )
            record = RemediationRecord(
                action_type=action,
                target_user_id=user_id,
                applied_at=datetime.now(UTC),
            )
            self._record = record
        logger.info("Applied remediation %s to user %s", action, user_id)
        return record

    async def undo(self, action: RemediationAction | str | None = None) -> RemediationRecord:
        """Undo the last applied action. Any other action is not undoable."""
        async with self._lock:
            record = self._record
            if record is None or not record.undoable:
                raise ValidationError("There is no remediation to undo")
            if action is not None and action != record.action_type:
                raise ValidationError(f"Undo is only available for {record.action_type}")

            await self._gateway.undo(record.target_user_id, record.action_type)

            record.undoable = False
        logger.info(
            "Undid remediation %s for user %s", record.action_type, record.target_user_id
        )
        return record
