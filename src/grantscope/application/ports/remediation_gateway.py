"""Remediation gateway port."""

from typing import Protocol

from grantscope.domain.value_objects import RemediationAction


class RemediationGateway(Protocol):
    """Port for applying and undoing remediation actions."""

    async def apply(self, user_id: str, action: RemediationAction) -> None: ...

    async def undo(self, user_id: str, action: RemediationAction) -> None: ...
