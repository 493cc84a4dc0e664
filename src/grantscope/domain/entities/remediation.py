"""Remediation record entity."""

from dataclasses import dataclass
from datetime import datetime

from grantscope.domain.value_objects import RemediationAction


@dataclass
class RemediationRecord:
    """A remediation that was applied to a user and may still be undone."""

    action_type: RemediationAction
    target_user_id: str
    applied_at: datetime
    undoable: bool = True
