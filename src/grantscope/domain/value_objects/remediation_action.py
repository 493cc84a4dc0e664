"""Remediation actions an operator can apply to a user."""

from enum import StrEnum


class RemediationAction(StrEnum):
    """Destructive corrective actions, each reversible once."""

    REVOKE_PERMISSION_SETS = "revoke-permission-sets"
    RESET_SYSTEM_PERMISSIONS = "reset-system-permissions"
