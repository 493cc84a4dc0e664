"""Domain entities."""

from grantscope.domain.entities.access import RoleAssignment, SharingRule, SystemPermission
from grantscope.domain.entities.grant import Grant, MergedGrant
from grantscope.domain.entities.paging import Cursor, PageWindow, SearchState
from grantscope.domain.entities.remediation import RemediationRecord
from grantscope.domain.entities.user import RiskAssessment, UserDetail, UserSummary

__all__ = [
    "Cursor",
    "Grant",
    "MergedGrant",
    "PageWindow",
    "RemediationRecord",
    "RiskAssessment",
    "RoleAssignment",
    "SearchState",
    "SharingRule",
    "SystemPermission",
    "UserDetail",
    "UserSummary",
]
