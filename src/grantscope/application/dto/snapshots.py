"""Read-only snapshots handed to the UI layer after each mutating operation."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from grantscope.domain.entities import (
    MergedGrant,
    RiskAssessment,
    RoleAssignment,
    SharingRule,
    SystemPermission,
    UserDetail,
)
from grantscope.domain.value_objects import RemediationAction, Section


class NoticeLevel(StrEnum):
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    """Non-fatal notification for the operator."""

    level: NoticeLevel
    title: str
    message: str


@dataclass(frozen=True)
class ObjectGrantsView:
    grants: tuple[MergedGrant, ...]
    term: str
    page_index: int
    page_size: int
    server_total: int
    page_info: str
    is_first_page: bool
    is_last_page: bool
    is_truncated: bool


@dataclass(frozen=True)
class FieldGrantsView:
    grants: tuple[MergedGrant, ...]
    term: str
    page_index: int
    page_size: int
    buffered: int
    has_more: bool
    page_info: str
    is_first_page: bool
    is_last_page: bool


@dataclass(frozen=True)
class RemediationView:
    undoable_action: RemediationAction | None
    target_user_id: str | None
    applied_at: datetime | None


@dataclass(frozen=True)
class SessionSnapshot:
    """Everything the inspector screen renders for the selected user."""

    user_id: str | None
    user: UserDetail | None
    risk: RiskAssessment
    objects: ObjectGrantsView
    fields: FieldGrantsView
    system_permissions: tuple[SystemPermission, ...]
    sharing_rules: tuple[SharingRule, ...]
    role_hierarchy: tuple[RoleAssignment, ...]
    visible_sections: frozenset[Section]
    remediation: RemediationView
    notices: tuple[Notice, ...] = field(default_factory=tuple)

    @property
    def total_permissions(self) -> int:
        permission_sets = len(self.user.permission_sets) if self.user else 0
        return permission_sets + len(self.system_permissions)
