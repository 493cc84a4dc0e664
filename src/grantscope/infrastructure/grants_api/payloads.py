"""Wire payloads of the grants service, validated with pydantic."""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from grantscope.domain.entities import (
    Grant,
    RiskAssessment,
    RoleAssignment,
    SharingRule,
    UserDetail,
    UserSummary,
)
from grantscope.domain.value_objects import SourceType

logger = logging.getLogger(__name__)


def coerce_flag(value: Any) -> bool:
    """Missing or malformed permission flags count as not granted."""
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value is True


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class GrantPayload(_Payload):
    source_type: SourceType
    source_name: str = ""
    object_name: str
    field_name: str | None = None
    can_read: bool = False
    can_create: bool = False
    can_edit: bool = False
    can_delete: bool = False
    assigned_by: str | None = None
    assignment_method: str | None = None

    @field_validator("can_read", "can_create", "can_edit", "can_delete", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> bool:
        return coerce_flag(value)

    def to_domain(self) -> Grant:
        return Grant(**self.model_dump())


class _GrantRows(_Payload):
    grants: list[GrantPayload] = Field(default_factory=list)

    @field_validator("grants", mode="before")
    @classmethod
    def _drop_malformed_rows(cls, value: Any) -> Any:
        """Validate rows one by one so a single bad row does not sink the page."""
        if value is None:
            return []
        if not isinstance(value, list):
            return value
        rows = []
        for row in value:
            try:
                rows.append(GrantPayload.model_validate(row))
            except ValidationError as e:
                logger.warning("Skipping malformed grant row %r: %s", row, e)
        return rows


class ObjectGrantPagePayload(_GrantRows):
    total: int = 0


class FieldGrantBatchPayload(_GrantRows):
    next_token: str | None = None


class UserSummaryPayload(_Payload):
    id: str
    name: str = ""

    def to_domain(self) -> UserSummary:
        return UserSummary(user_id=self.id, name=self.name)


class UserDetailPayload(_Payload):
    user_name: str = ""
    user_email: str = ""
    profile_name: str = ""
    is_active: bool = False
    permission_sets: list[str] = Field(default_factory=list)

    def to_domain(self, user_id: str) -> UserDetail:
        return UserDetail(
            user_id=user_id,
            user_name=self.user_name,
            email=self.user_email,
            profile_name=self.profile_name,
            is_active=self.is_active,
            permission_sets=tuple(self.permission_sets),
        )


class RiskAssessmentPayload(_Payload):
    high_risk_count: int = 0
    risk_score: int = 0
    risk_level: str = "Low"
    critical_findings: list[str] = Field(default_factory=list)

    def to_domain(self) -> RiskAssessment:
        return RiskAssessment(
            high_risk_count=self.high_risk_count,
            risk_score=self.risk_score,
            risk_level=self.risk_level,
            critical_findings=tuple(self.critical_findings),
        )


class SharingRulePayload(_Payload):
    object_name: str
    sharing_type: str = ""
    access_level: str = ""
    shared_with: str = ""

    def to_domain(self) -> SharingRule:
        return SharingRule(**self.model_dump())


class RoleAssignmentPayload(_Payload):
    role_name: str
    parent_role: str | None = None
    access_level: str = ""

    def to_domain(self) -> RoleAssignment:
        return RoleAssignment(**self.model_dump())


class ErrorPayload(_Payload):
    error_code: str | None = None
    message: str | None = None
