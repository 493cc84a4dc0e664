"""Pytest fixtures for GrantScope tests."""

from __future__ import annotations

import asyncio

import pytest

from grantscope.application.dto.grant_pages import FieldGrantBatch, ObjectGrantPage
from grantscope.application.services.inspector_session import InspectorSession
from grantscope.domain.entities import (
    Grant,
    RiskAssessment,
    RoleAssignment,
    SharingRule,
    UserDetail,
    UserSummary,
)
from grantscope.domain.exceptions import NetworkError
from grantscope.domain.value_objects import RemediationAction, SourceType


def make_grant(
    object_name: str = "Account",
    field_name: str | None = None,
    source_name: str = "ProfileA",
    source_type: SourceType = SourceType.PROFILE,
    **flags: bool,
) -> Grant:
    """Build a raw grant; flags use short names (read, create, edit, delete)."""
    return Grant(
        source_type=source_type,
        source_name=source_name,
        object_name=object_name,
        field_name=field_name,
        can_read=flags.get("read", False),
        can_create=flags.get("create", False),
        can_edit=flags.get("edit", False),
        can_delete=flags.get("delete", False),
    )


# --- Fake ports ---


class FakeGrantSource:
    """In-memory grant source that pages and filters like the grants service."""

    def __init__(self) -> None:
        self.object_grants: dict[str, list[Grant]] = {}
        self.field_batches: dict[str, dict[str | None, FieldGrantBatch]] = {}
        self.system_permissions: dict[str, dict[str, bool]] = {}
        self.sharing_rules: dict[str, list[SharingRule]] = {}
        self.role_hierarchy: dict[str, list[RoleAssignment]] = {}
        self.failing: set[str] = set()
        self.holds: dict[str, asyncio.Event] = {}
        self.calls: list[tuple] = []

    async def _enter(self, method: str, user_id: str, *args) -> None:
        self.calls.append((method, user_id, *args))
        hold = self.holds.get(user_id)
        if hold is not None:
            await hold.wait()
        if method in self.failing:
            raise NetworkError(f"{method} failed")

    def count(self, method: str) -> int:
        return sum(1 for call in self.calls if call[0] == method)

    async def get_object_grants(
        self, user_id: str, page_index: int, page_size: int, term: str
    ) -> ObjectGrantPage:
        await self._enter("get_object_grants", user_id, page_index, page_size, term)
        rows = [
            g
            for g in self.object_grants.get(user_id, [])
            if not term or term.lower() in g.object_name.lower()
        ]
        start = (page_index - 1) * page_size
        return ObjectGrantPage(grants=rows[start : start + page_size], total=len(rows))

    async def get_field_grants(
        self, user_id: str, continuation_token: str | None, term: str | None
    ) -> FieldGrantBatch:
        await self._enter("get_field_grants", user_id, continuation_token, term)
        batch = self.field_batches.get(user_id, {}).get(continuation_token)
        if batch is None:
            return FieldGrantBatch()
        grants = [
            g
            for g in batch.grants
            if not term
            or term.lower() in g.object_name.lower()
            or term.lower() in (g.field_name or "").lower()
        ]
        return FieldGrantBatch(grants=grants, next_token=batch.next_token)

    async def get_system_permissions(self, user_id: str) -> dict[str, bool]:
        await self._enter("get_system_permissions", user_id)
        return dict(self.system_permissions.get(user_id, {}))

    async def get_sharing_rules(self, user_id: str) -> list[SharingRule]:
        await self._enter("get_sharing_rules", user_id)
        return list(self.sharing_rules.get(user_id, []))

    async def get_role_hierarchy(self, user_id: str) -> list[RoleAssignment]:
        await self._enter("get_role_hierarchy", user_id)
        return list(self.role_hierarchy.get(user_id, []))


class FakeUserDirectory:
    """In-memory user directory."""

    def __init__(self) -> None:
        self.users: list[UserSummary] = []
        self.details: dict[str, UserDetail] = {}
        self.risks: dict[str, RiskAssessment] = {}
        self.failing: set[str] = set()
        self.calls: list[tuple] = []

    async def list_active_users(self) -> list[UserSummary]:
        self.calls.append(("list_active_users",))
        if "list_active_users" in self.failing:
            raise NetworkError("list_active_users failed")
        return list(self.users)

    async def get_user_details(self, user_id: str) -> UserDetail:
        self.calls.append(("get_user_details", user_id))
        if "get_user_details" in self.failing:
            raise NetworkError("get_user_details failed")
        return self.details.get(user_id, UserDetail(user_id=user_id))

    async def analyze_user_risk(self, user_id: str) -> RiskAssessment:
        self.calls.append(("analyze_user_risk", user_id))
        if "analyze_user_risk" in self.failing:
            raise NetworkError("analyze_user_risk failed")
        return self.risks.get(user_id, RiskAssessment())


class FakeRemediationGateway:
    """Records remediation calls; ``error`` is raised when set, ``hold`` pauses each call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, RemediationAction]] = []
        self.error: Exception | None = None
        self.hold: asyncio.Event | None = None

    async def _enter(self, call: tuple[str, str, RemediationAction]) -> None:
        self.calls.append(call)
        if self.hold is not None:
            await self.hold.wait()

    async def apply(self, user_id: str, action: RemediationAction) -> None:
        await self._enter(("apply", user_id, action))
        if self.error is not None:
            raise self.error

    async def undo(self, user_id: str, action: RemediationAction) -> None:
        await self._enter(("undo", user_id, action))
        if self.error is not None:
            raise self.error


# --- Fixtures ---


@pytest.fixture
def grant_source() -> FakeGrantSource:
    return FakeGrantSource()


@pytest.fixture
def user_directory() -> FakeUserDirectory:
    directory = FakeUserDirectory()
    directory.users = [
        UserSummary(user_id="U2", name="bob"),
        UserSummary(user_id="U1", name="Alice"),
    ]
    directory.details["U1"] = UserDetail(
        user_id="U1",
        user_name="Alice",
        email="alice@example.com",
        profile_name="System Administrator",
        is_active=True,
        permission_sets=("PermSetB", "Support"),
    )
    directory.risks["U1"] = RiskAssessment(
        high_risk_count=2, risk_score=70, risk_level="High", critical_findings=("Modify All Data",)
    )
    return directory


@pytest.fixture
def remediation_gateway() -> FakeRemediationGateway:
    return FakeRemediationGateway()


@pytest.fixture
def session(grant_source, user_directory, remediation_gateway) -> InspectorSession:
    """Inspector session over the fake ports with small pages."""
    return InspectorSession(
        grant_source=grant_source,
        user_directory=user_directory,
        remediation_gateway=remediation_gateway,
        object_page_size=2,
        field_page_size=2,
    )
