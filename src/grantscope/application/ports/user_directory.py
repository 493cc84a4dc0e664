"""User directory port."""

from typing import Protocol

from grantscope.domain.entities import RiskAssessment, UserDetail, UserSummary


class UserDirectory(Protocol):
    """Port for user lookups and risk analysis."""

    async def list_active_users(self) -> list[UserSummary]: ...

    async def get_user_details(self, user_id: str) -> UserDetail: ...

    async def analyze_user_risk(self, user_id: str) -> RiskAssessment: ...
