"""Grant source port - grant rows computed by the grants service."""

from typing import Protocol

from grantscope.application.dto.grant_pages import FieldGrantBatch, ObjectGrantPage
from grantscope.domain.entities import RoleAssignment, SharingRule


class GrantSource(Protocol):
    """Port for reading a user's already-computed access grants."""

    async def get_object_grants(
        self, user_id: str, page_index: int, page_size: int, term: str
    ) -> ObjectGrantPage: ...

    async def get_field_grants(
        self, user_id: str, continuation_token: str | None, term: str | None
    ) -> FieldGrantBatch: ...

    async def get_system_permissions(self, user_id: str) -> dict[str, bool]: ...

    async def get_sharing_rules(self, user_id: str) -> list[SharingRule]: ...

    async def get_role_hierarchy(self, user_id: str) -> list[RoleAssignment]: ...
