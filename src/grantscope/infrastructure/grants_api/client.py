"""HTTP client for the grants-and-remediation service."""

import logging
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from grantscope.application.dto.grant_pages import FieldGrantBatch, ObjectGrantPage
from grantscope.domain.entities import (
    RiskAssessment,
    RoleAssignment,
    SharingRule,
    UserDetail,
    UserSummary,
)
from grantscope.domain.exceptions import NetworkError, RemediationRestriction
from grantscope.domain.value_objects import RemediationAction
from grantscope.infrastructure.grants_api.payloads import (
    ErrorPayload,
    FieldGrantBatchPayload,
    ObjectGrantPagePayload,
    RiskAssessmentPayload,
    RoleAssignmentPayload,
    SharingRulePayload,
    UserDetailPayload,
    UserSummaryPayload,
    coerce_flag,
)

logger = logging.getLogger(__name__)

SELF_REMEDIATION_ERROR_CODE = "SELF_REMEDIATION_NOT_ALLOWED"

M = TypeVar("M", bound=BaseModel)

_system_permissions_adapter = TypeAdapter(dict[str, Any])


def _user_path(user_id: str, *parts: str) -> str:
    return "/".join(["/users", quote(user_id, safe=""), *parts])


class GrantsApiClient:
    """Grant source, user directory and remediation gateway over JSON/HTTP."""

    def __init__(
        self,
        base_url: str,
        api_token: str = "",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if api_token:
            headers["Authorization"] = f"Bearer {api_token}"
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            return await self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as e:
            logger.warning("Grants service request %s %s failed: %s", method, path, e)
            raise NetworkError(f"Grants service is unreachable: {e}") from e

    @staticmethod
    def _error(response: httpx.Response) -> ErrorPayload:
        try:
            return ErrorPayload.model_validate(response.json())
        except (ValueError, PydanticValidationError):
            return ErrorPayload(message=response.text or None)

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        response = await self._send("GET", path, params=params)
        if response.is_error:
            error = self._error(response)
            raise NetworkError(
                error.message or f"Grants service returned HTTP {response.status_code}"
            )
        try:
            return response.json()
        except ValueError as e:
            raise NetworkError("Grants service returned a non-JSON response") from e

    @staticmethod
    def _parse(model: type[M], data: Any) -> M:
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise NetworkError(f"Malformed {model.__name__} from grants service") from e

    async def _get_list(self, model: type[M], path: str) -> list[M]:
        data = await self._get_json(path)
        if not isinstance(data, list):
            raise NetworkError(f"Expected a list of {model.__name__} from grants service")
        return [self._parse(model, item) for item in data]

    # --- UserDirectory ---

    async def list_active_users(self) -> list[UserSummary]:
        users = await self._get_list(UserSummaryPayload, "/users/active")
        return [u.to_domain() for u in users]

    async def get_user_details(self, user_id: str) -> UserDetail:
        data = await self._get_json(_user_path(user_id))
        return self._parse(UserDetailPayload, data).to_domain(user_id)

    async def analyze_user_risk(self, user_id: str) -> RiskAssessment:
        data = await self._get_json(_user_path(user_id, "risk"))
        return self._parse(RiskAssessmentPayload, data).to_domain()

    # --- GrantSource ---

    async def get_object_grants(
        self, user_id: str, page_index: int, page_size: int, term: str
    ) -> ObjectGrantPage:
        data = await self._get_json(
            _user_path(user_id, "object-grants"),
            params={"page": page_index, "page_size": page_size, "term": term or None},
        )
        payload = self._parse(ObjectGrantPagePayload, data)
        return ObjectGrantPage(
            grants=[g.to_domain() for g in payload.grants],
            total=payload.total,
        )

    async def get_field_grants(
        self, user_id: str, continuation_token: str | None, term: str | None
    ) -> FieldGrantBatch:
        data = await self._get_json(
            _user_path(user_id, "field-grants"),
            params={"cursor": continuation_token, "term": term},
        )
        payload = self._parse(FieldGrantBatchPayload, data)
        return FieldGrantBatch(
            grants=[g.to_domain() for g in payload.grants],
            next_token=payload.next_token,
        )

    async def get_system_permissions(self, user_id: str) -> dict[str, bool]:
        data = await self._get_json(_user_path(user_id, "system-permissions"))
        try:
            flags = _system_permissions_adapter.validate_python(data)
        except PydanticValidationError as e:
            raise NetworkError("Malformed system permissions from grants service") from e
        return {name: coerce_flag(value) for name, value in flags.items()}

    async def get_sharing_rules(self, user_id: str) -> list[SharingRule]:
        rules = await self._get_list(SharingRulePayload, _user_path(user_id, "sharing-rules"))
        return [r.to_domain() for r in rules]

    async def get_role_hierarchy(self, user_id: str) -> list[RoleAssignment]:
        roles = await self._get_list(RoleAssignmentPayload, _user_path(user_id, "role-hierarchy"))
        return [r.to_domain() for r in roles]

    # --- RemediationGateway ---

    async def _remediate(self, method: str, path: str, json: Any = None) -> None:
        response = await self._send(method, path, json=json)
        if not response.is_error:
            return
        error = self._error(response)
        if error.error_code == SELF_REMEDIATION_ERROR_CODE:
            logger.info("Grants service refused self-remediation: %s", error.message)
            raise RemediationRestriction()
        raise NetworkError(
            error.message or f"Remediation failed with HTTP {response.status_code}"
        )

    async def apply(self, user_id: str, action: RemediationAction) -> None:
        await self._remediate(
            "POST", _user_path(user_id, "remediations"), json={"action": str(action)}
        )

    async def undo(self, user_id: str, action: RemediationAction) -> None:
        await self._remediate("DELETE", _user_path(user_id, "remediations", str(action)))
