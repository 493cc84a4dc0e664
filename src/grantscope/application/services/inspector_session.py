"""Inspector session - the load orchestrator for one operator's screen.

Selecting a user fetches the user's details first, then fans out the
independent loads concurrently. Every section degrades on its own: a failed
load empties that section and leaves a notice, nothing else is touched.
Responses that arrive after a newer selection are dropped.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable

from grantscope.application.dto.snapshots import (
    FieldGrantsView,
    Notice,
    NoticeLevel,
    ObjectGrantsView,
    RemediationView,
    SessionSnapshot,
)
from grantscope.application.ports import GrantSource, RemediationGateway, UserDirectory
from grantscope.application.services.field_pager import FieldGrantPager
from grantscope.application.services.grant_merge import DEFAULT_STRIP_TOKENS
from grantscope.application.services.object_pager import ObjectGrantPager
from grantscope.application.services.remediation_tracker import RemediationTracker
from grantscope.application.services.search_gate import SearchDecision, SearchGate
from grantscope.application.services.selection import Selection, SelectionTicket
from grantscope.domain.entities import (
    MergedGrant,
    RemediationRecord,
    RiskAssessment,
    RoleAssignment,
    SharingRule,
    SystemPermission,
    UserDetail,
)
from grantscope.domain.exceptions import NetworkError, ValidationError
from grantscope.domain.value_objects import DEFAULT_VISIBLE_SECTIONS, RemediationAction, Section

logger = logging.getLogger(__name__)

# Loaded on every selection; the other sections load when first shown.
EAGER_SECTIONS = (Section.OBJECTS, Section.FIELDS, Section.SYSTEM_PERMISSIONS)


class InspectorSession:
    """Owns all mutable inspector state for one operator."""

    def __init__(
        self,
        grant_source: GrantSource,
        user_directory: UserDirectory,
        remediation_gateway: RemediationGateway,
        *,
        object_page_size: int = 100,
        field_page_size: int = 100,
        search_min_length: int = 3,
        result_cap: int = 2000,
        strip_tokens: Iterable[str] = DEFAULT_STRIP_TOKENS,
    ) -> None:
        self._source = grant_source
        self._directory = user_directory
        self._selection = Selection()
        self._gate = SearchGate(min_length=search_min_length)
        self._objects = ObjectGrantPager(
            grant_source,
            self._selection,
            self._gate,
            page_size=object_page_size,
            result_cap=result_cap,
            strip_tokens=strip_tokens,
        )
        self._fields = FieldGrantPager(
            grant_source,
            self._selection,
            self._gate,
            page_size=field_page_size,
            strip_tokens=strip_tokens,
        )
        self._remediation = RemediationTracker(remediation_gateway)

        self._user: UserDetail | None = None
        self._risk = RiskAssessment()
        self._system_permissions: tuple[SystemPermission, ...] = ()
        self._sharing_rules: tuple[SharingRule, ...] = ()
        self._role_hierarchy: tuple[RoleAssignment, ...] = ()
        self._visible: set[Section] = set(DEFAULT_VISIBLE_SECTIONS)
        self._loaded: set[Section] = set()
        self._notices: list[Notice] = []

        self._section_loaders: dict[Section, Callable[[], Awaitable[None]]] = {
            Section.OBJECTS: self._load_objects,
            Section.FIELDS: self._load_fields,
            Section.SYSTEM_PERMISSIONS: self._load_system_permissions,
            Section.SHARING_RULES: self._load_sharing_rules,
            Section.ROLE_HIERARCHY: self._load_role_hierarchy,
        }

    @property
    def user_id(self) -> str | None:
        return self._selection.user_id

    @property
    def objects(self) -> ObjectGrantPager:
        return self._objects

    @property
    def fields(self) -> FieldGrantPager:
        return self._fields

    @property
    def remediation(self) -> RemediationTracker:
        return self._remediation

    # --- selection ---

    async def select_user(self, user_id: str | None) -> None:
        """Switch to a user and reload every eager and visible section."""
        if not user_id:
            raise ValidationError("Select a user to inspect")
        self._selection.select(user_id)
        self._clear_user_state()
        ticket = self._selection.ticket()
        logger.info("Loading access data for user %s", user_id)

        await self._load_user_details(ticket)
        if not self._selection.is_current(ticket):
            return

        sections = [*EAGER_SECTIONS]
        sections += [s for s in self._visible if s not in EAGER_SECTIONS]
        self._loaded.update(sections)
        await asyncio.gather(
            self._load_risk(ticket),
            *(self._section_loaders[s]() for s in sections),
        )

    async def refresh(self) -> None:
        """Reload everything for the current user."""
        if self._selection.user_id is not None:
            await self.select_user(self._selection.user_id)

    def _clear_user_state(self) -> None:
        self._user = None
        self._risk = RiskAssessment()
        self._system_permissions = ()
        self._sharing_rules = ()
        self._role_hierarchy = ()
        self._loaded.clear()
        self._objects.reset()
        self._fields.reset()

    # --- sections ---

    @property
    def visible_sections(self) -> frozenset[Section]:
        return frozenset(self._visible)

    async def toggle_section(self, section: Section | str) -> bool:
        """Show or hide a section, loading it when shown until a load succeeds."""
        try:
            section = Section(section)
        except ValueError as e:
            raise ValidationError(f"Unknown section: {section}") from e

        if section in self._visible:
            self._visible.discard(section)
            return False

        self._visible.add(section)
        if self._selection.user_id is not None and section not in self._loaded:
            self._loaded.add(section)
            await self._section_loaders[section]()
        return True

    # --- loaders ---

    async def _load_user_details(self, ticket: SelectionTicket) -> None:
        try:
            user = await self._directory.get_user_details(ticket.user_id)
        except NetworkError as e:
            if self._selection.is_current(ticket):
                self._fail("User Details Error", e)
            return
        if self._selection.is_current(ticket):
            self._user = user

    async def _load_risk(self, ticket: SelectionTicket) -> None:
        try:
            risk = await self._directory.analyze_user_risk(ticket.user_id)
        except NetworkError as e:
            if self._selection.is_current(ticket):
                self._risk = RiskAssessment()
                self._fail("Risk Analysis Error", e)
            return
        if self._selection.is_current(ticket):
            self._risk = risk

    async def _load_objects(self) -> None:
        try:
            await self._objects.fetch_page()
        except NetworkError as e:
            self._fail("Object Permissions Error", e)

    async def _load_fields(self) -> None:
        try:
            await self._fields.fetch_more()
        except NetworkError as e:
            self._fail("Field Permissions Error", e)

    async def _load_system_permissions(self) -> None:
        ticket = self._selection.ticket()
        if ticket is None:
            return
        try:
            flags = await self._source.get_system_permissions(ticket.user_id)
        except NetworkError as e:
            if self._selection.is_current(ticket):
                self._system_permissions = ()
                self._fail("System Permissions Error", e)
            return
        if self._selection.is_current(ticket):
            self._system_permissions = tuple(
                SystemPermission(name=name, enabled=enabled is True)
                for name, enabled in flags.items()
            )

    async def _load_sharing_rules(self) -> None:
        ticket = self._selection.ticket()
        if ticket is None:
            return
        try:
            rules = await self._source.get_sharing_rules(ticket.user_id)
        except NetworkError as e:
            if self._selection.is_current(ticket):
                self._sharing_rules = ()
                self._loaded.discard(Section.SHARING_RULES)
                self._fail("Sharing Rules Error", e)
            return
        if self._selection.is_current(ticket):
            self._sharing_rules = tuple(rules)

    async def _load_role_hierarchy(self) -> None:
        ticket = self._selection.ticket()
        if ticket is None:
            return
        try:
            roles = await self._source.get_role_hierarchy(ticket.user_id)
        except NetworkError as e:
            if self._selection.is_current(ticket):
                self._role_hierarchy = ()
                self._loaded.discard(Section.ROLE_HIERARCHY)
                self._fail("Role Hierarchy Error", e)
            return
        if self._selection.is_current(ticket):
            self._role_hierarchy = tuple(roles)

    # --- object grants ---

    async def search_objects(self, term: str | None) -> SearchDecision:
        decision = self._gate.accept(term)
        if not decision.accepted:
            self._inform("Search", decision.reason)
            return decision
        try:
            await self._objects.set_search_term(decision.term)
        except NetworkError as e:
            self._fail("Object Permissions Error", e)
        return decision

    async def next_object_page(self) -> bool:
        try:
            return await self._objects.next()
        except NetworkError as e:
            self._fail("Object Permissions Error", e)
            return True

    async def previous_object_page(self) -> bool:
        try:
            return await self._objects.previous()
        except NetworkError as e:
            self._fail("Object Permissions Error", e)
            return True

    # --- field grants ---

    async def search_fields(self, term: str | None) -> SearchDecision:
        decision = self._gate.accept(term)
        if not decision.accepted:
            self._inform("Search", decision.reason)
            return decision
        try:
            await self._fields.reset_and_refetch(decision.term)
        except NetworkError as e:
            self._fail("Field Permissions Error", e)
        return decision

    async def load_more_fields(self) -> bool:
        try:
            return await self._fields.fetch_more()
        except NetworkError as e:
            self._fail("Field Permissions Error", e)
            return False

    async def field_page(self, page_index: int | None = None) -> tuple[MergedGrant, ...]:
        try:
            return await self._fields.page(page_index)
        except NetworkError as e:
            self._fail("Field Permissions Error", e)
            return self._fields.current_page

    # --- remediation ---

    async def apply_remediation(self, action: RemediationAction | str | None) -> RemediationRecord:
        """Apply an action to the selected user, then reload all sections."""
        record = await self._remediation.apply(self._selection.user_id, action)
        self._inform("Remediation", f"Applied {record.action_type} to the selected user")
        await self.refresh()
        return record

    async def undo_remediation(
        self, action: RemediationAction | str | None = None
    ) -> RemediationRecord:
        record = await self._remediation.undo(action)
        self._inform("Remediation", f"Undid {record.action_type}")
        await self.refresh()
        return record

    # --- notices & snapshots ---

    def _fail(self, title: str, error: Exception) -> None:
        logger.warning("%s for user %s: %s", title, self._selection.user_id, error)
        self._notices.append(Notice(level=NoticeLevel.ERROR, title=title, message=str(error)))

    def _inform(self, title: str, message: str) -> None:
        self._notices.append(Notice(level=NoticeLevel.INFO, title=title, message=message))

    def drain_notices(self) -> tuple[Notice, ...]:
        """Hand pending notices to the caller exactly once."""
        notices = tuple(self._notices)
        self._notices.clear()
        return notices

    def snapshot(self) -> SessionSnapshot:
        objects = self._objects
        fields = self._fields
        record = self._remediation.record
        undoable = self._remediation.undoable_action
        return SessionSnapshot(
            user_id=self._selection.user_id,
            user=self._user,
            risk=self._risk,
            objects=ObjectGrantsView(
                grants=objects.grants,
                term=objects.term,
                page_index=objects.window.page_index,
                page_size=objects.window.page_size,
                server_total=objects.window.server_total,
                page_info=objects.page_info,
                is_first_page=objects.is_first_page,
                is_last_page=objects.is_last_page,
                is_truncated=objects.is_truncated,
            ),
            fields=FieldGrantsView(
                grants=fields.current_page,
                term=fields.term,
                page_index=fields.page_index,
                page_size=fields.page_size,
                buffered=len(fields.grants),
                has_more=fields.has_more(),
                page_info=fields.page_info,
                is_first_page=fields.page_index == 1,
                is_last_page=fields.is_last_page,
            ),
            system_permissions=self._system_permissions,
            sharing_rules=self._sharing_rules,
            role_hierarchy=self._role_hierarchy,
            visible_sections=frozenset(self._visible),
            remediation=RemediationView(
                undoable_action=undoable,
                target_user_id=record.target_user_id if undoable else None,
                applied_at=record.applied_at if undoable else None,
            ),
            notices=tuple(self._notices),
        )
