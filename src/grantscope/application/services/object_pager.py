"""Offset pager for object-level grants.

The server owns the total record count; each page is fetched and merged on
its own, so a page never carries rows over from the previous one. Only the
latest request may land: a response is dropped when the selection changed or
when a newer page or search request was issued after it.
"""

import logging
from collections.abc import Iterable

from grantscope.application.ports import GrantSource
from grantscope.application.services.grant_merge import DEFAULT_STRIP_TOKENS, merge_all
from grantscope.application.services.search_gate import SearchDecision, SearchGate
from grantscope.application.services.selection import Selection, SelectionTicket
from grantscope.domain.entities import MergedGrant, PageWindow, SearchState
from grantscope.domain.exceptions import NetworkError

logger = logging.getLogger(__name__)


class ObjectGrantPager:
    """Page-indexed view over a user's object grants."""

    def __init__(
        self,
        grant_source: GrantSource,
        selection: Selection,
        search_gate: SearchGate,
        page_size: int = 100,
        result_cap: int = 2000,
        strip_tokens: Iterable[str] = DEFAULT_STRIP_TOKENS,
    ) -> None:
        self._source = grant_source
        self._selection = selection
        self._gate = search_gate
        self._result_cap = result_cap
        self._strip_tokens = tuple(strip_tokens)
        self._window = PageWindow(page_size=page_size)
        self._search = SearchState(min_length=search_gate.min_length)
        self._grants: list[MergedGrant] = []
        self._epoch = 0

    @property
    def window(self) -> PageWindow:
        return self._window

    @property
    def term(self) -> str:
        return self._search.term

    @property
    def grants(self) -> tuple[MergedGrant, ...]:
        return tuple(self._grants)

    @property
    def is_first_page(self) -> bool:
        return self._window.page_index == 1

    @property
    def is_last_page(self) -> bool:
        return self._window.page_index >= self._window.page_count

    @property
    def is_truncated(self) -> bool:
        """True when the server capped the number of matching records."""
        return self._window.server_total >= self._result_cap

    @property
    def page_info(self) -> str:
        total = self._window.server_total
        if total <= 0:
            return "No records found"
        size = self._window.page_size
        start = (self._window.page_index - 1) * size + 1
        end = min(self._window.page_index * size, total)
        return f"Showing {start}-{end} of {total} records"

    def reset(self) -> None:
        """Forget the current page; the search term survives user switches."""
        self._epoch += 1
        self._window.page_index = 1
        self._window.server_total = 0
        self._grants = []

    async def fetch_page(self) -> bool:
        """Fetch the current page. Returns False when the response was dropped."""
        ticket = self._selection.ticket()
        if ticket is None:
            self.reset()
            return False

        self._epoch += 1
        epoch = self._epoch
        try:
            page = await self._source.get_object_grants(
                ticket.user_id,
                self._window.page_index,
                self._window.page_size,
                self._search.term,
            )
        except NetworkError:
            if not self._is_latest(ticket, epoch):
                logger.debug(
                    "Dropping failed object page superseded by a newer request (%s)", ticket
                )
                return False
            self._grants = []
            self._window.server_total = 0
            raise

        if not self._is_latest(ticket, epoch):
            logger.debug("Dropping object page superseded by a newer request (%s)", ticket)
            return False

        self._grants = list(merge_all(page.grants, strip_tokens=self._strip_tokens).values())
        self._window.server_total = max(page.total, 0)
        return True

    def _is_latest(self, ticket: SelectionTicket, epoch: int) -> bool:
        return epoch == self._epoch and self._selection.is_current(ticket)

    async def next(self) -> bool:
        if self._window.page_index + 1 > self._window.page_count:
            return False
        self._window.page_index += 1
        await self.fetch_page()
        return True

    async def previous(self) -> bool:
        if self._window.page_index <= 1:
            return False
        self._window.page_index -= 1
        await self.fetch_page()
        return True

    async def set_search_term(self, term: str | None) -> SearchDecision:
        """Apply a new filter and restart from page 1, unless the gate rejects it."""
        decision = self._gate.accept(term)
        if not decision.accepted:
            return decision
        self._search.term = decision.term
        self._window.page_index = 1
        self._grants = []
        await self.fetch_page()
        return decision
