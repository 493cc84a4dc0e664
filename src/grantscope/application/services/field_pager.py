"""Cursor pager for field-level grants.

Batches arrive behind an opaque continuation token and are merged into one
accumulated buffer, so a later batch can widen the flags of a field that an
earlier batch already returned. Local pages are slices of that buffer. A
batch lands only if no newer fetch or reset happened while it was in flight.
"""

import logging
from collections.abc import Iterable

from grantscope.application.ports import GrantSource
from grantscope.application.services.grant_merge import (
    DEFAULT_STRIP_TOKENS,
    grant_key,
    merge,
)
from grantscope.application.services.search_gate import SearchDecision, SearchGate
from grantscope.application.services.selection import Selection, SelectionTicket
from grantscope.domain.entities import Cursor, MergedGrant, SearchState
from grantscope.domain.exceptions import NetworkError, ValidationError

logger = logging.getLogger(__name__)


class FieldGrantPager:
    """Incrementally fetched, locally paginated view over field grants."""

    def __init__(
        self,
        grant_source: GrantSource,
        selection: Selection,
        search_gate: SearchGate,
        page_size: int = 100,
        strip_tokens: Iterable[str] = DEFAULT_STRIP_TOKENS,
    ) -> None:
        self._source = grant_source
        self._selection = selection
        self._gate = search_gate
        self._page_size = page_size
        self._strip_tokens = tuple(strip_tokens)
        self._cursor = Cursor()
        self._search = SearchState(min_length=search_gate.min_length)
        self._page_index = 1
        self._epoch = 0

    @property
    def cursor(self) -> Cursor:
        return self._cursor

    @property
    def term(self) -> str:
        return self._search.term

    @property
    def page_index(self) -> int:
        return self._page_index

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def grants(self) -> tuple[MergedGrant, ...]:
        return tuple(self._cursor.buffer.values())

    @property
    def current_page(self) -> tuple[MergedGrant, ...]:
        """Slice of the buffer for the current local page, without fetching."""
        start = (self._page_index - 1) * self._page_size
        return self.grants[start : start + self._page_size]

    @property
    def is_last_page(self) -> bool:
        return (
            not self.has_more()
            and self._page_index * self._page_size >= len(self._cursor.buffer)
        )

    @property
    def page_info(self) -> str:
        total = len(self._cursor.buffer)
        if total == 0:
            return "No results"
        start = min((self._page_index - 1) * self._page_size + 1, total)
        end = min(start + self._page_size - 1, total)
        return f"Showing {start}-{end} of {total}"

    def has_more(self) -> bool:
        return self._cursor.continuation_token is not None

    def reset(self) -> None:
        """Drop the accumulated buffer and cursor; the search term survives."""
        self._epoch += 1
        self._cursor = Cursor()
        self._page_index = 1

    def _is_latest(self, ticket: SelectionTicket, epoch: int) -> bool:
        return epoch == self._epoch and self._selection.is_current(ticket)

    async def fetch_more(self) -> bool:
        """Fetch the next batch. No request is made once the cursor is exhausted."""
        if self._cursor.exhausted:
            return False
        ticket = self._selection.ticket()
        if ticket is None:
            return False

        cursor = self._cursor
        self._epoch += 1
        epoch = self._epoch
        try:
            batch = await self._source.get_field_grants(
                ticket.user_id,
                cursor.continuation_token,
                self._search.term or None,
            )
        except NetworkError:
            if not self._is_latest(ticket, epoch):
                logger.debug(
                    "Dropping failed field batch superseded by a newer request (%s)", ticket
                )
                return False
            self._cursor = Cursor(started=True)
            raise

        if not self._is_latest(ticket, epoch):
            logger.debug("Dropping field batch superseded by a newer request (%s)", ticket)
            return False

        for grant in batch.grants:
            key = grant_key(grant.object_name, grant.field_name)
            cursor.buffer[key] = merge(cursor.buffer.get(key), grant, self._strip_tokens)
        cursor.continuation_token = batch.next_token
        cursor.started = True
        return True

    async def reset_and_refetch(self, term: str | None) -> SearchDecision:
        """Apply a new filter: clear buffer and cursor, then fetch the first batch."""
        decision = self._gate.accept(term)
        if not decision.accepted:
            return decision
        self.reset()
        self._search.term = decision.term
        await self.fetch_more()
        return decision

    async def page(self, page_index: int | None = None) -> tuple[MergedGrant, ...]:
        """Return a local page, fetching more batches first when the buffer is short."""
        index = self._page_index if page_index is None else page_index
        if index < 1:
            raise ValidationError("Page index must be at least 1")
        self._page_index = index
        end = index * self._page_size
        while len(self._cursor.buffer) < end and (self.has_more() or not self._cursor.started):
            if not await self.fetch_more():
                break
        return self.current_page

    async def next_page(self) -> bool:
        if self.is_last_page:
            return False
        await self.page(self._page_index + 1)
        return True

    def previous_page(self) -> bool:
        if self._page_index <= 1:
            return False
        self._page_index -= 1
        return True

    def filtered(self, term: str) -> list[MergedGrant]:
        """Case-insensitive match of the accumulated buffer on object or field name."""
        needle = term.strip().lower()
        if not needle:
            return list(self._cursor.buffer.values())
        return [
            grant
            for grant in self._cursor.buffer.values()
            if needle in grant.object_label.lower()
            or needle in (grant.field_name or "").lower()
        ]
