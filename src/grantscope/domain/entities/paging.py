"""Paging state for object-level and field-level grant views."""

from dataclasses import dataclass, field
from math import ceil

from grantscope.domain.entities.grant import MergedGrant


@dataclass
class PageWindow:
    """Page-indexed window where the server owns the total count."""

    page_size: int
    page_index: int = 1
    server_total: int = 0

    @property
    def page_count(self) -> int:
        if self.server_total <= 0:
            return 0
        return ceil(self.server_total / self.page_size)


@dataclass
class Cursor:
    """Continuation state for server-driven incremental fetches.

    ``continuation_token`` of None means "exhausted" once ``started`` is set.
    """

    continuation_token: str | None = None
    started: bool = False
    buffer: dict[str, MergedGrant] = field(default_factory=dict)

    @property
    def exhausted(self) -> bool:
        return self.started and self.continuation_token is None


@dataclass
class SearchState:
    """Current search term and the minimum length a filter must have."""

    min_length: int = 3
    term: str = ""
