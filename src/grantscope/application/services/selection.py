"""Selected user and the generation counter guarding in-flight fetches."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SelectionTicket:
    """Snapshot of the selection taken when a request is issued."""

    user_id: str
    generation: int


class Selection:
    """Tracks the inspected user.

    Every request captures a ticket before awaiting; a response whose ticket
    is no longer current belongs to an older selection and must be dropped.
    """

    def __init__(self) -> None:
        self._user_id: str | None = None
        self._generation = 0

    @property
    def user_id(self) -> str | None:
        return self._user_id

    @property
    def generation(self) -> int:
        return self._generation

    def select(self, user_id: str | None) -> int:
        """Switch to a new user and invalidate every outstanding ticket."""
        self._user_id = user_id
        self._generation += 1
        return self._generation

    def ticket(self) -> SelectionTicket | None:
        if self._user_id is None:
            return None
        return SelectionTicket(user_id=self._user_id, generation=self._generation)

    def is_current(self, ticket: SelectionTicket) -> bool:
        return ticket.generation == self._generation and ticket.user_id == self._user_id
