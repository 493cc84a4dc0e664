"""Search gate - validates a search term before it may trigger a fetch."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AcceptedSearch:
    """Normalized term that may be sent to the grants service."""

    term: str

    @property
    def accepted(self) -> bool:
        return True


@dataclass(frozen=True)
class RejectedSearch:
    """Term refused without making any call."""

    term: str
    reason: str

    @property
    def accepted(self) -> bool:
        return False


SearchDecision = AcceptedSearch | RejectedSearch


class SearchGate:
    """Rejects short non-empty terms that would trigger broad server scans."""

    def __init__(self, min_length: int = 3) -> None:
        self._min_length = min_length

    @property
    def min_length(self) -> int:
        return self._min_length

    def accept(self, term: str | None) -> SearchDecision:
        """Trim the term; empty clears filtering, short terms are rejected."""
        normalized = (term or "").strip()
        if 0 < len(normalized) < self._min_length:
            return RejectedSearch(
                term=normalized,
                reason=f"Enter at least {self._min_length} characters to search",
            )
        return AcceptedSearch(term=normalized)
