"""Grant page DTOs returned by the grant source."""

from dataclasses import dataclass, field

from grantscope.domain.entities import Grant


@dataclass
class ObjectGrantPage:
    """One page of object-level grants and the server's total count."""

    grants: list[Grant] = field(default_factory=list)
    total: int = 0


@dataclass
class FieldGrantBatch:
    """One batch of field-level grants and the token for the next batch."""

    grants: list[Grant] = field(default_factory=list)
    next_token: str | None = None
