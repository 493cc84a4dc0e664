"""Grant entities - raw and merged access assignments."""

from dataclasses import dataclass, field

from grantscope.domain.value_objects import SourceType


@dataclass
class Grant:
    """One raw access-assignment row from a single upstream source."""

    source_type: SourceType
    source_name: str
    object_name: str
    field_name: str | None = None
    can_read: bool = False
    can_create: bool = False
    can_edit: bool = False
    can_delete: bool = False
    assigned_by: str | None = None
    assignment_method: str | None = None

    @property
    def is_field_level(self) -> bool:
        return self.field_name is not None


@dataclass(frozen=True)
class MergedGrant:
    """Deduplicated view of every grant sharing one entity key.

    Provenance belongs to the first grant seen for the key; later grants only
    widen the permission flags.
    """

    key: str
    object_name: str
    object_label: str
    field_name: str | None
    source_type: SourceType
    source_name: str
    assigned_by: str | None = None
    assignment_method: str | None = None
    can_read: bool = False
    can_create: bool = False
    can_edit: bool = False
    can_delete: bool = False
    sources: tuple[str, ...] = field(default_factory=tuple)
