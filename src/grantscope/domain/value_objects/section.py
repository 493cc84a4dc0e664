"""Inspector sections that can be shown or hidden."""

from enum import StrEnum


class Section(StrEnum):
    """Collapsible sections of the inspector view."""

    OBJECTS = "objects"
    FIELDS = "fields"
    SYSTEM_PERMISSIONS = "system-permissions"
    SHARING_RULES = "sharing-rules"
    ROLE_HIERARCHY = "role-hierarchy"


DEFAULT_VISIBLE_SECTIONS = frozenset({Section.FIELDS})
