"""System-level, sharing and role access entities."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SystemPermission:
    """One system permission and whether the user holds it."""

    name: str
    enabled: bool

    @property
    def label(self) -> str:
        return self.name.replace("_", " ")

    @property
    def status(self) -> str:
        return "Enabled" if self.enabled else "Disabled"


@dataclass
class SharingRule:
    """Record access granted to the user through a sharing rule."""

    object_name: str
    sharing_type: str
    access_level: str
    shared_with: str


@dataclass
class RoleAssignment:
    """One role in the user's role hierarchy path."""

    role_name: str
    parent_role: str | None
    access_level: str
