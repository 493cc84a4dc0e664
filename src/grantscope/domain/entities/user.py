"""User entities - directory entries, details and risk assessment."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserSummary:
    """Active user offered in the user picker."""

    user_id: str
    name: str


@dataclass(frozen=True)
class UserDetail:
    """Profile and assignment details of the inspected user."""

    user_id: str
    user_name: str = ""
    email: str = ""
    profile_name: str = ""
    is_active: bool = False
    permission_sets: tuple[str, ...] = ()

    @property
    def status_label(self) -> str:
        return "Active" if self.is_active else "Inactive"


@dataclass(frozen=True)
class RiskAssessment:
    """Access risk analysis computed by the grants service."""

    high_risk_count: int = 0
    risk_score: int = 0
    risk_level: str = "Low"
    critical_findings: tuple[str, ...] = ()
