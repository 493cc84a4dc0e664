"""Domain exceptions."""


class GrantScopeError(Exception):
    """Base exception for GrantScope."""

    pass


class ValidationError(GrantScopeError):
    """Input was rejected before reaching the grants service."""

    pass


class NetworkError(GrantScopeError):
    """A call to the grants service failed."""

    pass


SELF_REMEDIATION_MESSAGE = (
    "Remediation actions cannot be run against your own user. "
    "Ask another administrator to perform this change."
)


class RemediationRestriction(GrantScopeError):
    """Grants service refused the remediation for policy reasons."""

    def __init__(self, message: str = SELF_REMEDIATION_MESSAGE) -> None:
        super().__init__(message)
