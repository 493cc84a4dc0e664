"""Application ports - interfaces for external adapters."""

from grantscope.application.ports.grant_source import GrantSource
from grantscope.application.ports.remediation_gateway import RemediationGateway
from grantscope.application.ports.user_directory import UserDirectory

__all__ = [
    "GrantSource",
    "RemediationGateway",
    "UserDirectory",
]
