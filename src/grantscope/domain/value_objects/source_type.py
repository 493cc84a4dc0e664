"""Upstream sources an access grant can come from."""

from enum import StrEnum


class SourceType(StrEnum):
    """Where a grant row was assigned."""

    PROFILE = "profile"
    PERMISSION_SET = "permission-set"
    PACKAGE = "package"
