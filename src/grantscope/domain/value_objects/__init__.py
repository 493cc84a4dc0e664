"""Domain value objects."""

from grantscope.domain.value_objects.remediation_action import RemediationAction
from grantscope.domain.value_objects.section import DEFAULT_VISIBLE_SECTIONS, Section
from grantscope.domain.value_objects.source_type import SourceType

__all__ = [
    "DEFAULT_VISIBLE_SECTIONS",
    "RemediationAction",
    "Section",
    "SourceType",
]
