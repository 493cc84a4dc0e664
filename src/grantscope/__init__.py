"""GrantScope - access grant inspection and remediation service."""

__version__ = "0.1.0"
