"""Grants service HTTP adapter."""

from grantscope.infrastructure.grants_api.client import GrantsApiClient

__all__ = ["GrantsApiClient"]
