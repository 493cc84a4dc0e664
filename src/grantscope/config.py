"""Application configuration from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Grants-and-remediation service
    grants_api_url: str = Field(
        default="http://localhost:8081/api",
        description="Base URL of the grants-and-remediation service",
    )
    grants_api_token: str = Field(default="", description="Bearer token for the grants service")
    grants_api_timeout: float = Field(default=30.0, description="Request timeout in seconds")

    # Keycloak OIDC
    keycloak_url: str = Field(
        default="http://localhost:8080",
        description="Keycloak server URL",
    )
    keycloak_realm: str = Field(default="grantscope", description="Keycloak realm")
    keycloak_client_id: str = Field(default="grantscope-api", description="Keycloak client ID")
    keycloak_client_secret: str = Field(default="", description="Keycloak client secret")
    operator_role: str = Field(
        default="access-admin",
        description="Realm role an operator needs to use the inspector",
    )

    # Grant views
    object_page_size: int = Field(default=100, ge=1, description="Object grants per page")
    field_page_size: int = Field(default=100, ge=1, description="Field grants per local page")
    search_min_length: int = Field(
        default=3,
        ge=1,
        description="Shortest non-empty search term sent to the grants service",
    )
    server_result_cap: int = Field(
        default=2000,
        description="Matching-record count above which the grants service truncates results",
    )
    object_name_strip_tokens: list[str] = Field(
        default=["SA_Audit__", "__c"],
        description="Namespace and suffix tokens removed from displayed object names",
    )

    # Application
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Environment name",
    )
    log_level: str = Field(default="INFO", description="Logging level")
    debug: bool = Field(default=False, description="Debug mode")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
