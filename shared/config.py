"""
Shared configuration management for the guidance gateway.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="GUIDANCE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Upstream content API
    upstream_base_url: str = Field(default="https://www.gov.uk")
    public_site_url: str = Field(default="https://www.gov.uk")
    upstream_timeout_seconds: float = Field(default=10.0, gt=0)

    # Resiliency
    upstream_max_retries: int = Field(default=3, ge=0)
    upstream_retry_base_delay: float = Field(default=0.2, ge=0)

    # Provenance
    attribution: str = Field(default="Source: GOV.UK, Charity Commission guidance, OGL v3.0")
    disclaimer: str = Field(default="This guidance is not legal advice.")


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str = "guidance"
    port: int = 8080
    host: str = "0.0.0.0"


def get_config(service_name: str = "guidance", **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, **overrides)
