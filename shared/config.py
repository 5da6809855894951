"""
Shared configuration management for the RAWG gateway.
"""

import json
from typing import Annotated, FrozenSet, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _split_csv(value):
    """Accept comma-separated strings for list-valued settings."""
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class BaseConfig(BaseSettings):
    """Base configuration class with common settings.

    Instances are frozen: configuration is built once at startup and handed
    to the components that need it.
    """

    model_config = SettingsConfigDict(
        env_prefix="GATEWAY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Upstream RAWG API
    rawg_base_url: str = Field(default="https://api.rawg.io/api")
    rawg_api_key: str = Field(default="", repr=False)
    rawg_timeout_seconds: float = Field(default=30.0, gt=0)
    rawg_max_retries: int = Field(default=3, ge=0)
    rawg_backoff_unit_seconds: float = Field(default=1.0, ge=0)
    rawg_user_agent: str = Field(default="rawg-gateway/1.0")

    # Inbound API key authentication
    require_api_key: bool = Field(default=False)
    valid_api_keys: Annotated[FrozenSet[str], NoDecode] = Field(default=frozenset(), repr=False)
    api_key_header_name: str = Field(default="X-API-Key")
    api_key_query_parameter_name: str = Field(default="api_key")

    # CORS
    cors_enabled: bool = Field(default=False)
    cors_allowed_origins: Annotated[List[str], NoDecode] = Field(default_factory=list)
    cors_allowed_methods: Annotated[List[str], NoDecode] = Field(default_factory=lambda: ["GET"])
    cors_allowed_headers: Annotated[List[str], NoDecode] = Field(default_factory=lambda: ["Content-Type"])
    cors_allow_credentials: bool = Field(default=False)

    @field_validator(
        "valid_api_keys",
        "cors_allowed_origins",
        "cors_allowed_methods",
        "cors_allowed_headers",
        mode="before",
    )
    @classmethod
    def _parse_list(cls, value):
        if isinstance(value, str) and value.strip().startswith("["):
            return json.loads(value)
        return _split_csv(value)

    @property
    def rawg_api_configured(self) -> bool:
        """True when an upstream credential has been supplied."""
        return bool(self.rawg_api_key)


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
