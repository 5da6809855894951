"""
Status and health reporting for Gateway.
"""

from datetime import datetime, timezone
from typing import Dict

from pydantic import BaseModel, Field

from shared.config import BaseConfig
from shared.errors import UpstreamError
from shared.logging import get_logger


SERVICE_VERSION = "1.0.0"

STATUS_OK = "OK"
STATUS_DEGRADED = "Degraded"
RAWG_CONNECTED = "Connected"
RAWG_ERROR = "Error"
RAWG_NOT_CONFIGURED = "Not Configured"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ApiStatus(BaseModel):
    status: str
    timestamp: datetime = Field(default_factory=_utcnow)
    version: str = SERVICE_VERSION
    rawg_api_configured: bool
    rawg_api_status: str
    api_key_authentication_enabled: bool
    valid_api_keys_count: int


class HealthStatus(BaseModel):
    status: str = "Healthy"
    timestamp: datetime = Field(default_factory=_utcnow)
    checks: Dict[str, str] = Field(default_factory=dict)


class StatusReporter:
    """Builds the payloads served by the status routes."""

    def __init__(self, config: BaseConfig, rawg_client):
        self.config = config
        self.rawg_client = rawg_client
        self.logger = get_logger("gateway.status")

    async def probe_rawg(self) -> str:
        """One minimal forwarded call to check upstream connectivity."""
        if not self.config.rawg_api_configured:
            return RAWG_NOT_CONFIGURED
        try:
            await self.rawg_client.get("games", {"page_size": "1"})
        except UpstreamError as e:
            self.logger.warning(
                "RAWG connectivity check failed",
                classification=e.classification.value,
                attempts=e.attempts,
            )
            return RAWG_ERROR
        return RAWG_CONNECTED

    async def status(self) -> ApiStatus:
        rawg_status = await self.probe_rawg()
        return ApiStatus(
            status=STATUS_DEGRADED if rawg_status == RAWG_ERROR else STATUS_OK,
            rawg_api_configured=self.config.rawg_api_configured,
            rawg_api_status=rawg_status,
            api_key_authentication_enabled=self.config.require_api_key,
            valid_api_keys_count=len(self.config.valid_api_keys),
        )

    def health(self) -> HealthStatus:
        """Local configuration flags only; never calls upstream."""
        return HealthStatus(
            checks={
                "rawg_api_configured": "OK" if self.config.rawg_api_configured else RAWG_NOT_CONFIGURED,
                "api_key_auth": "Enabled" if self.config.require_api_key else "Disabled",
            }
        )
