"""
Async Python client for the RAWG gateway.

Consumers talk to the gateway, never to RAWG directly, and get the same
typed models the gateway decodes upstream payloads into.
"""

from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic_settings import BaseSettings, SettingsConfigDict

from service_gateway.app.adapters.decoder import decode
from service_gateway.app.domain.models import Game, Genre, PaginatedResponse, Platform, Screenshot, StoreInfo
from service_gateway.app.domain.query_params import DEFAULT_PAGE_SIZE
from service_gateway.app.domain.status import ApiStatus, HealthStatus
from shared.logging import get_logger


M = TypeVar("M")


class GatewayClientSettings(BaseSettings):
    """Where to find the gateway, read from ``RAWG_GATEWAY_CLIENT_*``."""

    model_config = SettingsConfigDict(
        env_prefix="RAWG_GATEWAY_CLIENT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    base_url: str = "http://localhost:8000"
    timeout_seconds: float = 30.0
    api_key: Optional[str] = None
    api_key_header_name: str = "X-API-Key"


def _page_parameters(page: int, page_size: int) -> Dict[str, Any]:
    # Defaults are left to the gateway
    parameters: Dict[str, Any] = {}
    if page > 1:
        parameters["page"] = page
    if page_size != DEFAULT_PAGE_SIZE:
        parameters["page_size"] = page_size
    return parameters


class GatewayClient:
    """Typed client for the gateway's ``/api`` routes.

    Non-2xx answers raise ``httpx.HTTPStatusError``; bodies that do not match
    the expected model raise ``DecodeError``.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        api_key: Optional[str] = None,
        api_key_header_name: str = "X-API-Key",
        timeout_seconds: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.logger = get_logger("gateway.client")
        headers = {"Accept": "application/json"}
        if api_key:
            headers[api_key_header_name] = api_key
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            headers=headers,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Optional[GatewayClientSettings] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "GatewayClient":
        settings = settings or GatewayClientSettings()
        return cls(
            settings.base_url,
            api_key=settings.api_key,
            api_key_header_name=settings.api_key_header_name,
            timeout_seconds=settings.timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "GatewayClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _get(self, model: Type[M], path: str, parameters: Optional[Dict[str, Any]] = None) -> M:
        response = await self._client.get(path, params=parameters or None)
        if response.is_error:
            self.logger.warning("Gateway request failed", path=path, status_code=response.status_code)
        response.raise_for_status()
        return decode(model, response.content)

    async def get_games(
        self, search: Optional[str] = None, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE
    ) -> PaginatedResponse[Game]:
        parameters = _page_parameters(page, page_size)
        if search:
            parameters = {"search": search, **parameters}
        return await self._get(PaginatedResponse[Game], "/api/games", parameters)

    async def get_game(self, game_id: int) -> Game:
        return await self._get(Game, f"/api/games/{game_id}")

    async def get_game_screenshots(
        self, game_id: int, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE
    ) -> PaginatedResponse[Screenshot]:
        return await self._get(
            PaginatedResponse[Screenshot], f"/api/games/{game_id}/screenshots", _page_parameters(page, page_size)
        )

    async def get_game_additions(
        self, game_id: int, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE
    ) -> PaginatedResponse[Game]:
        """DLCs and editions of a game."""
        return await self._get(
            PaginatedResponse[Game], f"/api/games/{game_id}/additions", _page_parameters(page, page_size)
        )

    async def get_game_stores(
        self, game_id: int, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE
    ) -> PaginatedResponse[StoreInfo]:
        return await self._get(
            PaginatedResponse[StoreInfo], f"/api/games/{game_id}/stores", _page_parameters(page, page_size)
        )

    async def get_platforms(self, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> PaginatedResponse[Platform]:
        return await self._get(PaginatedResponse[Platform], "/api/platforms", _page_parameters(page, page_size))

    async def get_genres(self, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> PaginatedResponse[Genre]:
        return await self._get(PaginatedResponse[Genre], "/api/genres", _page_parameters(page, page_size))

    async def get_status(self) -> ApiStatus:
        return await self._get(ApiStatus, "/api/status")

    async def get_health(self) -> HealthStatus:
        return await self._get(HealthStatus, "/api/status/health")

    async def aclose(self):
        """Close the underlying connection pool."""
        await self._client.aclose()
