"""
API Gateway service fronting the RAWG game database.
"""

from typing import Annotated, Any, Optional, Type, TypeVar

from fastapi import Path, Query

from shared.base_service import BaseService
from shared.config import ServiceConfig

from service_gateway.app.adapters.rawg_client import Parameters, RawgApiService, RawgClient
from service_gateway.app.domain.api_key_middleware import AdmissionGate, ApiKeyMiddleware
from service_gateway.app.domain.models import (
    Game,
    Genre,
    PaginatedResponse,
    Platform,
    Screenshot,
    StoreInfo,
)
from service_gateway.app.domain.query_params import GamesQueryParams, OrderedPageParams, PageParams
from service_gateway.app.domain.status import ApiStatus, HealthStatus, StatusReporter


M = TypeVar("M")

SERVICE_NAME = "gateway"
DEFAULT_PORT = 8000

# Sub-resources of a game that RAWG serves as paginated lists
GAME_SUBRESOURCES = {
    "screenshots": PaginatedResponse[Screenshot],
    "additions": PaginatedResponse[Game],
    "parent-games": PaginatedResponse[Game],
    "game-series": PaginatedResponse[Game],
    "stores": PaginatedResponse[StoreInfo],
}

EntityId = Annotated[int, Path(ge=1)]


class GatewayService(BaseService):
    """API Gateway service implementation."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        rawg_client: Optional[RawgApiService] = None,
    ):
        super().__init__(SERVICE_NAME, DEFAULT_PORT, config)
        self._owns_rawg_client = rawg_client is None
        self.rawg_client = rawg_client or RawgClient.from_config(self.config, metrics=self.metrics)
        self.status_reporter = StatusReporter(self.config, self.rawg_client)

        self._setup_game_routes()
        self._setup_catalog_routes()
        self._setup_status_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.gateway_service = self

    def _setup_middleware(self):
        """Install the API key check innermost, then timing and CORS around it."""
        self.admission_gate = AdmissionGate.from_config(self.config)
        self.app.add_middleware(ApiKeyMiddleware, gate=self.admission_gate, metrics=self.metrics)
        super()._setup_middleware()

    async def _on_shutdown(self):
        if self._owns_rawg_client:
            await self.rawg_client.aclose()

    async def _forward(self, model: Type[M], endpoint: str, parameters: Optional[Parameters] = None) -> M:
        """Call RAWG for ``model``; failures propagate to the error handlers."""
        return await self.rawg_client.get_model(model, endpoint, parameters)

    def _setup_game_routes(self):
        """Set up /api/games routes."""

        @self.app.get("/api/games", response_model=PaginatedResponse[Game],
                      response_model_exclude_unset=True, tags=["games"])
        async def list_games(params: Annotated[GamesQueryParams, Query()]):
            """List games, optionally filtered."""
            return await self._forward(PaginatedResponse[Game], "games", params.to_upstream_parameters())

        @self.app.get("/api/games/{game_id}", response_model=Game,
                      response_model_exclude_unset=True, tags=["games"])
        async def get_game(game_id: EntityId):
            """Get one game's details."""
            return await self._forward(Game, f"games/{game_id}")

        for subresource, model in GAME_SUBRESOURCES.items():
            self.app.add_api_route(
                f"/api/games/{{game_id}}/{subresource}",
                self._game_subresource_handler(subresource, model),
                methods=["GET"],
                response_model=model,
                response_model_exclude_unset=True,
                tags=["games"],
                name=f"get_game_{subresource.replace('-', '_')}",
            )

    def _game_subresource_handler(self, subresource: str, model: Any):
        async def handler(game_id: EntityId, params: Annotated[PageParams, Query()]):
            return await self._forward(model, f"games/{game_id}/{subresource}", params.to_upstream_parameters())

        handler.__doc__ = f"List a game's {subresource.replace('-', ' ')}."
        return handler

    def _setup_catalog_routes(self):
        """Set up /api/platforms and /api/genres routes."""

        for resource, model in (("platforms", Platform), ("genres", Genre)):
            self.app.add_api_route(
                f"/api/{resource}",
                self._catalog_list_handler(resource, model),
                methods=["GET"],
                response_model=PaginatedResponse[model],
                response_model_exclude_unset=True,
                tags=[resource],
                name=f"list_{resource}",
            )
            self.app.add_api_route(
                f"/api/{resource}/{{entity_id}}",
                self._catalog_detail_handler(resource, model),
                methods=["GET"],
                response_model=model,
                response_model_exclude_unset=True,
                tags=[resource],
                name=f"get_{resource}_entity",
            )
            self.app.add_api_route(
                f"/api/{resource}/{{entity_id}}/games",
                self._catalog_games_handler(resource),
                methods=["GET"],
                response_model=PaginatedResponse[Game],
                response_model_exclude_unset=True,
                tags=[resource],
                name=f"list_{resource}_games",
            )

    def _catalog_list_handler(self, resource: str, model: Any):
        async def handler(params: Annotated[OrderedPageParams, Query()]):
            return await self._forward(PaginatedResponse[model], resource, params.to_upstream_parameters())

        handler.__doc__ = f"List {resource}."
        return handler

    def _catalog_detail_handler(self, resource: str, model: Any):
        async def handler(entity_id: EntityId):
            return await self._forward(model, f"{resource}/{entity_id}")

        handler.__doc__ = f"Get one entry from {resource}."
        return handler

    def _catalog_games_handler(self, resource: str):
        async def handler(entity_id: EntityId, params: Annotated[OrderedPageParams, Query()]):
            return await self._forward(
                PaginatedResponse[Game], f"{resource}/{entity_id}/games", params.to_upstream_parameters()
            )

        handler.__doc__ = f"List games for one entry from {resource}."
        return handler

    def _setup_status_routes(self):
        """Set up status routes under /api/status, mirrored at /status."""

        async def get_status() -> ApiStatus:
            """Overall status including a live RAWG connectivity check."""
            return await self.status_reporter.status()

        async def get_health() -> HealthStatus:
            """Configuration health; never calls RAWG."""
            return self.status_reporter.health()

        for prefix, in_schema in (("/api/status", True), ("/status", False)):
            self.app.add_api_route(
                prefix, get_status, methods=["GET"], response_model=ApiStatus,
                tags=["status"], include_in_schema=in_schema, name=f"status{prefix.replace('/', '_')}",
            )
            self.app.add_api_route(
                f"{prefix}/health", get_health, methods=["GET"], response_model=HealthStatus,
                tags=["status"], include_in_schema=in_schema, name=f"health{prefix.replace('/', '_')}",
            )


def create_app(
    config: Optional[ServiceConfig] = None,
    rawg_client: Optional[RawgApiService] = None,
):
    """Create the gateway ASGI application."""
    service = GatewayService(config=config, rawg_client=rawg_client)
    return service.app


if __name__ == "__main__":
    service = GatewayService()
    service.run()
