"""
Base service class for RAWG gateway services.
"""

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST
from contextlib import asynccontextmanager
from typing import Optional
import time

from shared.config import ServiceConfig, get_config
from shared.logging import clear_context, configure_logging, get_logger, set_request_id
from shared.metrics import get_metrics_collector
from shared.errors import GatewayException, INTERNAL_ERROR_RESPONSE


def _path_template(request: Request) -> str:
    """Route path template (e.g. ``/api/games/{game_id}``), or the raw path."""
    route = request.scope.get("route")
    if route and getattr(route, "path", None):
        return route.path
    return request.url.path


class BaseService:
    """Base service class with common functionality."""

    def __init__(self, service_name: str, port: int, config: Optional[ServiceConfig] = None):
        self.service_name = service_name
        self.port = port
        self.config = config or get_config(service_name, port)
        self.logger = get_logger(service_name)
        self.metrics = get_metrics_collector(service_name)

        configure_logging(service_name, self.config.log_level)

        self.app = self._create_app()
        self._setup_middleware()
        self._setup_routes()

    def _create_app(self) -> FastAPI:
        """Create FastAPI application."""

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            self.logger.info("Service starting", service=self.service_name, port=self.port)
            yield
            await self._on_shutdown()
            self.logger.info("Service stopped", service=self.service_name)

        return FastAPI(
            title=f"{self.service_name.title()} Service",
            description=f"RAWG Gateway - {self.service_name.title()} Service",
            version="1.0.0",
            docs_url="/docs" if self.config.env == "local" else None,
            redoc_url="/redoc" if self.config.env == "local" else None,
            lifespan=lifespan,
        )

    def _setup_middleware(self):
        """Set up middleware.

        Middleware added later wraps middleware added earlier, so subclasses
        that need to run inside timing and CORS add theirs before calling
        this.
        """

        # Request timing middleware
        @self.app.middleware("http")
        async def add_request_timing(request: Request, call_next):
            request_id = set_request_id(request.headers.get("X-Request-ID"))
            start_time = time.time()
            # Unhandled exceptions surface as a 500 from the outer error middleware
            status_code = 500

            try:
                response = await call_next(request)
                status_code = response.status_code
                response.headers["X-Request-ID"] = request_id
                return response
            finally:
                duration = time.time() - start_time
                endpoint = _path_template(request)
                self.metrics.record_http_request(
                    method=request.method,
                    endpoint=endpoint,
                    status_code=status_code,
                    duration=duration
                )

                self.logger.info(
                    "HTTP request",
                    method=request.method,
                    path=endpoint,
                    status_code=status_code,
                    duration_ms=round(duration * 1000, 2)
                )
                clear_context()

        if self.config.cors_enabled:
            self.app.add_middleware(
                CORSMiddleware,
                allow_origins=self.config.cors_allowed_origins,
                allow_credentials=self.config.cors_allow_credentials,
                allow_methods=self.config.cors_allowed_methods,
                allow_headers=self.config.cors_allowed_headers,
            )

    def _setup_routes(self):
        """Set up common routes."""

        @self.app.get("/metrics", include_in_schema=False)
        async def metrics_endpoint():
            """Prometheus metrics endpoint."""
            return Response(
                content=self.metrics.export(),
                media_type=CONTENT_TYPE_LATEST
            )

        # Error handlers
        @self.app.exception_handler(GatewayException)
        async def gateway_exception_handler(request: Request, exc: GatewayException):
            """Handle GatewayException."""
            self.logger.error(
                "Access layer error",
                code=exc.code,
                message=exc.message,
                details=exc.details,
                path=request.url.path,
            )
            self.metrics.record_error(exc.code)
            return JSONResponse(
                status_code=exc.status_code,
                content=exc.to_response().model_dump(exclude_none=True)
            )

        @self.app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            """Handle general exceptions."""
            self.logger.error("Unhandled exception", error=str(exc), path=request.url.path, exc_info=True)
            self.metrics.record_error("INTERNAL_ERROR")
            return JSONResponse(
                status_code=500,
                content=INTERNAL_ERROR_RESPONSE.model_dump(exclude_none=True)
            )

    async def _on_shutdown(self):
        """Release service resources. Override in subclasses."""

    def run(self):
        """Run the service."""
        import uvicorn
        uvicorn.run(
            self.app,
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level.lower()
        )
