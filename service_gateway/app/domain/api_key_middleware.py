"""
API key admission middleware for Gateway.

Every inbound request passes through ``AdmissionGate.evaluate`` before it
reaches routing. Exempt paths and a disabled gate always pass; otherwise a
key taken from the configured header (or, failing that, the configured
query parameter) must be in the accepted set.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional, Tuple

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from shared.config import BaseConfig
from shared.errors import AdmissionDenied, DenialReason
from shared.logging import get_logger
from shared.metrics import MetricsCollector


EXEMPT_PATH_PREFIXES: Tuple[str, ...] = (
    "/api/status",
    "/status",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/favicon.ico",
    "/metrics",
)


@dataclass(frozen=True)
class AdmissionDecision:
    """Outcome of checking one inbound request."""
    allowed: bool
    reason: Optional[DenialReason] = None
    api_key: Optional[str] = None
    exempt: bool = False

    @classmethod
    def allow(cls, api_key: Optional[str] = None, exempt: bool = False) -> "AdmissionDecision":
        return cls(allowed=True, api_key=api_key, exempt=exempt)

    @classmethod
    def deny(cls, reason: DenialReason) -> "AdmissionDecision":
        return cls(allowed=False, reason=reason)


def matches_path_prefix(path: str, prefix: str) -> bool:
    """Segment-aware, case-insensitive prefix match.

    ``/api/status`` matches ``/api/status`` and ``/api/status/health`` but
    not ``/api/statusfoo``.
    """
    path = path.lower()
    prefix = prefix.lower().rstrip("/")
    return path == prefix or path.startswith(prefix + "/")


class AdmissionGate:
    """Decides whether an inbound request may proceed."""

    def __init__(
        self,
        require_api_key: bool,
        valid_api_keys: Iterable[str],
        header_name: str = "X-API-Key",
        query_parameter_name: str = "api_key",
        exempt_prefixes: Tuple[str, ...] = EXEMPT_PATH_PREFIXES,
    ):
        self.require_api_key = require_api_key
        self.valid_api_keys: FrozenSet[str] = frozenset(valid_api_keys)
        self.header_name = header_name
        self.query_parameter_name = query_parameter_name
        self.exempt_prefixes = exempt_prefixes

    @classmethod
    def from_config(cls, config: BaseConfig) -> "AdmissionGate":
        return cls(
            require_api_key=config.require_api_key,
            valid_api_keys=config.valid_api_keys,
            header_name=config.api_key_header_name,
            query_parameter_name=config.api_key_query_parameter_name,
        )

    def is_exempt(self, path: str) -> bool:
        return any(matches_path_prefix(path, prefix) for prefix in self.exempt_prefixes)

    def extract_api_key(self, request: Request) -> Optional[str]:
        """Header first, then query parameter. Empty values count as absent."""
        api_key = request.headers.get(self.header_name)
        if api_key:
            return api_key
        return request.query_params.get(self.query_parameter_name) or None

    def evaluate(self, request: Request) -> AdmissionDecision:
        if self.is_exempt(request.url.path):
            return AdmissionDecision.allow(exempt=True)

        if not self.require_api_key:
            return AdmissionDecision.allow()

        api_key = self.extract_api_key(request)
        if api_key is None:
            return AdmissionDecision.deny(DenialReason.MISSING_CREDENTIAL)

        if api_key not in self.valid_api_keys:
            return AdmissionDecision.deny(DenialReason.INVALID_CREDENTIAL)

        return AdmissionDecision.allow(api_key=api_key)


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Rejects requests the admission gate denies with a 401."""

    def __init__(self, app, gate: AdmissionGate, metrics: Optional[MetricsCollector] = None):
        super().__init__(app)
        self.gate = gate
        self.metrics = metrics
        self.logger = get_logger("gateway.api_key_middleware")

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        decision = self.gate.evaluate(request)

        if not decision.allowed:
            denied = AdmissionDenied(decision.reason)
            self.logger.warning(
                "Request rejected by API key check",
                path=request.url.path,
                reason=decision.reason.value,
            )
            if self.metrics:
                self.metrics.record_admission("denied", decision.reason.value)
            return JSONResponse(status_code=401, content=denied.to_response().model_dump(exclude_none=True))

        if decision.api_key is not None:
            request.state.api_key = decision.api_key
            if self.metrics:
                self.metrics.record_admission("allowed", "valid_key")
        elif self.metrics and not decision.exempt:
            self.metrics.record_admission("allowed", "not_required")

        return await call_next(request)
