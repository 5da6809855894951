"""
RAWG API client for Gateway.

Owns the outbound connection pool and the bounded retry loop. Each attempt
produces an ``AttemptOutcome``; the loop decides what to do next from that
value alone.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Protocol, Type, TypeVar

import httpx

from shared.config import BaseConfig
from shared.errors import NonRetryableStatusError, RetriesExhaustedError, UpstreamFailure, UpstreamProtocolError
from shared.logging import get_logger
from shared.metrics import MetricsCollector
from shared.retry import RetryConfig, Sleep, calculate_delay

from .decoder import decode
from .url_builder import build_url


Parameters = Mapping[str, Optional[str]]
M = TypeVar("M")


class RawgApiService(Protocol):
    """The upstream capability route handlers depend on."""

    async def get(self, endpoint: str, parameters: Optional[Parameters] = None) -> bytes:
        """Return the raw body of a successful GET or raise ``UpstreamError``."""
        ...

    async def get_model(self, model: Type[M], endpoint: str, parameters: Optional[Parameters] = None) -> M:
        """Like ``get``, decoded into ``model``; also raises ``DecodeError``."""
        ...


class AttemptKind(str, Enum):
    """Classification of a single outbound attempt."""
    SUCCESS = "success"
    RATE_LIMITED = "rate_limited"
    TRANSIENT_NETWORK = "transient_network"
    NON_RETRYABLE_STATUS = "non_retryable_status"
    PROTOCOL_ERROR = "protocol_error"


_RETRYABLE = {
    AttemptKind.RATE_LIMITED: UpstreamFailure.RATE_LIMITED,
    AttemptKind.TRANSIENT_NETWORK: UpstreamFailure.TRANSIENT_NETWORK,
}


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of one outbound attempt."""
    attempt: int
    kind: AttemptKind
    status_code: Optional[int] = None
    payload: Optional[bytes] = None
    error: Optional[Exception] = None

    @property
    def retryable(self) -> bool:
        return self.kind in _RETRYABLE


class RawgClient:
    """Client for the RAWG REST API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        retry_config: Optional[RetryConfig] = None,
        timeout_seconds: float = 30.0,
        user_agent: str = "rawg-gateway/1.0",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.base_url = base_url
        self._api_key = api_key
        self.retry_config = retry_config or RetryConfig()
        self.metrics = metrics
        self.logger = get_logger("gateway.rawg_client")
        self._client = httpx.AsyncClient(
            timeout=timeout_seconds,
            headers={"User-Agent": user_agent, "Accept": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: BaseConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Sleep = asyncio.sleep,
        metrics: Optional[MetricsCollector] = None,
    ) -> "RawgClient":
        """Build a client from service configuration."""
        return cls(
            config.rawg_base_url,
            config.rawg_api_key,
            retry_config=RetryConfig(
                max_retries=config.rawg_max_retries,
                base_delay=config.rawg_backoff_unit_seconds,
                sleep=sleep,
            ),
            timeout_seconds=config.rawg_timeout_seconds,
            user_agent=config.rawg_user_agent,
            transport=transport,
            metrics=metrics,
        )

    async def get(self, endpoint: str, parameters: Optional[Parameters] = None) -> bytes:
        """GET ``endpoint`` and return the body, retrying 429s and transport errors.

        Raises:
            NonRetryableStatusError: upstream answered with any other non-2xx status.
            RetriesExhaustedError: the retry budget ran out on retryable failures.
            UpstreamProtocolError: the exchange failed for another httpx reason.
        """
        # The URL carries the credential; only the endpoint is ever logged
        url = build_url(self.base_url, endpoint, self._api_key, parameters)
        resource = endpoint.strip("/").split("/", 1)[0]

        attempt = 0
        while True:
            outcome = await self._attempt(url, endpoint, attempt)
            if self.metrics:
                self.metrics.record_upstream_attempt(resource, outcome.kind.value)

            if outcome.kind is AttemptKind.SUCCESS:
                self.logger.info(
                    "Upstream request succeeded",
                    endpoint=endpoint,
                    attempts=attempt + 1,
                    status_code=outcome.status_code,
                )
                return outcome.payload

            if outcome.kind is AttemptKind.PROTOCOL_ERROR:
                self.logger.error(
                    "Upstream exchange failed",
                    endpoint=endpoint,
                    attempt=attempt,
                    error=type(outcome.error).__name__,
                )
                self._record_failure(UpstreamFailure.PROTOCOL_ERROR)
                raise UpstreamProtocolError(endpoint, outcome.error, attempts=attempt + 1) from outcome.error

            if not outcome.retryable:
                self.logger.error(
                    "Upstream returned non-retryable status",
                    endpoint=endpoint,
                    attempt=attempt,
                    status_code=outcome.status_code,
                )
                self._record_failure(UpstreamFailure.NON_RETRYABLE_STATUS)
                raise NonRetryableStatusError(endpoint, outcome.status_code, attempts=attempt + 1)

            if not self.retry_config.should_retry(attempt):
                self.logger.error(
                    "Upstream retries exhausted",
                    endpoint=endpoint,
                    attempts=attempt + 1,
                    last_outcome=outcome.kind.value,
                    status_code=outcome.status_code,
                )
                self._record_failure(UpstreamFailure.RETRIES_EXHAUSTED)
                raise RetriesExhaustedError(
                    endpoint,
                    _RETRYABLE[outcome.kind],
                    attempts=attempt + 1,
                    upstream_status=outcome.status_code,
                    last_error=outcome.error,
                )

            attempt += 1
            delay = calculate_delay(attempt, self.retry_config)
            self.logger.warning(
                "Upstream attempt failed, backing off",
                endpoint=endpoint,
                attempt=attempt,
                delay=delay,
                outcome=outcome.kind.value,
                status_code=outcome.status_code,
                error=type(outcome.error).__name__ if outcome.error else None,
            )
            if self.metrics:
                self.metrics.record_retry_delay(delay)
            await self.retry_config.sleep(delay)

    async def get_model(self, model: Type[M], endpoint: str, parameters: Optional[Parameters] = None) -> M:
        """GET ``endpoint`` and decode the body into ``model``."""
        payload = await self.get(endpoint, parameters)
        return decode(model, payload)

    async def _attempt(self, url: str, endpoint: str, attempt: int) -> AttemptOutcome:
        self.logger.debug("Upstream attempt", endpoint=endpoint, attempt=attempt)
        try:
            response = await self._client.get(url)
        except httpx.TransportError as e:
            return AttemptOutcome(attempt, AttemptKind.TRANSIENT_NETWORK, error=e)
        except httpx.HTTPError as e:
            return AttemptOutcome(attempt, AttemptKind.PROTOCOL_ERROR, error=e)

        if response.is_success:
            return AttemptOutcome(
                attempt, AttemptKind.SUCCESS, status_code=response.status_code, payload=response.content
            )
        if response.status_code == 429:
            return AttemptOutcome(attempt, AttemptKind.RATE_LIMITED, status_code=429)
        return AttemptOutcome(attempt, AttemptKind.NON_RETRYABLE_STATUS, status_code=response.status_code)

    def _record_failure(self, classification: UpstreamFailure):
        if self.metrics:
            self.metrics.record_upstream_failure(classification.value)

    async def aclose(self):
        """Close the underlying connection pool."""
        await self._client.aclose()
