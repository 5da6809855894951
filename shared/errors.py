"""
Shared error handling for the RAWG gateway.
"""

from enum import Enum
from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str
    message: Optional[str] = None


INTERNAL_ERROR_RESPONSE = ErrorResponse(error="Internal server error")


class UpstreamFailure(str, Enum):
    """Classification of a failed upstream call."""

    RATE_LIMITED = "rate_limited"
    TRANSIENT_NETWORK = "transient_network"
    NON_RETRYABLE_STATUS = "non_retryable_status"
    PROTOCOL_ERROR = "protocol_error"
    RETRIES_EXHAUSTED = "retries_exhausted"


class DenialReason(str, Enum):
    """Why the admission gate rejected a request."""

    MISSING_CREDENTIAL = "missing_credential"
    INVALID_CREDENTIAL = "invalid_credential"


DENIAL_MESSAGES = {
    DenialReason.MISSING_CREDENTIAL: "API key is required",
    DenialReason.INVALID_CREDENTIAL: "Invalid API key",
}


class GatewayException(Exception):
    """Base exception for gateway errors."""

    status_code = 500

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to the opaque response returned to callers."""
        return INTERNAL_ERROR_RESPONSE


class ExternalServiceError(GatewayException):
    """External service errors."""

    def __init__(self, service: str, message: str = "External service error", details: Optional[Dict[str, Any]] = None):
        super().__init__("EXTERNAL_SERVICE_ERROR", f"{service}: {message}", details)


class UpstreamError(ExternalServiceError):
    """A RAWG call that could not produce a usable response."""

    classification: UpstreamFailure

    def __init__(
        self,
        endpoint: str,
        message: str,
        attempts: int,
        upstream_status: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.endpoint = endpoint
        self.attempts = attempts
        self.upstream_status = upstream_status
        merged = {
            "endpoint": endpoint,
            "attempts": attempts,
            "classification": self.classification.value,
        }
        if upstream_status is not None:
            merged["upstream_status"] = upstream_status
        merged.update(details or {})
        super().__init__("rawg", message, merged)


class NonRetryableStatusError(UpstreamError):
    """Upstream answered with a status that retrying will not fix."""

    classification = UpstreamFailure.NON_RETRYABLE_STATUS

    def __init__(self, endpoint: str, upstream_status: int, attempts: int):
        super().__init__(
            endpoint,
            f"upstream returned status {upstream_status}",
            attempts=attempts,
            upstream_status=upstream_status,
        )


class UpstreamProtocolError(UpstreamError):
    """The HTTP exchange failed in a way no retry will fix (bad encoding, redirect loop)."""

    classification = UpstreamFailure.PROTOCOL_ERROR

    def __init__(self, endpoint: str, error: BaseException, attempts: int):
        self.error = error
        super().__init__(
            endpoint,
            f"upstream exchange failed ({type(error).__name__})",
            attempts=attempts,
            details={"error": type(error).__name__},
        )


class RetriesExhaustedError(UpstreamError):
    """Every allowed attempt hit a retryable failure."""

    classification = UpstreamFailure.RETRIES_EXHAUSTED

    def __init__(
        self,
        endpoint: str,
        last_failure: UpstreamFailure,
        attempts: int,
        upstream_status: Optional[int] = None,
        last_error: Optional[BaseException] = None,
    ):
        self.last_failure = last_failure
        self.last_error = last_error
        details = {"last_failure": last_failure.value}
        if last_error is not None:
            details["last_error"] = type(last_error).__name__
        super().__init__(
            endpoint,
            f"gave up after {attempts} attempts ({last_failure.value})",
            attempts=attempts,
            upstream_status=upstream_status,
            details=details,
        )


class DecodeError(GatewayException):
    """Upstream body could not be decoded into the expected model."""

    def __init__(self, target: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.target = target
        super().__init__("DECODE_ERROR", f"{target}: {message}", details)


class AdmissionDenied(GatewayException):
    """Inbound request rejected by the API key check."""

    status_code = 401

    def __init__(self, reason: DenialReason):
        self.reason = reason
        super().__init__("UNAUTHORIZED", DENIAL_MESSAGES[reason], {"reason": reason.value})

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error="Unauthorized", message=self.message)
