"""
Domain utilities for the Gateway Service.

Includes the API key admission middleware, inbound query parameter
handling, RAWG response models, and status reporting.
"""

from .api_key_middleware import AdmissionDecision, AdmissionGate, ApiKeyMiddleware
from .status import StatusReporter

__all__ = [
    "AdmissionDecision",
    "AdmissionGate",
    "ApiKeyMiddleware",
    "StatusReporter",
]
