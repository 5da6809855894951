"""
Shared utilities for the RAWG Gateway.

This package aggregates common building blocks consumed by services:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- retry: Retry budget and backoff schedule
- base_service: FastAPI app skeleton shared by services

Any cross-service logic should live here to avoid import cycles across
service packages. Do not import from service packages into shared/.
"""
