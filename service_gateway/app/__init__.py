"""
API Gateway Service package for the RAWG Gateway.

The gateway re-exposes read-only RAWG endpoints, enforcing:
- Admission: optional API key check on every non-exempt route
- Credential injection: the upstream RAWG key never leaves the service
- Retries with exponential backoff on 429s and transport failures

Structure:
- app.main: FastAPI app, routes, and middleware wiring.
- app.adapters: RAWG HTTP client, URL builder, and payload decoding.
- app.domain: Admission middleware, query parameters, models, and status.
"""
