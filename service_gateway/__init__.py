"""
RAWG Gateway service package.

- app: the FastAPI gateway itself.
- client: async client for applications calling the gateway.
"""
