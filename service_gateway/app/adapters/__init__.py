"""
Adapters package for the Gateway Service.

Contains the outbound side of the gateway:

- url_builder: absolute RAWG URLs with the injected credential
- rawg_client: the connection pool and bounded retry loop
- decoder: typed decoding of RAWG payloads

Keep adapters thin and side-effect free outside of explicit calls.
"""

from .decoder import decode
from .rawg_client import AttemptKind, AttemptOutcome, RawgApiService, RawgClient
from .url_builder import build_url

__all__ = [
    "AttemptKind",
    "AttemptOutcome",
    "RawgApiService",
    "RawgClient",
    "build_url",
    "decode",
]
