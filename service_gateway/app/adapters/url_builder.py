"""
Outbound URL construction for the RAWG API.
"""

from typing import Mapping, Optional
from urllib.parse import quote


def _escape(component: str) -> str:
    # Only RFC 3986 unreserved characters survive unescaped
    return quote(component, safe="")


def build_url(
    base_path: str,
    endpoint: str,
    credential: str,
    parameters: Optional[Mapping[str, Optional[str]]] = None,
) -> str:
    """Build the absolute upstream URL for ``endpoint``.

    Base and endpoint are joined with exactly one ``/``. The credential goes
    first as ``key=...`` when non-empty, followed by every parameter whose
    value is neither ``None`` nor empty, in insertion order. No query string
    is emitted when nothing remains.
    """
    url = f"{base_path.rstrip('/')}/{endpoint.lstrip('/')}"

    pairs = []
    if credential:
        pairs.append(f"key={_escape(credential)}")

    for name, value in (parameters or {}).items():
        if value is None or value == "":
            continue
        pairs.append(f"{_escape(name)}={_escape(str(value))}")

    if pairs:
        url = f"{url}?{'&'.join(pairs)}"
    return url
