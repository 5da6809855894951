"""
Typed decoding of upstream payloads.
"""

from functools import lru_cache
from typing import Any, Type, TypeVar, Union

from pydantic import TypeAdapter, ValidationError

from shared.errors import DecodeError
from shared.logging import get_logger


M = TypeVar("M")

logger = get_logger("gateway.decoder")


@lru_cache(maxsize=None)
def _adapter(model: Any) -> TypeAdapter:
    return TypeAdapter(model)


def _target_name(model: Any) -> str:
    return getattr(model, "__name__", None) or repr(model)


def decode(model: Type[M], payload: Union[bytes, str]) -> M:
    """Parse a JSON payload into ``model``.

    Missing fields fall back to their defaults. Malformed JSON or a value of
    the wrong type raises ``DecodeError``; nothing here touches the network.
    """
    try:
        return _adapter(model).validate_json(payload)
    except ValidationError as e:
        target = _target_name(model)
        logger.error(
            "Failed to decode upstream payload",
            target=target,
            error_count=e.error_count(),
            first_error=e.errors(include_url=False, include_input=False)[0]["msg"] if e.error_count() else None,
        )
        raise DecodeError(target, "payload did not match the expected shape", {"errors": e.error_count()}) from e
