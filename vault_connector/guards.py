"""
Argument guards shared by every vault operation.

Each guard raises :class:`ValidationError` carrying the offending
property name, so a failure points at the exact argument.
"""
from enum import Enum
from typing import Any, TypeVar

from .exceptions import ValidationError

E = TypeVar("E", bound=Enum)

OBJECT_UNDEFINED = "guard.objectUndefined"
STRING = "guard.string"
ONE_OF = "guard.oneOf"
BYTES = "guard.bytes"
LENGTH = "guard.length"


def guard_object(property: str, value: Any) -> None:
    if value is None:
        raise ValidationError(property, value, OBJECT_UNDEFINED)


def guard_string(property: str, value: Any) -> None:
    """Value must be a non-empty string."""
    if not isinstance(value, str) or not value:
        raise ValidationError(property, value, STRING)


def guard_one_of(property: str, value: Any, options: type[E]) -> E:
    """Value must belong to ``options``; plain values are coerced.

    Returns:
        The matching enum member.
    """
    if isinstance(value, options):
        return value
    try:
        return options(value)
    except ValueError:
        raise ValidationError(property, value, ONE_OF) from None


def guard_bytes(property: str, value: Any) -> None:
    """Value must be a byte sequence (empty is allowed)."""
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise ValidationError(property, value, BYTES)


def guard_length(property: str, value: bytes, length: int) -> None:
    if len(value) != length:
        raise ValidationError(property, len(value), LENGTH)


def guard_request_context(request_context: Any) -> None:
    """Context must exist and carry both tenant and identity."""
    guard_object("request_context", request_context)
    guard_string(
        "request_context.tenant_id",
        getattr(request_context, "tenant_id", None),
    )
    guard_string(
        "request_context.identity",
        getattr(request_context, "identity", None),
    )
