"""Default value coercion.

Aligns a raw value with a property's declared type when no converter
applies. Scalar conversions go through Pydantic's lax validation, so
only value-preserving conversions succeed.
"""

from __future__ import annotations

import functools
import types
import uuid
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Union, get_args, get_origin

from pydantic import TypeAdapter, ValidationError

from attr_mapper.core.exceptions import CoercionError
from attr_mapper.mapping.catalog import split_annotated

_SCALAR_TYPES: tuple[type, ...] = (
    bool,
    int,
    float,
    Decimal,
    datetime,
    date,
    time,
    uuid.UUID,
)


def is_union(tp: Any) -> bool:
    origin = get_origin(tp)
    return origin is Union or origin is types.UnionType


def unwrap_optional(tp: Any) -> Any:
    """Strip Annotated and a None member from ``Optional[T]``.

    Unions with several non-None members are returned as a union.
    """
    tp, _ = split_annotated(tp)
    if not is_union(tp):
        return tp
    members = [arg for arg in get_args(tp) if arg is not type(None)]
    if len(members) == 1:
        return split_annotated(members[0])[0]
    return Union[tuple(members)]


def runtime_class(tp: Any) -> type | None:
    """Class usable with isinstance for a (possibly generic) type."""
    origin = get_origin(tp) or tp
    return origin if isinstance(origin, type) else None


def to_text(value: Any) -> str:
    """Canonical text form of a value."""
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value)


@functools.lru_cache(maxsize=64)
def _adapter(target: type) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def _to_enum(value: Any, target: type[Enum]) -> Enum:
    if isinstance(value, str):
        wanted = value.strip().casefold()
        for name, member in target.__members__.items():
            if name.casefold() == wanted:
                return member
        raise CoercionError(value, target, f"no member named {value!r}")
    if isinstance(value, Enum):
        value = value.value
    try:
        return target(value)
    except ValueError as e:
        raise CoercionError(value, target, str(e)) from e


def _to_scalar(value: Any, target: type) -> Any:
    if target is datetime and isinstance(value, date):
        return datetime.combine(value, time())
    try:
        return _adapter(target).validate_python(value)
    except ValidationError as e:
        raise CoercionError(value, target, e.errors()[0]["msg"]) from e


def coerce(value: Any, target_type: Any) -> Any:
    """Convert ``value`` to ``target_type`` using the default policy.

    Returns None for None. Values that fit no rule pass through unchanged.

    Raises:
        CoercionError: If a supported conversion cannot be performed.
    """
    if value is None:
        return None

    target = unwrap_optional(target_type)
    if target is Any:
        return value

    if is_union(target):
        # Keep the value when any member accepts it
        return value

    target_cls = runtime_class(target)
    if target_cls is None:
        return value

    if isinstance(value, target_cls):
        return value

    if target_cls is str:
        return to_text(value)

    if issubclass(target_cls, Enum):
        return _to_enum(value, target_cls)

    if target_cls in _SCALAR_TYPES:
        return _to_scalar(value, target_cls)

    return value
