"""Aggregate composition and decomposition.

Composition packs several source values into the single input a converter
expects; decomposition splits one converter result across several target
properties.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, get_args, get_origin

from attr_mapper.core.exceptions import ArityMismatch, UnsupportedAggregateShape
from attr_mapper.mapping.coercion import coerce, runtime_class, unwrap_optional

_TEXT_TYPES = (str, bytes, bytearray)


def input_arity(input_type: Any) -> int | None:
    """Arity of a fixed-length ``tuple[...]`` type, else None."""
    input_type = unwrap_optional(input_type)
    if get_origin(input_type) is not tuple:
        return None
    args = get_args(input_type)
    if not args or Ellipsis in args or args == ((),):
        return None
    return len(args)


def _is_sequence_type(input_type: Any) -> bool:
    cls = runtime_class(unwrap_optional(input_type))
    if cls is None or issubclass(cls, _TEXT_TYPES):
        return False
    return issubclass(cls, Sequence)


def composed_type(input_type: Any) -> type | None:
    """Runtime class compose() produces for ``input_type``, if it packs values."""
    if input_arity(input_type) is not None:
        return tuple
    if _is_sequence_type(input_type):
        cls = runtime_class(unwrap_optional(input_type))
        return tuple if cls is not None and issubclass(cls, tuple) else list
    return None


def compose(values: Sequence[Any], input_type: Any) -> Any:
    """Pack values into the shape a converter expects as input.

    Raises:
        ArityMismatch: If a fixed-length tuple input gets a different count.
    """
    values = list(values)
    arity = input_arity(input_type)
    if arity is not None:
        if arity != len(values):
            raise ArityMismatch(arity, len(values), "converter input tuple")
        return tuple(values)

    if _is_sequence_type(input_type):
        args = get_args(unwrap_optional(input_type))
        element_type = args[0] if args else Any
        items = [coerce(value, element_type) for value in values]
        if composed_type(input_type) is tuple:
            return tuple(items)
        return items

    if len(values) == 1:
        return values[0]
    return values


def decompose(value: Any, target_names: Sequence[str]) -> list[tuple[str, Any]]:
    """Split an aggregate value into ``(name, value)`` pairs, in order.

    Raises:
        UnsupportedAggregateShape: If the value is not a tuple or sequence.
        ArityMismatch: If the element count differs from ``len(target_names)``.
    """
    if isinstance(value, (*_TEXT_TYPES, Mapping)) or not isinstance(value, Sequence):
        raise UnsupportedAggregateShape(type(value))
    # Named tuples unpack in field order
    items = list(value)

    if len(items) != len(target_names):
        raise ArityMismatch(
            len(target_names),
            len(items),
            f"converter returned {len(items)} values for {len(target_names)} target properties",
        )
    return list(zip(target_names, items))
