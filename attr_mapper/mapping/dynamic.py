"""Dynamic projection into an untyped property bag."""

from __future__ import annotations

from typing import Any

from attr_mapper.core.exceptions import MappingException
from attr_mapper.mapping.catalog import describe_type, readable

# Target types that request a projection instead of a typed mapping
DYNAMIC_TARGETS: tuple[type, ...] = (object, dict)


def is_dynamic_target(target_type: Any) -> bool:
    return target_type in DYNAMIC_TARGETS


def project(source: Any, source_type: type | None = None) -> dict[str, Any]:
    """Read every readable property of ``source`` into an ordered dict.

    Properties whose value is None are omitted.

    Raises:
        MappingException: If reading a property fails.
    """
    catalog = readable(describe_type(source_type or type(source)))
    bag: dict[str, Any] = {}
    for name in catalog:
        try:
            value = getattr(source, name)
        except Exception as e:
            raise MappingException(name, e) from e
        if value is not None:
            bag[name] = value
    return bag
