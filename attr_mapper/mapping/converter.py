"""Converter discovery and invocation.

Reads a converter's declared (source, target) pair and decides, from the
types in play, whether ``convert_to`` or ``convert_from`` applies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, get_args

from attr_mapper.core.enums import ConverterDirection
from attr_mapper.core.exceptions import (
    ConverterContractMissing,
    ConverterMismatch,
    IrreversibleConversion,
)
from attr_mapper.mapping.coercion import is_union, runtime_class, unwrap_optional
from attr_mapper.mapping.protocol import declared_types


@dataclass(frozen=True)
class ConverterDescriptor:
    """A converter instance together with its declared types.

    Equality ignores the instance, so descriptors for the same converter
    class compare equal across plan rebuilds.
    """

    converter_type: type
    source_type: Any
    target_type: Any
    reversible: bool = True
    converter: Any = field(default=None, compare=False, repr=False)

    @property
    def name(self) -> str:
        return self.converter_type.__name__

    def forward(self, value: Any) -> Any:
        return self.converter.convert_to(value)

    def backward(self, value: Any) -> Any:
        if not self.reversible:
            raise IrreversibleConversion(self.name, self.source_type, self.target_type)
        return self.converter.convert_from(value)


def _implements_contract(obj: Any) -> bool:
    return callable(getattr(obj, "convert_to", None)) and callable(
        getattr(obj, "convert_from", None)
    )


def describe_converter(ref: Any) -> ConverterDescriptor:
    """Build a ConverterDescriptor from a converter class or instance.

    Raises:
        ConverterContractMissing: If the converter lacks ``convert_to`` /
            ``convert_from``, cannot be instantiated, or declares no types.
    """
    if isinstance(ref, type):
        converter_type = ref
        if not _implements_contract(ref):
            raise ConverterContractMissing(
                ref, "must implement convert_to and convert_from (PropertyConverter[S, D])"
            )
        try:
            converter = ref()
        except TypeError as e:
            raise ConverterContractMissing(ref, f"cannot be instantiated: {e}") from e
    else:
        converter = ref
        converter_type = type(ref)
        if not _implements_contract(ref):
            raise ConverterContractMissing(
                converter_type,
                "must implement convert_to and convert_from (PropertyConverter[S, D])",
            )

    declared = declared_types(converter_type)
    if declared is None:
        source_type = getattr(converter, "source_type", None)
        target_type = getattr(converter, "target_type", None)
        if source_type is None or target_type is None:
            raise ConverterContractMissing(
                converter_type, "does not declare its source and target types"
            )
        declared = (source_type, target_type)

    return ConverterDescriptor(
        converter_type=converter_type,
        source_type=declared[0],
        target_type=declared[1],
        reversible=bool(getattr(converter, "reversible", True)),
        converter=converter,
    )


def known(tp: Any) -> Any:
    """Map ``Any`` to None (type not known)."""
    return None if tp is Any else tp


def is_compatible(actual: Any, expected: Any) -> bool:
    """Check whether values of ``actual`` type can stand in for ``expected``.

    Matches identity, subclassing, and generic aggregates of the same shape
    (``tuple`` vs ``tuple[str, str]``) regardless of element types.
    """
    if actual is None or expected is None or actual is Any:
        return False
    if expected is Any:
        return True

    actual = unwrap_optional(actual)
    expected = unwrap_optional(expected)
    if actual == expected:
        return True
    if is_union(expected):
        return any(is_compatible(actual, member) for member in get_args(expected))
    if is_union(actual):
        return any(is_compatible(member, expected) for member in get_args(actual))

    actual_cls = runtime_class(actual)
    expected_cls = runtime_class(expected)
    if actual_cls is None or expected_cls is None:
        return False
    return issubclass(actual_cls, expected_cls)


def infer_direction(
    descriptor: ConverterDescriptor,
    value_type: Any,
    destination_type: Any = None,
) -> ConverterDirection | None:
    """Pick the converter half that fits the types in play.

    With no destination type only the value type is considered. Returns
    None when neither direction fits.
    """
    source_type, target_type = descriptor.source_type, descriptor.target_type
    destination_type = known(destination_type)

    if destination_type is None:
        if is_compatible(value_type, source_type):
            return ConverterDirection.FORWARD
        if is_compatible(value_type, target_type):
            return ConverterDirection.BACKWARD
        return None

    if is_compatible(value_type, source_type) and is_compatible(destination_type, target_type):
        return ConverterDirection.FORWARD
    if is_compatible(value_type, target_type) and is_compatible(destination_type, source_type):
        return ConverterDirection.BACKWARD
    return None


def invoke(
    value: Any,
    descriptor: ConverterDescriptor,
    source_type_hint: Any = None,
    target_type_hint: Any = None,
    direction: ConverterDirection | None = None,
) -> Any:
    """Run a converter on ``value``.

    The direction is inferred from the runtime types unless given.

    Raises:
        ConverterMismatch: If neither direction fits.
        IrreversibleConversion: If a one-way converter would run backward.
    """
    if direction is None:
        value_type = source_type_hint if source_type_hint is not None else type(value)
        direction = infer_direction(descriptor, value_type, target_type_hint)
        if direction is None:
            raise ConverterMismatch(
                descriptor.name,
                descriptor.source_type,
                descriptor.target_type,
                value_type,
                known(target_type_hint),
            )

    if direction is ConverterDirection.FORWARD:
        return descriptor.forward(value)
    return descriptor.backward(value)
