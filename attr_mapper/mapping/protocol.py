"""Converter contract.

A converter transforms values between one declared source type and one
declared target type. The engine calls ``convert_to`` when mapping in the
declared direction and ``convert_from`` when mapping back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, Protocol, TypeVar, get_args, get_origin
from typing import runtime_checkable

from attr_mapper.core.exceptions import IrreversibleConversion

S = TypeVar("S")
D = TypeVar("D")


@runtime_checkable
class ConverterProtocol(Protocol):
    """Structural converter contract.

    Objects that do not subclass PropertyConverter must also expose
    ``source_type`` and ``target_type`` attributes.
    """

    def convert_to(self, source: Any) -> Any:
        """Convert a source-side value to the target side."""
        ...

    def convert_from(self, destination: Any) -> Any:
        """Convert a target-side value back to the source side."""
        ...


class PropertyConverter(ABC, Generic[S, D]):
    """Bidirectional converter base.

    Subclasses parametrize the base with their declared types, e.g.
    ``class AgeConverter(PropertyConverter[date, int])``.
    """

    reversible: ClassVar[bool] = True

    @abstractmethod
    def convert_to(self, source: S) -> D:
        """Convert a source value to the destination type."""

    @abstractmethod
    def convert_from(self, destination: D) -> S:
        """Convert a destination value back to the source type."""


class OneWayConverter(PropertyConverter[S, D]):
    """Converter that only supports the forward direction.

    The engine checks ``reversible`` before attempting a reverse call, so
    ``convert_from`` is only reached when called directly.
    """

    reversible: ClassVar[bool] = False

    def convert_from(self, destination: D) -> S:
        declared = declared_types(type(self))
        source_type, target_type = declared if declared else (Any, Any)
        raise IrreversibleConversion(type(self).__name__, source_type, target_type)


def declared_types(converter_cls: type) -> tuple[Any, Any] | None:
    """Find the (source, target) types a converter class declares.

    Follows the class hierarchy up to the ``PropertyConverter[S, D]``
    parametrization, substituting type variables bound by generic
    intermediates (``class IntIdentity(Identity[int])``). Returns None
    when the types stay unbound.
    """
    return _bound_types(converter_cls, {})


def _bound_types(klass: type, bindings: dict[Any, Any]) -> tuple[Any, Any] | None:
    for base in klass.__dict__.get("__orig_bases__", klass.__bases__):
        origin = get_origin(base) or base
        if not isinstance(origin, type) or not issubclass(origin, PropertyConverter):
            continue
        args = tuple(
            bindings.get(arg, arg) if isinstance(arg, TypeVar) else arg for arg in get_args(base)
        )
        if origin is PropertyConverter:
            if len(args) == 2 and not any(isinstance(arg, TypeVar) for arg in args):
                return args[0], args[1]
            continue
        parameters = getattr(origin, "__parameters__", ())
        found = _bound_types(origin, dict(zip(parameters, args)))
        if found is not None:
            return found
    return None
