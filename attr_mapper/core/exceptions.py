"""AttrMapper exception hierarchy.

Property-level failures always reach callers as MappingException, with the
underlying error preserved as ``cause`` and ``__cause__``.
"""

from __future__ import annotations

from typing import Any


def _type_name(tp: Any) -> str:
    if tp is None:
        return "None"
    return getattr(tp, "__name__", None) or repr(tp)


class AttrMapperError(Exception):
    """Base exception for all AttrMapper errors."""


class ConstructionError(AttrMapperError):
    """Raised when a target type cannot be instantiated without arguments."""

    def __init__(self, target_type: type, detail: str) -> None:
        self.target_type = target_type
        super().__init__(
            f"Cannot construct {_type_name(target_type)} without arguments: {detail}"
        )


# --- Mapping ---


class MappingError(AttrMapperError):
    """Base for mapping errors."""


class MappingException(MappingError):
    """Raised when a single property fails to map.

    Wraps the original error, which stays available as ``cause``.
    """

    def __init__(self, property_name: str, cause: BaseException) -> None:
        self.property_name = property_name
        self.cause = cause
        super().__init__(f"Error mapping property {property_name}: {cause}")


class PlanCompilationError(MappingError):
    """Raised when a mapping plan cannot be compiled."""


class ConverterContractMissing(PlanCompilationError):
    """Raised when a converter does not implement the bidirectional contract."""

    def __init__(self, converter: Any, detail: str) -> None:
        self.converter = converter
        super().__init__(f"Converter {_type_name(converter)} {detail}")


class StrictModeViolation(MappingError):
    """Raised in strict mode when an aliased source property is missing."""


class ConverterMismatch(MappingError):
    """Raised when neither converter direction fits the types in play."""

    def __init__(
        self,
        converter_name: str,
        source_type: Any,
        target_type: Any,
        actual_value_type: Any,
        actual_destination_type: Any = None,
        message: str | None = None,
    ) -> None:
        self.converter_name = converter_name
        self.declared_source_type = source_type
        self.declared_target_type = target_type
        self.actual_value_type = actual_value_type
        self.actual_destination_type = actual_destination_type
        if message is None:
            message = (
                f"Converter {converter_name} ({_type_name(source_type)} <-> "
                f"{_type_name(target_type)}) cannot convert from "
                f"{_type_name(actual_value_type)}"
            )
            if actual_destination_type is not None:
                message += f" to {_type_name(actual_destination_type)}"
            else:
                message += "; the value must match either declared type"
        super().__init__(message)


class IrreversibleConversion(ConverterMismatch):
    """Raised when a one-way converter would have to run backward."""

    def __init__(self, converter_name: str, source_type: Any, target_type: Any) -> None:
        super().__init__(
            converter_name,
            source_type,
            target_type,
            target_type,
            source_type,
            message=(
                f"Converter {converter_name} only supports {_type_name(source_type)} -> "
                f"{_type_name(target_type)}; the reverse conversion is not available"
            ),
        )


class ArityMismatch(MappingError):
    """Raised when aggregate composition or decomposition counts disagree."""

    def __init__(self, expected: int, actual: int, detail: str = "") -> None:
        self.expected = expected
        self.actual = actual
        message = f"Expected {expected} values, got {actual}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class UnsupportedAggregateShape(MappingError):
    """Raised when a value cannot be decomposed into several target values."""

    def __init__(self, value_type: type) -> None:
        self.value_type = value_type
        super().__init__(
            f"Converter returned {_type_name(value_type)}, but expected tuple, list, "
            "or sequence for multi-property mapping"
        )


class UnresolvedTargetProperty(MappingError):
    """Raised when an alias names a property the target type does not have."""

    def __init__(self, property_name: str, target_type: type) -> None:
        self.property_name = property_name
        self.target_type = target_type
        super().__init__(
            f"Target property '{property_name}' not found on {_type_name(target_type)}"
        )


class CoercionError(MappingError):
    """Raised when a value cannot be converted to a property's declared type."""

    def __init__(self, value: Any, target_type: Any, detail: str = "") -> None:
        self.value = value
        self.target_type = target_type
        message = f"Cannot convert {value!r} to {_type_name(target_type)}"
        if detail:
            message += f": {detail}"
        super().__init__(message)
