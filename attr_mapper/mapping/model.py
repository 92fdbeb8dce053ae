"""Compiled plan executor.

ModelMapper runs a MappingPlan against source instances. It holds only
the plan and configuration, so one instance is safely shared.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

from attr_mapper.core.config import MapperConfig
from attr_mapper.core.enums import ConverterDirection
from attr_mapper.core.exceptions import ConstructionError, MappingException
from attr_mapper.mapping.aggregate import compose, decompose
from attr_mapper.mapping.catalog import PropertyDescriptor
from attr_mapper.mapping.coercion import coerce
from attr_mapper.mapping.converter import invoke
from attr_mapper.mapping.plan import (
    AggregateToOne,
    ConvertedSingle,
    DirectCopy,
    MappingPlan,
    OneToAggregate,
    PropertyResolution,
    Skip,
)

T = TypeVar("T")


def _instantiate(target_class: type[T]) -> T:
    """Create the zero-value target instance."""
    try:
        return target_class()
    except (TypeError, ValidationError) as e:
        raise ConstructionError(target_class, str(e)) from e


class ModelMapper(Generic[T]):
    """Executes a compiled mapping plan.

    Args:
        plan: The plan for one (source, target) type pair.
        config: Mapper configuration.
    """

    def __init__(self, plan: MappingPlan, config: MapperConfig | None = None) -> None:
        self._plan = plan
        self._config = config or MapperConfig()

    @property
    def plan(self) -> MappingPlan:
        return self._plan

    def map_one(self, source: Any) -> T | None:
        """Map a single source instance to a new target instance.

        Raises:
            ConstructionError: If the target cannot be created without arguments.
            MappingException: On the first property that fails.
        """
        if source is None:
            return None

        target: T = _instantiate(self._plan.target_type)
        for resolution in self._plan.resolutions:
            try:
                self._apply(resolution, source, target)
            except Exception as e:
                raise MappingException(resolution.property_name, e) from e
        return target

    def map_many(self, sources: Iterable[Any] | None) -> list[T | None]:
        """Map all sources via map_one, stopping at the first failure."""
        if sources is None:
            return []
        return [self.map_one(source) for source in sources]

    def _apply(self, resolution: PropertyResolution, source: Any, target: Any) -> None:
        if isinstance(resolution, Skip):
            return

        if isinstance(resolution, DirectCopy):
            value = getattr(source, resolution.source_prop.name)
            self._assign(target, resolution.target_prop, value)

        elif isinstance(resolution, ConvertedSingle):
            value = getattr(source, resolution.source_prop.name)
            if value is None:
                return
            converted = invoke(
                value,
                resolution.converter,
                target_type_hint=resolution.target_prop.declared_type,
                direction=resolution.direction,
            )
            self._assign(target, resolution.target_prop, converted, converted=True)

        elif isinstance(resolution, AggregateToOne):
            values = [getattr(source, prop.name) for prop in resolution.source_props]
            converter = resolution.converter
            if converter is None:
                combined = compose(values, resolution.target_prop.declared_type)
                self._assign(target, resolution.target_prop, combined)
                return
            if resolution.direction is ConverterDirection.BACKWARD:
                input_type = converter.target_type
            else:
                input_type = converter.source_type
            converted = invoke(
                compose(values, input_type),
                converter,
                target_type_hint=resolution.target_prop.declared_type,
                direction=resolution.direction,
            )
            self._assign(target, resolution.target_prop, converted, converted=True)

        elif isinstance(resolution, OneToAggregate):
            value = getattr(source, resolution.source_prop.name)
            if value is None:
                return
            if resolution.converter is not None:
                value = invoke(value, resolution.converter, direction=resolution.direction)
                if value is None:
                    return
            props = resolution.target_props
            pairs = decompose(value, [prop.name for prop in props])
            for prop, (_, item) in zip(props, pairs):
                self._assign(target, prop, item)

    def _assign(
        self,
        target: Any,
        prop: PropertyDescriptor,
        value: Any,
        converted: bool = False,
    ) -> None:
        """Coerce and write a value; None is never written."""
        if value is None:
            return
        if not converted or self._config.coerce_converter_output:
            value = coerce(value, prop.declared_type)
            if value is None:
                return
        setattr(target, prop.name, value)
