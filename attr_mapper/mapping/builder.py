"""Mapping plan builder.

Chooses the resolution strategy for a (source, target) type pair and
compiles the ordered per-property resolutions.
"""

from __future__ import annotations

import logging
from typing import Any

from attr_mapper.core.config import MapperConfig
from attr_mapper.core.enums import ConverterDirection, ResolutionStrategy
from attr_mapper.core.exceptions import (
    ArityMismatch,
    MappingException,
    StrictModeViolation,
    UnresolvedTargetProperty,
)
from attr_mapper.mapping.aggregate import composed_type, input_arity
from attr_mapper.mapping.catalog import PropertyDescriptor, describe_type, readable, writable
from attr_mapper.mapping.converter import (
    ConverterDescriptor,
    describe_converter,
    infer_direction,
    is_compatible,
    known,
)
from attr_mapper.mapping.plan import (
    AggregateToOne,
    ConvertedSingle,
    DirectCopy,
    MappingPlan,
    OneToAggregate,
    PropertyResolution,
    Skip,
)

logger = logging.getLogger(__name__)


def _any_annotated(props: dict[str, PropertyDescriptor]) -> bool:
    return any(prop.is_annotated for prop in props.values())


def _directions(converter: ConverterDescriptor) -> tuple[tuple[ConverterDirection, Any, Any], ...]:
    """(direction, input type, output type) for both converter halves."""
    return (
        (ConverterDirection.FORWARD, converter.source_type, converter.target_type),
        (ConverterDirection.BACKWARD, converter.target_type, converter.source_type),
    )


class PlanBuilder:
    """Compiles a MappingPlan for one ordered type pair.

    Args:
        source_type: Class instances are read from.
        target_type: Class instances are created and populated.
        config: Mapper configuration (strict mode, logging of ties).
    """

    def __init__(
        self,
        source_type: type,
        target_type: type,
        config: MapperConfig | None = None,
    ) -> None:
        self._source_type = source_type
        self._target_type = target_type
        self._config = config or MapperConfig()
        self._source_props = readable(describe_type(source_type))
        self._target_props = writable(describe_type(target_type))
        self._converters: dict[int, ConverterDescriptor] = {}

    def strategy(self) -> ResolutionStrategy:
        """Select which side's annotations drive the plan.

        Target annotations take precedence when both sides carry them.
        """
        target_annotated = _any_annotated(self._target_props)
        source_annotated = _any_annotated(self._source_props)

        if target_annotated:
            if source_annotated and self._config.warn_on_conflicting_annotations:
                logger.warning(
                    "Both %s and %s have mapping annotations; using target-driven mapping",
                    self._source_type.__name__,
                    self._target_type.__name__,
                )
            return ResolutionStrategy.TARGET_DRIVEN
        if source_annotated:
            return ResolutionStrategy.SOURCE_DRIVEN
        return ResolutionStrategy.CONVENTION

    def build(self) -> MappingPlan:
        """Compile the plan.

        Raises:
            MappingException: If any property cannot be resolved.
        """
        strategy = self.strategy()
        if strategy is ResolutionStrategy.TARGET_DRIVEN:
            props, resolve = self._target_props, self._resolve_target
        elif strategy is ResolutionStrategy.SOURCE_DRIVEN:
            props, resolve = self._source_props, self._resolve_source
        else:
            props, resolve = self._target_props, self._resolve_convention

        resolutions: list[PropertyResolution] = []
        for prop in props.values():
            try:
                resolution = resolve(prop)
            except MappingException:
                raise
            except Exception as e:
                raise MappingException(prop.name, e) from e
            if resolution is not None:
                resolutions.append(resolution)

        logger.debug(
            "Built %s plan %s -> %s with %d resolutions",
            strategy.value,
            self._source_type.__name__,
            self._target_type.__name__,
            len(resolutions),
        )
        return MappingPlan(
            source_type=self._source_type,
            target_type=self._target_type,
            strategy=strategy,
            resolutions=tuple(resolutions),
        )

    # --- Strategies ---

    def _resolve_convention(self, target: PropertyDescriptor) -> PropertyResolution | None:
        source = self._source_props.get(target.name)
        if source is None:
            return None
        return DirectCopy(target.name, source, target)

    def _resolve_target(self, target: PropertyDescriptor) -> PropertyResolution | None:
        annotation = target.annotation
        if annotation is None:
            return self._resolve_convention(target)
        if annotation.ignored:
            return Skip(target.name)

        converter = self._converter(annotation.converter_ref)
        aliases = annotation.alias_names

        if len(aliases) > 1:
            sources = []
            for alias in aliases:
                source = self._source_props.get(alias)
                if source is None:
                    self._missing_source(alias, target)
                    return None
                sources.append(source)
            direction = None
            if converter is not None:
                direction = self._aggregate_direction(converter, len(sources), target)
            return AggregateToOne(target.name, tuple(sources), target, converter, direction)

        source_name = aliases[0] if aliases else target.name
        source = self._source_props.get(source_name)
        if source is None:
            if aliases:
                self._missing_source(source_name, target)
            return None
        if converter is None:
            return DirectCopy(target.name, source, target)
        direction = self._single_direction(converter, source, target)
        return ConvertedSingle(target.name, source, target, converter, direction)

    def _resolve_source(self, source: PropertyDescriptor) -> PropertyResolution | None:
        annotation = source.annotation
        if annotation is None:
            target = self._target_props.get(source.name)
            return DirectCopy(source.name, source, target) if target is not None else None
        if annotation.ignored:
            return Skip(source.name)

        converter = self._converter(annotation.converter_ref)
        aliases = annotation.alias_names

        if len(aliases) > 1:
            targets = tuple(self._target(alias) for alias in aliases)
            direction = None
            if converter is not None:
                # Target types are not known until decomposition
                direction = infer_direction(converter, known(source.declared_type))
            return OneToAggregate(source.name, source, targets, converter, direction)

        if aliases:
            target = self._target(aliases[0])
        else:
            target = self._target_props.get(source.name)
            if target is None:
                return None
        if converter is None:
            return DirectCopy(source.name, source, target)
        direction = self._single_direction(converter, source, target)
        return ConvertedSingle(source.name, source, target, converter, direction)

    # --- Helpers ---

    def _converter(self, ref: Any) -> ConverterDescriptor | None:
        if ref is None:
            return None
        descriptor = self._converters.get(id(ref))
        if descriptor is None:
            descriptor = describe_converter(ref)
            self._converters[id(ref)] = descriptor
        return descriptor

    def _target(self, name: str) -> PropertyDescriptor:
        target = self._target_props.get(name)
        if target is None:
            raise UnresolvedTargetProperty(name, self._target_type)
        return target

    def _missing_source(self, alias: str, target: PropertyDescriptor) -> None:
        if self._config.strict:
            raise StrictModeViolation(
                f"Source property '{alias}' mapped to '{target.name}' "
                f"not found on {self._source_type.__name__}"
            )
        logger.debug(
            "Source property %r not found on %s; %s keeps its default",
            alias,
            self._source_type.__name__,
            target.name,
        )

    def _single_direction(
        self,
        converter: ConverterDescriptor,
        source: PropertyDescriptor,
        target: PropertyDescriptor,
    ) -> ConverterDirection | None:
        value_type = known(source.declared_type)
        direction = infer_direction(converter, value_type, target.declared_type)
        if direction is not None or value_type is None:
            return direction

        destination = known(target.declared_type)
        for _, input_type, output_type in _directions(converter):
            arity = input_arity(input_type)
            if arity is not None and arity > 1:
                if destination is None or is_compatible(destination, output_type):
                    raise ArityMismatch(
                        arity,
                        1,
                        f"{converter.name} expects {arity} values but one property is mapped",
                    )
        return None

    def _aggregate_direction(
        self,
        converter: ConverterDescriptor,
        count: int,
        target: PropertyDescriptor,
    ) -> ConverterDirection | None:
        destination = known(target.declared_type)
        for direction, input_type, output_type in _directions(converter):
            if destination is not None and not is_compatible(destination, output_type):
                continue
            if composed_type(input_type) is None:
                continue
            arity = input_arity(input_type)
            if arity is not None and arity != count:
                raise ArityMismatch(
                    arity,
                    count,
                    f"{converter.name} expects {arity} values but {count} properties are mapped",
                )
            return direction
        return None


def resolve(
    source_type: type,
    target_type: type,
    config: MapperConfig | None = None,
) -> MappingPlan:
    """Compile the mapping plan for ``source_type`` -> ``target_type``."""
    return PlanBuilder(source_type, target_type, config).build()
