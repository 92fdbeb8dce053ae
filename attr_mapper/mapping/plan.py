"""Mapping plan data classes.

Frozen dataclasses representing compiled mapping plans. A plan depends
only on its (source type, target type) pair and is shared by every
execution of that pair.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from attr_mapper.core.enums import ConverterDirection, ResolutionStrategy
from attr_mapper.mapping.catalog import PropertyDescriptor
from attr_mapper.mapping.converter import ConverterDescriptor


@dataclass(frozen=True)
class DirectCopy:
    """Copy one source property into one target property."""

    property_name: str
    source_prop: PropertyDescriptor
    target_prop: PropertyDescriptor


@dataclass(frozen=True)
class ConvertedSingle:
    """Pass one source property through a converter."""

    property_name: str
    source_prop: PropertyDescriptor
    target_prop: PropertyDescriptor
    converter: ConverterDescriptor
    direction: ConverterDirection | None = None  # None: inferred per value


@dataclass(frozen=True)
class AggregateToOne:
    """Combine several source properties into one target property."""

    property_name: str
    source_props: tuple[PropertyDescriptor, ...]
    target_prop: PropertyDescriptor
    converter: ConverterDescriptor | None = None
    direction: ConverterDirection | None = None


@dataclass(frozen=True)
class OneToAggregate:
    """Split one source property across several target properties."""

    property_name: str
    source_prop: PropertyDescriptor
    target_props: tuple[PropertyDescriptor, ...]
    converter: ConverterDescriptor | None = None
    direction: ConverterDirection | None = None


@dataclass(frozen=True)
class Skip:
    """A property excluded with MapIgnore."""

    property_name: str


PropertyResolution = Union[DirectCopy, ConvertedSingle, AggregateToOne, OneToAggregate, Skip]


@dataclass(frozen=True)
class MappingPlan:
    """Compiled mapping plan for one ordered (source, target) type pair."""

    source_type: type
    target_type: type
    strategy: ResolutionStrategy
    resolutions: tuple[PropertyResolution, ...] = ()

    def resolution_for(self, property_name: str) -> PropertyResolution | None:
        """Find the resolution recorded under a property name."""
        for resolution in self.resolutions:
            if resolution.property_name == property_name:
                return resolution
        return None
