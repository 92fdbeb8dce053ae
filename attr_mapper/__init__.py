"""AttrMapper - declarative, annotation-driven object-to-object mapping."""

from __future__ import annotations

from attr_mapper.core.cache import PlanCache
from attr_mapper.core.config import MapperConfig
from attr_mapper.core.engine import (
    MappingEngine,
    clear_cache,
    get_default_engine,
    map_many,
    map_one,
)
from attr_mapper.core.enums import ConverterDirection, ResolutionStrategy
from attr_mapper.core.exceptions import (
    ArityMismatch,
    AttrMapperError,
    CoercionError,
    ConstructionError,
    ConverterContractMissing,
    ConverterMismatch,
    IrreversibleConversion,
    MappingError,
    MappingException,
    PlanCompilationError,
    StrictModeViolation,
    UnresolvedTargetProperty,
    UnsupportedAggregateShape,
)
from attr_mapper.mapping.annotations import Map, MapIgnore, MapWith
from attr_mapper.mapping.plan import MappingPlan
from attr_mapper.mapping.protocol import ConverterProtocol, OneWayConverter, PropertyConverter

__all__ = [
    # Engine
    "MappingEngine",
    "MapperConfig",
    "PlanCache",
    "MappingPlan",
    "map_one",
    "map_many",
    "clear_cache",
    "get_default_engine",
    # Annotations
    "Map",
    "MapWith",
    "MapIgnore",
    # Converters
    "PropertyConverter",
    "OneWayConverter",
    "ConverterProtocol",
    # Enums
    "ResolutionStrategy",
    "ConverterDirection",
    # Exceptions
    "AttrMapperError",
    "ConstructionError",
    "MappingError",
    "MappingException",
    "PlanCompilationError",
    "ConverterContractMissing",
    "StrictModeViolation",
    "ConverterMismatch",
    "IrreversibleConversion",
    "ArityMismatch",
    "UnsupportedAggregateShape",
    "UnresolvedTargetProperty",
    "CoercionError",
]
