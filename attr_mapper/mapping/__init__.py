"""Mapping layer - compile and execute property mapping plans."""

from __future__ import annotations

from attr_mapper.mapping.annotations import Map, MapIgnore, MappingAnnotation, MapWith
from attr_mapper.mapping.builder import PlanBuilder, resolve
from attr_mapper.mapping.catalog import PropertyDescriptor, describe_type, register_type
from attr_mapper.mapping.converter import ConverterDescriptor, describe_converter, invoke
from attr_mapper.mapping.model import ModelMapper
from attr_mapper.mapping.plan import (
    AggregateToOne,
    ConvertedSingle,
    DirectCopy,
    MappingPlan,
    OneToAggregate,
    Skip,
)
from attr_mapper.mapping.protocol import ConverterProtocol, OneWayConverter, PropertyConverter

__all__ = [
    "Map",
    "MapWith",
    "MapIgnore",
    "MappingAnnotation",
    "PropertyConverter",
    "OneWayConverter",
    "ConverterProtocol",
    "ConverterDescriptor",
    "describe_converter",
    "invoke",
    "PropertyDescriptor",
    "describe_type",
    "register_type",
    "PlanBuilder",
    "resolve",
    "ModelMapper",
    "MappingPlan",
    "DirectCopy",
    "ConvertedSingle",
    "AggregateToOne",
    "OneToAggregate",
    "Skip",
]
