"""Unit tests for the mapping plan builder."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Annotated

import pytest

from attr_mapper.core.config import MapperConfig
from attr_mapper.core.enums import ConverterDirection, ResolutionStrategy
from attr_mapper.core.exceptions import (
    ArityMismatch,
    ConverterContractMissing,
    MappingException,
    StrictModeViolation,
    UnresolvedTargetProperty,
)
from attr_mapper.mapping.annotations import Map, MapIgnore, MapWith
from attr_mapper.mapping.builder import PlanBuilder, resolve
from attr_mapper.mapping.plan import (
    AggregateToOne,
    ConvertedSingle,
    DirectCopy,
    OneToAggregate,
    Skip,
)
from attr_mapper.mapping.protocol import PropertyConverter

# --- Converters ---


class NameConverter(PropertyConverter[tuple[str, str], str]):
    def convert_to(self, source: tuple[str, str]) -> str:
        return " ".join(source)

    def convert_from(self, destination: str) -> tuple[str, str]:
        first, _, last = destination.partition(" ")
        return first, last


class YearConverter(PropertyConverter[date, int]):
    def convert_to(self, source: date) -> int:
        return source.year

    def convert_from(self, destination: int) -> date:
        return date(destination, 1, 1)


class NotAConverter:
    pass


# --- Models ---


@dataclass
class Person:
    first_name: str = ""
    last_name: str = ""
    born: date | None = None
    email: str = ""


@dataclass
class PersonView:
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    extra: str = ""


@dataclass
class PersonDto:
    full_name: Annotated[str, Map("first_name, last_name", NameConverter)] = ""
    year: Annotated[int, Map("born", YearConverter)] = 0
    contact: Annotated[str, Map("email")] = ""
    notes: Annotated[str, MapIgnore] = ""
    missing: Annotated[str, Map("nickname")] = ""


@dataclass
class PersonForm:
    full_name: Annotated[str, Map("first_name, last_name", NameConverter)] = ""
    year: Annotated[int, Map("born", YearConverter)] = 0
    contact: Annotated[str, Map("email")] = ""
    secret: Annotated[str, MapIgnore()] = ""
    unmatched: str = ""


@dataclass
class BadForm:
    full_name: Annotated[str, Map("first_name, middle_name", NameConverter)] = ""


@dataclass
class BadRename:
    contact: Annotated[str, Map("mail")] = ""


@dataclass
class SingleAliasAggregate:
    full_name: Annotated[str, Map("first_name", NameConverter)] = ""


@dataclass
class TripleAliasAggregate:
    full_name: Annotated[str, Map("first_name, last_name, email", NameConverter)] = ""


@dataclass
class BrokenConverter:
    email: Annotated[str, MapWith(NotAConverter)] = ""


@dataclass
class SourceSide:
    code: Annotated[str, Map("label")] = ""
    name: str = ""


@dataclass
class TargetSide:
    label: Annotated[str, Map("name")] = ""


class TestStrategy:
    def test_convention(self) -> None:
        assert PlanBuilder(Person, PersonView).strategy() is ResolutionStrategy.CONVENTION

    def test_target_driven(self) -> None:
        assert PlanBuilder(Person, PersonDto).strategy() is ResolutionStrategy.TARGET_DRIVEN

    def test_source_driven(self) -> None:
        assert PlanBuilder(PersonForm, Person).strategy() is ResolutionStrategy.SOURCE_DRIVEN

    def test_target_wins_when_both_annotated(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="attr_mapper.mapping.builder"):
            strategy = PlanBuilder(SourceSide, TargetSide).strategy()
        assert strategy is ResolutionStrategy.TARGET_DRIVEN
        assert "using target-driven mapping" in caplog.text

    def test_tie_warning_can_be_disabled(self, caplog: pytest.LogCaptureFixture) -> None:
        config = MapperConfig(warn_on_conflicting_annotations=False)
        with caplog.at_level(logging.WARNING, logger="attr_mapper.mapping.builder"):
            PlanBuilder(SourceSide, TargetSide, config).strategy()
        assert caplog.text == ""


class TestConventionPlan:
    def test_same_name_copies(self) -> None:
        plan = resolve(Person, PersonView)
        assert plan.strategy is ResolutionStrategy.CONVENTION
        assert [r.property_name for r in plan.resolutions] == ["first_name", "last_name", "email"]
        assert all(isinstance(r, DirectCopy) for r in plan.resolutions)

    def test_unmatched_target_has_no_resolution(self) -> None:
        assert resolve(Person, PersonView).resolution_for("extra") is None


class TestTargetDrivenPlan:
    def test_aggregate_to_one(self) -> None:
        resolution = resolve(Person, PersonDto).resolution_for("full_name")
        assert isinstance(resolution, AggregateToOne)
        assert [p.name for p in resolution.source_props] == ["first_name", "last_name"]
        assert resolution.direction is ConverterDirection.FORWARD

    def test_converted_single(self) -> None:
        resolution = resolve(Person, PersonDto).resolution_for("year")
        assert isinstance(resolution, ConvertedSingle)
        assert resolution.source_prop.name == "born"
        assert resolution.direction is ConverterDirection.FORWARD

    def test_rename(self) -> None:
        resolution = resolve(Person, PersonDto).resolution_for("contact")
        assert isinstance(resolution, DirectCopy)
        assert resolution.source_prop.name == "email"

    def test_ignore(self) -> None:
        assert isinstance(resolve(Person, PersonDto).resolution_for("notes"), Skip)

    def test_missing_alias_left_at_default(self) -> None:
        assert resolve(Person, PersonDto).resolution_for("missing") is None

    def test_missing_alias_in_strict_mode(self) -> None:
        with pytest.raises(MappingException) as exc_info:
            resolve(Person, PersonDto, MapperConfig(strict=True))
        assert exc_info.value.property_name == "missing"
        assert isinstance(exc_info.value.cause, StrictModeViolation)

    def test_single_alias_for_pair_converter(self) -> None:
        with pytest.raises(MappingException) as exc_info:
            resolve(Person, SingleAliasAggregate)
        assert isinstance(exc_info.value.cause, ArityMismatch)
        assert exc_info.value.cause.expected == 2
        assert exc_info.value.cause.actual == 1

    def test_too_many_aliases_for_pair_converter(self) -> None:
        with pytest.raises(MappingException) as exc_info:
            resolve(Person, TripleAliasAggregate)
        assert isinstance(exc_info.value.cause, ArityMismatch)

    def test_converter_contract_missing(self) -> None:
        with pytest.raises(MappingException) as exc_info:
            resolve(Person, BrokenConverter)
        assert exc_info.value.property_name == "email"
        assert isinstance(exc_info.value.__cause__, ConverterContractMissing)

    def test_precedence_uses_target_annotations(self) -> None:
        plan = resolve(SourceSide, TargetSide)
        resolution = plan.resolution_for("label")
        assert isinstance(resolution, DirectCopy)
        assert resolution.source_prop.name == "name"


class TestSourceDrivenPlan:
    def test_one_to_aggregate(self) -> None:
        resolution = resolve(PersonForm, Person).resolution_for("full_name")
        assert isinstance(resolution, OneToAggregate)
        assert [p.name for p in resolution.target_props] == ["first_name", "last_name"]
        assert resolution.direction is ConverterDirection.BACKWARD

    def test_converted_single_backward(self) -> None:
        resolution = resolve(PersonForm, Person).resolution_for("year")
        assert isinstance(resolution, ConvertedSingle)
        assert resolution.target_prop.name == "born"
        assert resolution.direction is ConverterDirection.BACKWARD

    def test_rename_and_skip(self) -> None:
        plan = resolve(PersonForm, Person)
        contact = plan.resolution_for("contact")
        assert isinstance(contact, DirectCopy)
        assert contact.target_prop.name == "email"
        assert isinstance(plan.resolution_for("secret"), Skip)

    def test_unannotated_without_target_is_skipped(self) -> None:
        assert resolve(PersonForm, Person).resolution_for("unmatched") is None

    def test_unresolved_target_in_one_to_many(self) -> None:
        with pytest.raises(MappingException) as exc_info:
            resolve(BadForm, Person)
        assert exc_info.value.property_name == "full_name"
        assert isinstance(exc_info.value.cause, UnresolvedTargetProperty)
        assert "middle_name" in str(exc_info.value)

    def test_unresolved_rename_target(self) -> None:
        with pytest.raises(MappingException) as exc_info:
            resolve(BadRename, Person)
        assert isinstance(exc_info.value.cause, UnresolvedTargetProperty)


class TestDeterminism:
    def test_rebuilt_plans_are_equal(self) -> None:
        assert resolve(Person, PersonDto) == resolve(Person, PersonDto)
        assert resolve(PersonForm, Person) == resolve(PersonForm, Person)

    def test_direction_matters(self) -> None:
        assert resolve(Person, PersonView) != resolve(PersonView, Person)
