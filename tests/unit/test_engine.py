"""Unit tests for MappingEngine."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Annotated

import pytest

import attr_mapper
from attr_mapper.core.engine import MappingEngine, get_default_engine
from attr_mapper.core.exceptions import MappingException, StrictModeViolation
from attr_mapper.mapping.annotations import Map


@dataclass
class Customer:
    id: int = 0
    name: str = ""
    nickname: str | None = None

    @property
    def display(self) -> str:
        return f"#{self.id} {self.name}"


@dataclass
class CustomerView:
    id: int = 0
    name: str = ""


@dataclass
class Labelled:
    label: Annotated[str, Map("title")] = ""


@dataclass
class Headline:
    title: str = ""


class PlainUser:
    def __init__(self, name: str, email: str | None = None) -> None:
        self.name = name
        self.email = email


class PlainView:
    def __init__(self, name: str = "") -> None:
        self.name = name


class TestMapOne:
    def test_none_source_does_not_touch_cache(self, engine: MappingEngine) -> None:
        assert engine.map_one(None, CustomerView) is None
        assert len(engine.cache) == 0

    def test_maps_and_caches(self, engine: MappingEngine) -> None:
        result = engine.map_one(Customer(id=1, name="Ann"), CustomerView)
        assert result == CustomerView(id=1, name="Ann")
        assert engine.cache.keys == [(Customer, CustomerView)]

    def test_reverse_pair_is_separate_entry(self, engine: MappingEngine) -> None:
        engine.map_one(Customer(id=1), CustomerView)
        engine.map_one(CustomerView(id=1), Customer)
        assert engine.cache.keys == [(Customer, CustomerView), (CustomerView, Customer)]

    def test_explicit_source_type(self, engine: MappingEngine) -> None:
        class Special(Customer):
            pass

        engine.map_one(Special(id=2), CustomerView, source_type=Customer)
        assert (Customer, CustomerView) in engine.cache
        assert (Special, CustomerView) not in engine.cache

    @pytest.mark.parametrize("target", [object, dict])
    def test_dynamic_projection(self, engine: MappingEngine, target: type) -> None:
        bag = engine.map_one(Customer(id=3, name="Bo"), target)
        assert bag == {"id": 3, "name": "Bo", "display": "#3 Bo"}
        assert list(bag) == ["id", "name", "display"]
        assert len(engine.cache) == 0

    def test_strict_engine(self, strict_engine: MappingEngine) -> None:
        with pytest.raises(MappingException) as exc_info:
            strict_engine.map_one(Customer(), Labelled)
        assert isinstance(exc_info.value.cause, StrictModeViolation)

    def test_lenient_engine_keeps_default(self, engine: MappingEngine) -> None:
        assert engine.map_one(Customer(name="x"), Labelled) == Labelled()

    def test_plain_classes_map_by_init_parameters(self, engine: MappingEngine) -> None:
        view = engine.map_one(PlainUser("Ann", "a@x"), PlainView)
        assert isinstance(view, PlainView)
        assert view.name == "Ann"

    def test_plain_class_projection(self, engine: MappingEngine) -> None:
        assert engine.map_one(PlainUser("Ann"), dict) == {"name": "Ann"}

    def test_unresolvable_hint_keeps_markers(self, engine: MappingEngine) -> None:
        class Status(Enum):
            OPEN = 1

        @dataclass
        class Story:
            status: Status = Status.OPEN
            label: Annotated[str, Map("title")] = ""

        story = engine.map_one(Headline(title="hello"), Story)
        assert story.label == "hello"
        assert story.status is Status.OPEN


class TestMapMany:
    def test_none_yields_empty_list(self, engine: MappingEngine) -> None:
        assert engine.map_many(None, CustomerView) == []

    def test_maps_in_order(self, engine: MappingEngine) -> None:
        results = engine.map_many([Customer(id=1), None, Customer(id=2)], CustomerView)
        assert results == [CustomerView(id=1), None, CustomerView(id=2)]
        assert len(engine.cache) == 1


class TestPlanCaching:
    def test_plan_reused(self, engine: MappingEngine) -> None:
        assert engine.plan_for(Customer, CustomerView) is engine.plan_for(Customer, CustomerView)

    def test_clear_rebuilds_equal_plan(self, engine: MappingEngine) -> None:
        before = engine.plan_for(Customer, CustomerView)
        engine.clear_cache()
        assert len(engine.cache) == 0
        after = engine.plan_for(Customer, CustomerView)
        assert after is not before
        assert after == before

    def test_engines_do_not_share_caches(self) -> None:
        first, second = MappingEngine(), MappingEngine()
        first.map_one(Customer(), CustomerView)
        assert len(first.cache) == 1
        assert len(second.cache) == 0

    def test_concurrent_first_use_publishes_one_mapper(self, engine: MappingEngine) -> None:
        barrier = threading.Barrier(8)

        def lookup() -> object:
            barrier.wait()
            return engine.mapper_for(Customer, CustomerView)

        with ThreadPoolExecutor(max_workers=8) as pool:
            mappers = list(pool.map(lambda _: lookup(), range(8)))

        assert len({id(mapper) for mapper in mappers}) == 1
        assert len(engine.cache) == 1

    def test_concurrent_mapping(self, engine: MappingEngine) -> None:
        sources = [Customer(id=i, name=f"c{i}") for i in range(50)]
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda c: engine.map_one(c, CustomerView), sources))
        assert [r.id for r in results] == list(range(50))


class TestDefaultEngine:
    def test_module_helpers(self) -> None:
        attr_mapper.clear_cache()
        assert attr_mapper.map_one(Customer(id=5, name="Di"), CustomerView) == CustomerView(
            id=5, name="Di"
        )
        assert attr_mapper.map_many([Customer(id=6)], CustomerView) == [CustomerView(id=6)]
        assert attr_mapper.map_one(None, CustomerView) is None
        assert (Customer, CustomerView) in get_default_engine().cache
        attr_mapper.clear_cache()
        assert len(get_default_engine().cache) == 0

    def test_default_engine_is_singleton(self) -> None:
        assert get_default_engine() is get_default_engine()
