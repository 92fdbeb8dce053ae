"""Shared test fixtures."""

from __future__ import annotations

import pytest

from attr_mapper.core.cache import PlanCache
from attr_mapper.core.config import MapperConfig
from attr_mapper.core.engine import MappingEngine


@pytest.fixture
def plan_cache() -> PlanCache:
    """Fresh, empty plan cache."""
    return PlanCache()


@pytest.fixture
def engine(plan_cache: PlanCache) -> MappingEngine:
    """Engine with default config and its own cache."""
    return MappingEngine(MapperConfig(), plan_cache)


@pytest.fixture
def strict_engine() -> MappingEngine:
    """Engine that fails on missing aliased source properties."""
    return MappingEngine.from_config(MapperConfig(strict=True), PlanCache())
