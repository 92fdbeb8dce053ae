"""Mapping engine.

The MappingEngine looks up (or compiles) the plan for a source/target
type pair in its PlanCache and executes it. Module-level helpers use a
lazily created process-wide engine.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import Any, TypeVar

from attr_mapper.core.cache import PlanCache
from attr_mapper.core.config import MapperConfig
from attr_mapper.mapping.builder import PlanBuilder
from attr_mapper.mapping.catalog import clear_catalog_cache
from attr_mapper.mapping.dynamic import is_dynamic_target, project
from attr_mapper.mapping.model import ModelMapper
from attr_mapper.mapping.plan import MappingPlan

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MappingEngine:
    """Maps instances between structured types.

    Args:
        config: Mapper configuration. Defaults to MapperConfig().
        cache: Plan cache to use. Each engine gets its own by default.
    """

    def __init__(
        self,
        config: MapperConfig | None = None,
        cache: PlanCache | None = None,
    ) -> None:
        self._config = config or MapperConfig()
        self._cache = cache if cache is not None else PlanCache()

    @classmethod
    def from_config(cls, config: MapperConfig, cache: PlanCache | None = None) -> MappingEngine:
        """Create an engine from a MapperConfig."""
        return cls(config, cache)

    @property
    def config(self) -> MapperConfig:
        return self._config

    @property
    def cache(self) -> PlanCache:
        return self._cache

    def map_one(
        self,
        source: Any,
        target_type: type[Any],
        *,
        source_type: type | None = None,
    ) -> Any:
        """Map one source instance onto a new ``target_type`` instance.

        Returns None for a None source without consulting the cache. A
        target of ``object`` or ``dict`` yields a dict of the source's
        non-None properties.

        Raises:
            MappingException: If a property fails to map.
            ConstructionError: If ``target_type`` needs constructor arguments.
        """
        if source is None:
            return None
        if is_dynamic_target(target_type):
            return project(source, source_type)
        mapper = self.mapper_for(source_type or type(source), target_type)
        return mapper.map_one(source)

    def map_many(
        self,
        sources: Iterable[Any] | None,
        target_type: type[T],
        *,
        source_type: type | None = None,
    ) -> list[T | None]:
        """Map each source in order; None yields an empty list.

        Stops at the first element that fails.
        """
        if sources is None:
            return []
        return [self.map_one(source, target_type, source_type=source_type) for source in sources]

    def mapper_for(self, source_type: type, target_type: type[T]) -> ModelMapper[T]:
        """Return the compiled mapper for a type pair, building it on a miss."""

        def build() -> ModelMapper[T]:
            logger.debug(
                "Plan cache miss for %s -> %s", source_type.__name__, target_type.__name__
            )
            plan = PlanBuilder(source_type, target_type, self._config).build()
            return ModelMapper(plan, self._config)

        return self._cache.get_or_build(source_type, target_type, build)

    def plan_for(self, source_type: type, target_type: type) -> MappingPlan:
        """Return the (cached) plan for a type pair."""
        return self.mapper_for(source_type, target_type).plan

    def clear_cache(self) -> None:
        """Drop all compiled plans and memoized type catalogs."""
        self._cache.clear()
        clear_catalog_cache()
        logger.debug("Plan cache cleared")


_default_engine: MappingEngine | None = None
_default_lock = threading.Lock()


def get_default_engine() -> MappingEngine:
    """Return the process-wide engine, creating it on first use."""
    global _default_engine
    if _default_engine is None:
        with _default_lock:
            if _default_engine is None:
                _default_engine = MappingEngine()
    return _default_engine


def map_one(source: Any, target_type: type[T], *, source_type: type | None = None) -> Any:
    """Map one instance with the process-wide engine."""
    return get_default_engine().map_one(source, target_type, source_type=source_type)


def map_many(
    sources: Iterable[Any] | None,
    target_type: type[T],
    *,
    source_type: type | None = None,
) -> list[T | None]:
    """Map a sequence of instances with the process-wide engine."""
    return get_default_engine().map_many(sources, target_type, source_type=source_type)


def clear_cache() -> None:
    """Clear the process-wide engine's plan cache."""
    get_default_engine().clear_cache()
