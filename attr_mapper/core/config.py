"""Mapper configuration.

MapperConfig is a Pydantic model for type-safe engine configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class MapperConfig(BaseModel):
    """Configuration for a MappingEngine."""

    model_config = ConfigDict(frozen=True)

    strict: bool = False
    coerce_converter_output: bool = True
    warn_on_conflicting_annotations: bool = True
