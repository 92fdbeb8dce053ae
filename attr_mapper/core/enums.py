"""Mapping strategy and converter direction enumerations."""

from __future__ import annotations

from enum import Enum


class ResolutionStrategy(Enum):
    """Which side's metadata drives a mapping plan."""

    TARGET_DRIVEN = "target_driven"
    SOURCE_DRIVEN = "source_driven"
    CONVENTION = "convention"


class ConverterDirection(Enum):
    """Which half of a converter contract is invoked."""

    FORWARD = "forward"  # convert_to
    BACKWARD = "backward"  # convert_from
