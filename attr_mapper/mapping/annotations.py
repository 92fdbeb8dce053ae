"""Declarative mapping markers.

Markers are attached to properties through ``typing.Annotated``::

    full_name: Annotated[str, Map("first_name, last_name", NameConverter)] = ""
    email_address: Annotated[str, Map("email")] = ""
    internal_notes: Annotated[str | None, MapIgnore] = None
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any


def _split_names(names: str | Sequence[str] | None) -> tuple[str, ...]:
    """Split a comma separated alias list, dropping blanks."""
    if names is None:
        return ()
    if isinstance(names, str):
        names = names.split(",")
    return tuple(name.strip() for name in names if name and name.strip())


class Map:
    """Relate a property to other property names and/or a converter.

    Args:
        names: One name, a comma separated list, or a sequence of names.
        converter: Converter class or instance applied to the value(s).
    """

    __slots__ = ("alias_names", "converter")

    def __init__(self, names: str | Sequence[str] | None = None, converter: Any = None) -> None:
        if names is not None and not isinstance(names, (str, Sequence)):
            # Map(SomeConverter) form
            names, converter = None, names
        self.alias_names = _split_names(names)
        self.converter = converter

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Map):
            return NotImplemented
        return self.alias_names == other.alias_names and self.converter == other.converter

    def __hash__(self) -> int:
        return hash(self.alias_names)

    def __repr__(self) -> str:
        return f"Map(names={list(self.alias_names)!r}, converter={self.converter!r})"


class MapWith(Map):
    """Apply a converter without renaming."""

    __slots__ = ()

    def __init__(self, converter: Any) -> None:
        if converter is None:
            raise ValueError("MapWith requires a converter")
        super().__init__(None, converter)


class MapIgnore:
    """Exclude a property from mapping.

    Usable both as ``MapIgnore`` and ``MapIgnore()``.
    """

    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, MapIgnore) or other is MapIgnore

    def __hash__(self) -> int:
        return hash(MapIgnore)

    def __repr__(self) -> str:
        return "MapIgnore()"


@dataclass(frozen=True)
class MappingAnnotation:
    """The mapping markers carried by one property."""

    alias_names: tuple[str, ...] = ()
    converter_ref: Any = None
    ignored: bool = False


def read_annotation(metadata: Iterable[Any]) -> MappingAnnotation | None:
    """Collapse ``Annotated`` extras into a MappingAnnotation.

    Returns None when no mapping marker is present. The first Map marker
    wins when several are given.
    """
    mapping: Map | None = None
    ignored = False
    for item in metadata:
        if item is MapIgnore or isinstance(item, MapIgnore):
            ignored = True
        elif isinstance(item, Map) and mapping is None:
            mapping = item

    if mapping is None and not ignored:
        return None
    if mapping is None:
        return MappingAnnotation(ignored=True)
    return MappingAnnotation(
        alias_names=mapping.alias_names,
        converter_ref=mapping.converter,
        ignored=ignored,
    )
