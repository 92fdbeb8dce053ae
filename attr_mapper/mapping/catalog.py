"""Property catalog.

Harvests the accessible instance properties of a class (dataclass,
Pydantic model, or plain class read through its annotations or its
``__init__`` parameters) into a name-keyed table. Hosts that cannot rely
on introspection register explicit tables instead.
"""

from __future__ import annotations

import builtins
import dataclasses
import functools
import inspect
import logging
import sys
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Annotated, Any, ClassVar, get_args, get_origin, get_type_hints

from attr_mapper.mapping.annotations import MappingAnnotation, read_annotation

logger = logging.getLogger(__name__)

_registered: dict[type, tuple[PropertyDescriptor, ...]] = {}
_registry_lock = threading.Lock()

# Introspected classes kept memoized; older entries are rebuilt on demand
_MEMO_SIZE = 512


@dataclass(frozen=True)
class PropertyDescriptor:
    """One accessible property of a type."""

    owner: type
    name: str
    declared_type: Any = Any
    can_read: bool = True
    can_write: bool = True
    annotation: MappingAnnotation | None = None

    @property
    def is_annotated(self) -> bool:
        return self.annotation is not None


def split_annotated(tp: Any) -> tuple[Any, tuple[Any, ...]]:
    """Split ``Annotated[T, *extras]`` into ``(T, extras)``."""
    if get_origin(tp) is Annotated:
        base, *extras = get_args(tp)
        return base, tuple(extras)
    return tp, ()


def _is_pydantic_model(cls: type) -> bool:
    """Check if a class is a Pydantic BaseModel."""
    try:
        from pydantic import BaseModel

        return isinstance(cls, type) and issubclass(cls, BaseModel)
    except ImportError:
        return False


class _LenientNamespace(dict):
    """Locals for evaluating one hint; names found nowhere read as Any."""

    def __init__(self, localns: dict[str, Any], globalns: dict[str, Any]) -> None:
        super().__init__(localns)
        self._globalns = globalns

    def __missing__(self, key: str) -> Any:
        if key in self._globalns:
            return self._globalns[key]
        return getattr(builtins, key, Any)


def _resolve_hint(raw: Any, globalns: dict[str, Any], localns: dict[str, Any]) -> Any:
    if not isinstance(raw, str):
        return raw
    try:
        return eval(raw, globalns, _LenientNamespace(localns, globalns))  # noqa: S307
    except Exception as e:
        logger.warning("Cannot resolve type hint %r, treating it as Any: %s", raw, e)
        return Any


def _hint_sources(obj: Any) -> list[tuple[dict[str, Any], dict[str, Any], dict[str, Any]]]:
    """(globals, locals, raw annotations) per annotated namespace, base classes first."""
    if not isinstance(obj, type):
        return [(getattr(obj, "__globals__", {}), {}, inspect.get_annotations(obj))]
    sources = []
    for klass in reversed(obj.__mro__):
        module = sys.modules.get(klass.__module__)
        globalns = vars(module) if module is not None else {}
        sources.append((globalns, dict(vars(klass)), inspect.get_annotations(klass)))
    return sources


def _type_hints(obj: Any) -> dict[str, Any]:
    """Resolve type hints, keeping Annotated extras.

    When some hint cannot be resolved the hints are evaluated one by one,
    so only the names that resolve nowhere degrade to ``Any``; markers in
    ``Annotated`` extras survive.
    """
    try:
        return get_type_hints(obj, include_extras=True)
    except (NameError, TypeError, AttributeError) as e:
        logger.warning("Cannot resolve all type hints of %r, resolving one by one: %s", obj, e)

    hints: dict[str, Any] = {}
    for globalns, localns, raw in _hint_sources(obj):
        for name, value in raw.items():
            hints[name] = _resolve_hint(value, globalns, localns)
    return hints


def _user_classes(cls: type) -> list[type]:
    """MRO from the most derived class up, without framework bases."""
    classes = []
    for klass in cls.__mro__:
        if klass is object or klass.__module__.split(".")[0] in ("pydantic", "typing"):
            continue
        classes.append(klass)
    return classes


def _describe_property(owner: type, name: str, prop: property) -> PropertyDescriptor:
    hint = Any
    if prop.fget is not None:
        hint = _type_hints(prop.fget).get("return", Any)
    declared, extras = split_annotated(hint)
    return PropertyDescriptor(
        owner=owner,
        name=name,
        declared_type=declared,
        can_read=prop.fget is not None,
        can_write=prop.fset is not None,
        annotation=read_annotation(extras),
    )


def _init_parameters(cls: type) -> Iterable[PropertyDescriptor]:
    """Public ``__init__`` parameters of a plain class, read back as attributes."""
    init = cls.__init__  # type: ignore[misc]
    if init is object.__init__:
        return
    try:
        sig = inspect.signature(init)
    except (ValueError, TypeError):
        return

    hints = _type_hints(init)
    for name, param in sig.parameters.items():
        if name == "self" or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        declared, extras = split_annotated(hints.get(name, Any))
        yield PropertyDescriptor(
            owner=cls,
            name=name,
            declared_type=declared,
            annotation=read_annotation(extras),
        )


def _harvest_fields(cls: type) -> Iterable[PropertyDescriptor]:
    """Yield field descriptors in declaration order."""
    if _is_pydantic_model(cls):
        writable = not cls.model_config.get("frozen", False)
        for name, info in cls.model_fields.items():
            yield PropertyDescriptor(
                owner=cls,
                name=name,
                declared_type=info.annotation if info.annotation is not None else Any,
                can_write=writable,
                annotation=read_annotation(info.metadata),
            )
        return

    hints = _type_hints(cls)

    if dataclasses.is_dataclass(cls):
        writable = not cls.__dataclass_params__.frozen  # type: ignore[attr-defined]
        for f in dataclasses.fields(cls):
            declared, extras = split_annotated(hints.get(f.name, Any))
            yield PropertyDescriptor(
                owner=cls,
                name=f.name,
                declared_type=declared,
                can_write=writable,
                annotation=read_annotation(extras),
            )
        return

    # Plain class: own annotations, most derived class first
    annotated = False
    for klass in _user_classes(cls):
        for name in inspect.get_annotations(klass):
            annotated = True
            hint = hints.get(name, Any)
            if get_origin(hint) is ClassVar or hint is ClassVar:
                continue
            if isinstance(klass.__dict__.get(name), (property, staticmethod, classmethod)):
                continue
            declared, extras = split_annotated(hint)
            yield PropertyDescriptor(
                owner=cls,
                name=name,
                declared_type=declared,
                annotation=read_annotation(extras),
            )

    if not annotated:
        yield from _init_parameters(cls)


@functools.lru_cache(maxsize=_MEMO_SIZE)
def _harvest(cls: type) -> tuple[PropertyDescriptor, ...]:
    found: dict[str, PropertyDescriptor] = {}

    def add(descriptor: PropertyDescriptor) -> None:
        # First seen wins; shadowed duplicates are dropped
        if descriptor.name.startswith("_") or descriptor.name in found:
            return
        found[descriptor.name] = descriptor

    for descriptor in _harvest_fields(cls):
        add(descriptor)

    for klass in _user_classes(cls):
        for name, attr in klass.__dict__.items():
            if isinstance(attr, property):
                add(_describe_property(cls, name, attr))

    return tuple(found.values())


def describe_type(cls: type) -> dict[str, PropertyDescriptor]:
    """Build the name-keyed property table for a class.

    Registered tables take priority over introspection. Results of
    introspection are memoized per class.
    """
    registered = _registered.get(cls)
    if registered is not None:
        return {d.name: d for d in registered}
    return {d.name: d for d in _harvest(cls)}


def register_type(cls: type, descriptors: Iterable[PropertyDescriptor]) -> None:
    """Register an explicit property table for a class.

    Duplicate names keep the first descriptor.
    """
    table: dict[str, PropertyDescriptor] = {}
    for descriptor in descriptors:
        table.setdefault(descriptor.name, descriptor)
    with _registry_lock:
        _registered[cls] = tuple(table.values())


def unregister_type(cls: type) -> None:
    """Remove an explicit property table."""
    with _registry_lock:
        _registered.pop(cls, None)


def clear_catalog_cache() -> None:
    """Drop memoized introspection results."""
    _harvest.cache_clear()


def readable(catalog: dict[str, PropertyDescriptor]) -> dict[str, PropertyDescriptor]:
    """Properties that can be read from a source instance."""
    return {name: d for name, d in catalog.items() if d.can_read}


def writable(catalog: dict[str, PropertyDescriptor]) -> dict[str, PropertyDescriptor]:
    """Properties that can be assigned on a target instance."""
    return {name: d for name, d in catalog.items() if d.can_write}
