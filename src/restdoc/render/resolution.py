"""
Resolution of type names that no loaded IR document describes.

When the renderer meets a referenced type with no transfer-class entry it
asks a :class:`TypeResolver` for the live type. Python has no nested-class
binary names, so ``pkg.mod.Outer.Inner`` may not be importable as written;
:func:`resolve_nameish` strips trailing segments until something resolves
and then descends through nested types to reach the requested name.
"""

from __future__ import annotations

import enum
import importlib
import inspect
from collections.abc import Iterable, Sequence
from pathlib import Path
from types import ModuleType
from typing import Protocol, runtime_checkable

import structlog

from restdoc.importing import search_path
from restdoc.render.markup import class_heading, monospaced_text
from restdoc.render.sink import Sink

logger = structlog.get_logger("restdoc.resolution")


@runtime_checkable
class ResolvedType(Protocol):
    full_name: str

    def is_enum(self) -> bool: ...

    def enum_constants(self) -> list[str]: ...

    def nested_types(self) -> list[ResolvedType]: ...


@runtime_checkable
class TypeResolver(Protocol):
    def resolve(self, name: str) -> ResolvedType | None: ...


class PythonType:
    """A module or class viewed as a resolvable type."""

    def __init__(self, obj: type | ModuleType) -> None:
        self.obj = obj
        if isinstance(obj, ModuleType):
            self.full_name = obj.__name__
        else:
            self.full_name = f"{obj.__module__}.{obj.__qualname__}"

    def __repr__(self) -> str:
        return f"PythonType({self.full_name!r})"

    def is_enum(self) -> bool:
        return inspect.isclass(self.obj) and issubclass(self.obj, enum.Enum)

    def enum_constants(self) -> list[str]:
        if not self.is_enum():
            return []
        return [member.name for member in self.obj]  # type: ignore[union-attr]

    def nested_types(self) -> list[ResolvedType]:
        nested: list[ResolvedType] = []
        if isinstance(self.obj, ModuleType):
            for name, value in vars(self.obj).items():
                if (
                    inspect.isclass(value)
                    and value.__module__ == self.obj.__name__
                    and value.__qualname__ == name
                ):
                    nested.append(PythonType(value))
        else:
            prefix = self.obj.__qualname__ + "."
            for name, value in vars(self.obj).items():
                if inspect.isclass(value) and value.__qualname__ == prefix + name:
                    nested.append(PythonType(value))
        return nested


class ImportResolver:
    """Resolve names by importing them, with extra search roots prepended to ``sys.path``."""

    def __init__(self, search_paths: Sequence[str | Path] = ()) -> None:
        self.search_paths = list(search_paths)

    def resolve(self, name: str) -> ResolvedType | None:
        try:
            with search_path(self.search_paths):
                module = importlib.import_module(name)
        except Exception as exc:
            logger.debug("import_failed", name=name, error=str(exc))
            return None
        return PythonType(module)


class StaticResolver:
    """Resolve names against a fixed set of modules and classes."""

    def __init__(self, objects: Iterable[type | ModuleType] = ()) -> None:
        self._registry: dict[str, PythonType] = {}
        for obj in objects:
            self.register(obj)

    def register(self, obj: type | ModuleType) -> None:
        resolved = PythonType(obj)
        self._registry[resolved.full_name] = resolved

    def resolve(self, name: str) -> ResolvedType | None:
        return self._registry.get(name)


class NullResolver:
    """Resolves nothing."""

    def resolve(self, name: str) -> ResolvedType | None:
        return None


def _try_resolve(resolver: TypeResolver, name: str) -> ResolvedType | None:
    try:
        return resolver.resolve(name)
    except Exception as exc:
        logger.debug("resolve_failed", name=name, error=str(exc))
        return None


def _descend(start: ResolvedType, name: str) -> ResolvedType | None:
    current = start
    while current.full_name != name:
        for nested in current.nested_types():
            if name == nested.full_name or name.startswith(nested.full_name + "."):
                current = nested
                break
        else:
            return None
    return current


def resolve_nameish(resolver: TypeResolver, name: str) -> ResolvedType | None:
    """
    Resolve ``name``, falling back to nested-type lookup.

    Tries the full name first. Otherwise strips the last dotted segment
    repeatedly; the first prefix that resolves is searched for a nested type
    whose full name matches. Returns ``None`` when nothing matches.
    """
    found = _try_resolve(resolver, name)
    if found is not None:
        return found
    prefix = name
    while "." in prefix:
        prefix = prefix.rsplit(".", 1)[0]
        enclosing = _try_resolve(resolver, prefix)
        if enclosing is None:
            continue
        try:
            return _descend(enclosing, name)
        except Exception as exc:
            logger.debug("nested_lookup_failed", name=name, enclosing=prefix, error=str(exc))
            return None
    return None


def document_unresolved_type(sink: Sink, resolver: TypeResolver, name: str) -> None:
    """
    Emit a section for a type that has no transfer-class entry.

    Enums get their constant names; anything else gets a notice. Never raises
    for a missing or broken type.
    """
    class_heading(sink, name)
    resolved = resolve_nameish(resolver, name)
    if resolved is None:
        logger.debug("type_not_found", name=name)
        sink.text(f"Was not able to find class: {name}")
        sink.line_break()
        return

    try:
        is_enum = resolved.is_enum()
        constants = resolved.enum_constants() if is_enum else []
    except Exception as exc:
        logger.debug("type_inspection_failed", name=name, error=str(exc))
        sink.text(f"Was not able to inspect class: {name}")
        sink.line_break()
        return

    if not is_enum:
        sink.text(f"Not an enumerated type, and no transfer class entry: {name}")
        sink.line_break()
        return

    sink.text("Enumerated Type.  Valid values are: ")
    monospaced_text(sink, ", ".join(f'"{constant}"' for constant in constants))
    sink.line_break()
