"""Abstract declaration view consumed by the extractor.

A :class:`Declaration` is a named, typed, possibly documented, possibly
annotated program element. The scanner in :mod:`restdoc.extract.introspect`
builds these from live Python modules; tests and other front ends may build
them by hand.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from restdoc.models.types import TypeDescriptor


class DeclarationKind(StrEnum):
    MODULE = "module"
    CLASS = "class"
    ENUM = "enum"
    ENUM_CONSTANT = "enum_constant"
    CONSTRUCTOR = "constructor"
    METHOD = "method"
    PARAMETER = "parameter"
    FIELD = "field"


@dataclass(frozen=True)
class Annotation:
    """A marker attached to a declaration. ``name`` is fully qualified."""

    name: str
    value: Any = None


@dataclass(eq=False)
class Declaration:
    """One program element and its nested elements."""

    name: str
    kind: DeclarationKind
    qualified_name: str = ""
    type: TypeDescriptor | None = None
    doc: str | None = None
    annotations: list[Annotation] = field(default_factory=list)
    enclosing: Declaration | None = field(default=None, repr=False)
    parameters: list[Declaration] = field(default_factory=list, repr=False)
    enclosed: list[Declaration] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if not self.qualified_name:
            self.qualified_name = self.name

    def annotation(self, name: str) -> Annotation | None:
        """Return the first annotation called ``name``, or None."""
        for ann in self.annotations:
            if ann.name == name:
                return ann
        return None

    def has_annotation(self, name: str) -> bool:
        return self.annotation(name) is not None

    def add_parameter(self, child: Declaration) -> Declaration:
        child.enclosing = self
        self.parameters.append(child)
        return child

    def add_enclosed(self, child: Declaration) -> Declaration:
        child.enclosing = self
        self.enclosed.append(child)
        return child

    def walk(self) -> Iterator[Declaration]:
        """Yield this declaration, then its parameters and enclosed elements, depth first."""
        yield self
        for param in self.parameters:
            yield from param.walk()
        for child in self.enclosed:
            yield from child.walk()
