"""Recursive, language-agnostic type descriptors."""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Canonical names the scanner gives to container and special types.
MAP_TYPE = "dict"
LIST_TYPE = "list"
ITERABLE_TYPE = "collections.abc.Iterable"
OPTIONAL_TYPE = "typing.Optional"
UNION_TYPE = "typing.Union"
ANY_TYPE = "typing.Any"
NONE_TYPE = "None"


class TypeDescriptor(BaseModel):
    """
    A type name plus its ordered generic arguments.

    ``TypeDescriptor(name="dict", type_arguments=(str_td, widget_td))`` stands
    for a mapping from strings to widgets. Non-generic types carry an empty
    ``type_arguments`` tuple.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    type_arguments: tuple[TypeDescriptor, ...] = Field(default=(), alias="typeArguments")

    @field_validator("type_arguments", mode="before")
    @classmethod
    def _null_arguments(cls, value: object) -> object:
        return () if value is None else value

    @classmethod
    def of(cls, name: str, *arguments: TypeDescriptor) -> TypeDescriptor:
        """Shorthand constructor: ``TypeDescriptor.of("list", TypeDescriptor.of("str"))``."""
        return cls(name=name, type_arguments=arguments)

    def walk(self) -> Iterator[TypeDescriptor]:
        """Yield this descriptor and every nested argument, depth first."""
        yield self
        for argument in self.type_arguments:
            yield from argument.walk()

    def __str__(self) -> str:
        if not self.type_arguments:
            return self.name
        return f"{self.name}[{', '.join(str(a) for a in self.type_arguments)}]"
