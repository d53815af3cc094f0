"""Intermediate representation shared by the extractor and the renderer.

The IR is two JSON documents: a mapping of fully-qualified type name to
:class:`TransferClass`, and a list of :class:`ResourceMethod`. Python
attribute names are snake_case; the JSON field names are fixed by the
aliases below and must not change without versioning the documents.
"""

from __future__ import annotations

import json
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from restdoc.models.types import TypeDescriptor

_IR_CONFIG = ConfigDict(populate_by_name=True)


class ArgumentLocation(StrEnum):
    """Where an endpoint argument is bound from. Inferred once at extraction."""

    PATH = "PATH"
    QUERY = "QUERY"
    CONTEXT = "CONTEXT"
    BODY = "BODY"


class ResourceArgument(BaseModel):
    """One argument of an endpoint method."""

    model_config = _IR_CONFIG

    name: str
    type: TypeDescriptor
    doc: str | None = None
    location: ArgumentLocation = ArgumentLocation.BODY


class ResourceMethod(BaseModel):
    """The documented shape of one endpoint operation."""

    model_config = _IR_CONFIG

    name: str = ""
    http_method: str | None = Field(default=None, alias="method")
    path: str | None = None
    """Template with ``{name}`` placeholders. After extraction this is the full path."""
    return_content_type: str | None = Field(default=None, alias="returnContentType")
    consumes_content_type: str | None = Field(default=None, alias="consumesContentType")
    return_type: TypeDescriptor = Field(alias="returnType")
    arguments: list[ResourceArgument] = Field(default_factory=list, alias="resourceArgument")
    javadoc: str | None = None
    example_response: str | None = Field(default=None, alias="exampleResponse")
    example_request: str | None = Field(default=None, alias="exampleRequest")
    example_args: dict[str, str] | None = Field(default=None, alias="exampleArgs")

    @field_validator("arguments", mode="before")
    @classmethod
    def _null_arguments(cls, value: object) -> object:
        return [] if value is None else value


class ResourceClass(BaseModel):
    """Extraction-time grouping of the endpoint methods of one enclosing declaration."""

    base_path: str | None = None
    members: list[ResourceMethod] = Field(default_factory=list)


class TransferMember(BaseModel):
    """One serialized property of a transfer type."""

    model_config = _IR_CONFIG

    name: str
    type: TypeDescriptor


class TransferEnumValue(BaseModel):
    """One constant of a documented enumeration."""

    model_config = _IR_CONFIG

    name: str
    doc: str | None = None


class TransferClass(BaseModel):
    """
    The documented shape of one data type.

    ``members`` is ``None`` (or empty) for enum-only or opaque types and
    ``values`` is ``None`` (or empty) for anything that is not an enum.
    Empty collections are dropped when the IR is written, so a round trip
    turns them into ``None``.
    """

    model_config = _IR_CONFIG

    members: list[TransferMember] | None = None
    values: list[TransferEnumValue] | None = None
    javadoc: str | None = None
    log_info: str | None = Field(default=None, alias="logInfo")

    def add_member(self, name: str, type_: TypeDescriptor) -> None:
        if self.members is None:
            self.members = []
        self.members.append(TransferMember(name=name, type=type_))

    def add_value(self, name: str, doc: str | None) -> None:
        if self.values is None:
            self.values = []
        self.values.append(TransferEnumValue(name=name, doc=doc))


TransferClassMap = dict[str, TransferClass]

_TRANSFER_CLASSES = TypeAdapter(TransferClassMap)
_RESOURCE_METHODS = TypeAdapter(list[ResourceMethod])


# Mappings that hold user data rather than optional fields; written verbatim.
_VERBATIM_KEYS = frozenset({"exampleArgs"})


def _strip_empty(entity: dict[str, Any]) -> dict[str, Any]:
    """Drop ``None`` and empty-list fields from one entity object, recursively."""
    stripped = {}
    for key, value in entity.items():
        if value is None or value == []:
            continue
        stripped[key] = value if key in _VERBATIM_KEYS else _strip_nested(value)
    return stripped


def _strip_nested(value: Any) -> Any:
    if isinstance(value, dict):
        return _strip_empty(value)
    if isinstance(value, list):
        return [_strip_nested(v) for v in value]
    return value


def _dumps(data: Any) -> str:
    return json.dumps(data, sort_keys=True, indent=2, ensure_ascii=False) + "\n"


def dump_transfer_classes(classes: TransferClassMap) -> str:
    """
    Serialize the transfer class mapping as a stable, key-sorted JSON document.

    Every type name is written, even when its entry has nothing left but ``{}``.
    """
    data = _TRANSFER_CLASSES.dump_python(classes, mode="json", by_alias=True)
    return _dumps({name: _strip_empty(entry) for name, entry in data.items()})


def dump_resource_methods(methods: list[ResourceMethod]) -> str:
    """Serialize endpoint methods as a stable, key-sorted JSON document."""
    data = _RESOURCE_METHODS.dump_python(methods, mode="json", by_alias=True)
    return _dumps([_strip_empty(method) for method in data])


def parse_transfer_classes(text: str | bytes) -> TransferClassMap:
    """Parse a transfer class document. Raises ``pydantic.ValidationError`` on bad input."""
    return _TRANSFER_CLASSES.validate_json(text)


def parse_resource_methods(text: str | bytes) -> list[ResourceMethod]:
    """Parse an endpoint document. Raises ``pydantic.ValidationError`` on bad input."""
    return _RESOURCE_METHODS.validate_json(text)
