"""Rendering of type descriptors and the anchors that link to them."""

from __future__ import annotations

from restdoc.models.types import (
    ANY_TYPE,
    ITERABLE_TYPE,
    LIST_TYPE,
    MAP_TYPE,
    NONE_TYPE,
    OPTIONAL_TYPE,
    UNION_TYPE,
    TypeDescriptor,
)
from restdoc.render.sink import Sink

PLAIN_TYPES: dict[str, str] = {
    "str": "string",
    "int": "integer",
    "float": "double",
    "bool": "boolean",
    "datetime.datetime": "date",
    "datetime.date": "date",
    ANY_TYPE: "any",
    NONE_TYPE: "null",
}
"""Source type name → display name. These are rendered as text, never linked."""

SEQUENCE_TYPES = frozenset({LIST_TYPE, ITERABLE_TYPE})

SKIP_TYPES = frozenset({*PLAIN_TYPES, MAP_TYPE, *SEQUENCE_TYPES, OPTIONAL_TYPE, UNION_TYPE})
"""Names never given a section of their own in the type list."""


def type_anchor(name: str) -> str:
    return name.replace(".", "-")


def endpoint_anchor(http_method: str | None, path: str) -> str:
    return f"{http_method or ''}-" + path.replace("/", "-").replace("{", "-").replace("}", "-")


def show_type(sink: Sink, type_: TypeDescriptor) -> None:
    """
    Render a type expression.

    - plain types render as their display name;
    - any other non-generic type renders as a link to its type section;
    - ``dict[K, V]`` renders as ``{ K : V, }``;
    - ``list[T]`` and iterables render as ``[ T, ]``;
    - ``Optional[T]`` renders as ``T``.

    Any other generic, or a container with the wrong number of arguments,
    renders as an ``<??name??>`` placeholder. This never raises.
    """
    name = type_.name
    args = type_.type_arguments

    if name in PLAIN_TYPES:
        sink.text(PLAIN_TYPES[name])
        return

    if not args:
        type_link(sink, name)
        return

    if name == MAP_TYPE and len(args) == 2:
        sink.text("{ ")
        show_type(sink, args[0])
        sink.text(" : ")
        show_type(sink, args[1])
        sink.text(", }")
        return

    if name in SEQUENCE_TYPES and len(args) == 1:
        sink.text("[ ")
        show_type(sink, args[0])
        sink.text(", ]")
        return

    if name == OPTIONAL_TYPE and len(args) == 1:
        show_type(sink, args[0])
        return

    sink.text(f"<??{name}??>")


def type_link(sink: Sink, name: str) -> None:
    sink.link("#" + type_anchor(name))
    sink.text(name)
    sink.end_link()
