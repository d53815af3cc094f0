"""Markers for documenting Python REST services.

Decorators attach endpoint and type metadata to functions and classes;
parameter metadata travels in ``typing.Annotated``::

    from typing import Annotated

    from restdoc.extract import markers as rd


    @rd.path("/widgets")
    class WidgetResource:
        @rd.get
        @rd.path("/{id}")
        @rd.produces("application/json")
        @rd.example_args("id=7")
        def fetch(self, widget_id: Annotated[str, rd.PathParam("id")]) -> Widget:
            \"\"\"Fetch one widget.\"\"\"

Every marker becomes an :class:`~restdoc.extract.declarations.Annotation`
with a fully-qualified name from the constants below.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from restdoc.extract.declarations import Annotation

MARKERS_ATTR = "__restdoc_markers__"

_NS = "restdoc.markers"

GET = f"{_NS}.GET"
POST = f"{_NS}.POST"
PUT = f"{_NS}.PUT"
PATCH = f"{_NS}.PATCH"
DELETE = f"{_NS}.DELETE"
HTTP_METHOD_MARKERS = (GET, POST, PUT, PATCH, DELETE)

PATH = f"{_NS}.Path"
PRODUCES = f"{_NS}.Produces"
CONSUMES = f"{_NS}.Consumes"
EXAMPLE_REQUEST = f"{_NS}.ExampleRequest"
EXAMPLE_RESPONSE = f"{_NS}.ExampleResponse"
EXAMPLE_ARGS = f"{_NS}.ExampleArgs"
DOC_ENUM = f"{_NS}.DocEnum"
JSON_SERIALIZE = f"{_NS}.JsonSerialize"
JSON_PROPERTY = f"{_NS}.JsonProperty"
PATH_PARAM = f"{_NS}.PathParam"
QUERY_PARAM = f"{_NS}.QueryParam"
CONTEXT = f"{_NS}.Context"
ARGUMENT_DOC = f"{_NS}.ArgumentDoc"

_T = TypeVar("_T")


def markers_of(obj: Any) -> list[Annotation]:
    """Return the markers attached to ``obj`` by the decorators in this module."""
    return list(obj.__dict__.get(MARKERS_ATTR, ())) if hasattr(obj, "__dict__") else []


def _mark(obj: _T, annotation: Annotation) -> _T:
    # Markers live in the object's own __dict__; subclasses do not inherit them.
    existing = obj.__dict__.get(MARKERS_ATTR, ())
    setattr(obj, MARKERS_ATTR, (*existing, annotation))
    return obj


def _marker(name: str, value: Any = None) -> Callable[[_T], _T]:
    def decorate(obj: _T) -> _T:
        return _mark(obj, Annotation(name, value))

    return decorate


# ── HTTP methods ───────────────────────────────────────────────────────────────


def get(func: _T) -> _T:
    return _mark(func, Annotation(GET))


def post(func: _T) -> _T:
    return _mark(func, Annotation(POST))


def put(func: _T) -> _T:
    return _mark(func, Annotation(PUT))


def patch(func: _T) -> _T:
    return _mark(func, Annotation(PATCH))


def delete(func: _T) -> _T:
    return _mark(func, Annotation(DELETE))


# ── Endpoint metadata ──────────────────────────────────────────────────────────


def path(template: str) -> Callable[[_T], _T]:
    """Path template of a resource class or endpoint method, e.g. ``"/{id}"``."""
    return _marker(PATH, template)


def produces(*content_types: str) -> Callable[[_T], _T]:
    return _marker(PRODUCES, tuple(content_types))


def consumes(*content_types: str) -> Callable[[_T], _T]:
    return _marker(CONSUMES, tuple(content_types))


def example_request(text: str) -> Callable[[_T], _T]:
    return _marker(EXAMPLE_REQUEST, text)


def example_response(text: str) -> Callable[[_T], _T]:
    return _marker(EXAMPLE_RESPONSE, text)


def example_args(spec: str) -> Callable[[_T], _T]:
    """Example path bindings as ``"key=value|key2=value2"``."""
    return _marker(EXAMPLE_ARGS, spec)


# ── Type metadata ──────────────────────────────────────────────────────────────


def doc_enum(cls: _T) -> _T:
    """Document an ``enum.Enum`` subclass, one entry per member."""
    return _mark(cls, Annotation(DOC_ENUM))


def json_serialize(cls: _T) -> _T:
    """Document a class as a serialized transfer type even if it has no properties."""
    return _mark(cls, Annotation(JSON_SERIALIZE))


# ── Annotated metadata ─────────────────────────────────────────────────────────


class _ParameterMarker:
    """Base for metadata objects placed in ``typing.Annotated``."""

    def annotation(self) -> Annotation:
        raise NotImplementedError


@dataclass(frozen=True)
class JsonProperty(_ParameterMarker):
    """A serialized property. ``name`` overrides the parameter or attribute name."""

    name: str | None = None

    def annotation(self) -> Annotation:
        return Annotation(JSON_PROPERTY, self.name)


@dataclass(frozen=True)
class PathParam(_ParameterMarker):
    name: str

    def annotation(self) -> Annotation:
        return Annotation(PATH_PARAM, self.name)


@dataclass(frozen=True)
class QueryParam(_ParameterMarker):
    name: str | None = None

    def annotation(self) -> Annotation:
        return Annotation(QUERY_PARAM, self.name)


@dataclass(frozen=True)
class Context(_ParameterMarker):
    """The argument is injected by the framework, not sent by the client."""

    def annotation(self) -> Annotation:
        return Annotation(CONTEXT)


@dataclass(frozen=True)
class ArgumentDoc(_ParameterMarker):
    text: str

    def annotation(self) -> Annotation:
        return Annotation(ARGUMENT_DOC, self.text)


def parameter_annotations(metadata: tuple[Any, ...]) -> list[Annotation]:
    """Pick the markers out of ``Annotated`` metadata, ignoring anything else."""
    return [m.annotation() for m in metadata if isinstance(m, _ParameterMarker)]
