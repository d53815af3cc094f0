"""Rendering: IR documents → cross-linked document."""

from restdoc.render.loader import load_resource_methods, load_transfer_classes
from restdoc.render.renderer import DocumentRenderer, documented_types, run_render, sort_endpoints
from restdoc.render.resolution import (
    ImportResolver,
    NullResolver,
    PythonType,
    ResolvedType,
    StaticResolver,
    TypeResolver,
    resolve_nameish,
)
from restdoc.render.sink import HtmlSink, Sink

__all__ = [
    # Rendering
    "DocumentRenderer",
    "run_render",
    "sort_endpoints",
    "documented_types",
    # IR loading
    "load_transfer_classes",
    "load_resource_methods",
    # Sinks
    "Sink",
    "HtmlSink",
    # Type resolution
    "ResolvedType",
    "TypeResolver",
    "PythonType",
    "ImportResolver",
    "StaticResolver",
    "NullResolver",
    "resolve_nameish",
]
