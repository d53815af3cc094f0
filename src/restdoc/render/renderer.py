"""Render merged IR documents into a single cross-linked document."""

from __future__ import annotations

import io
from collections.abc import Iterable, Sequence
from pathlib import Path

import structlog

from restdoc.errors import DocumentIOError
from restdoc.models.config import RenderConfig
from restdoc.models.ir import (
    ArgumentLocation,
    ResourceArgument,
    ResourceMethod,
    TransferClass,
    TransferClassMap,
)
from restdoc.render.examples import document_examples
from restdoc.render.javadoc import output_javadoc
from restdoc.render.loader import load_resource_methods, load_transfer_classes
from restdoc.render.markup import (
    bold_text,
    class_heading,
    heading,
    table_of_contents_header,
)
from restdoc.render.resolution import ImportResolver, TypeResolver, document_unresolved_type
from restdoc.render.sink import HtmlSink, Sink
from restdoc.render.types import SKIP_TYPES, endpoint_anchor, show_type, type_anchor

logger = structlog.get_logger("restdoc.renderer")

_LOCATION_LABELS = {
    ArgumentLocation.PATH: "path",
    ArgumentLocation.QUERY: "query",
    ArgumentLocation.CONTEXT: "context",
    ArgumentLocation.BODY: "body",
}


def sort_endpoints(methods: Iterable[ResourceMethod]) -> list[ResourceMethod]:
    """Order endpoints by ``(path, method)``. Equal keys keep their input order."""
    return sorted(methods, key=lambda m: (m.path or "", m.http_method or ""))


def documented_types(transfer_classes: TransferClassMap) -> list[str]:
    """
    Every type name that gets a section, sorted.

    This is the known type names plus every name reachable from their
    members (generic arguments included), minus plain types and bare
    container names.
    """
    names = set(transfer_classes)
    for klass in transfer_classes.values():
        for member in klass.members or ():
            names.update(t.name for t in member.type.walk())
    return sorted(names - SKIP_TYPES)


def _endpoint_title(method: ResourceMethod, full_path: str) -> str:
    return f"{(method.http_method or '').upper()} {full_path}"


class DocumentRenderer:
    """
    Drives a :class:`Sink` through the endpoint and type sections.

    Example::

        config = RenderConfig(
            json_classes_files=["build/ir/json_classes.json"],
            rest_endpoints_files=["build/ir/rest_endpoints.json"],
        )
        with open("rest.html", "w") as out:
            DocumentRenderer(config).render(HtmlSink(out))
    """

    def __init__(self, config: RenderConfig, resolver: TypeResolver | None = None) -> None:
        self.config = config
        self.resolver = resolver if resolver is not None else ImportResolver(config.resolution_paths)
        self._logger = structlog.get_logger("restdoc.renderer")

    def render(
        self,
        sink: Sink,
        transfer_classes: TransferClassMap | None = None,
        endpoints: Sequence[ResourceMethod] | None = None,
    ) -> None:
        """
        Render the whole document into ``sink`` and close it.

        IR not passed in is loaded from the files named in the config.

        Raises:
            DocumentIOError: A configured IR document cannot be loaded.
            MissingExampleArgumentError: An example path placeholder has no value.
            ExampleJsonError: A JSON example cannot be parsed.
        """
        if transfer_classes is None:
            transfer_classes = load_transfer_classes(self.config.json_classes_files)
        if endpoints is None:
            endpoints = load_resource_methods(self.config.rest_endpoints_files)

        ordered = sort_endpoints(endpoints)
        types = documented_types(transfer_classes)
        self._document_rest_endpoints(sink, ordered)
        self._document_transfer_classes(sink, transfer_classes, types)
        sink.flush()
        sink.close()
        self._logger.info("render_finished", endpoints=len(ordered), types=len(types))

    # ── Endpoints ─────────────────────────────────────────────────────────────

    def _full_path(self, method: ResourceMethod) -> str:
        return self.config.endpoint_prefix + (method.path or "")

    def _document_rest_endpoints(self, sink: Sink, methods: list[ResourceMethod]) -> None:
        heading(sink, 1, "REST Endpoints")
        table_of_contents_header(sink)
        sink.bullet_list()
        for method in methods:
            full_path = self._full_path(method)
            sink.list_item()
            sink.link("#" + endpoint_anchor(method.http_method, full_path))
            sink.text(_endpoint_title(method, full_path))
            sink.end_link()
            sink.end_list_item()
        sink.end_bullet_list()

        for method in methods:
            self._document_endpoint(sink, method)

    def _document_endpoint(self, sink: Sink, method: ResourceMethod) -> None:
        full_path = self._full_path(method)
        heading(
            sink,
            3,
            _endpoint_title(method, full_path),
            anchor=endpoint_anchor(method.http_method, full_path),
        )
        output_javadoc(sink, method.javadoc)

        if method.consumes_content_type is not None:
            sink.paragraph()
            bold_text(sink, "Request Content-Type: ")
            sink.text(method.consumes_content_type)
            sink.end_paragraph()

        if method.arguments:
            bold_text(sink, "Arguments:")
            sink.definition_list()
            for argument in method.arguments:
                self._document_argument(sink, argument)
            sink.end_definition_list()

        bold_text(sink, "Returns:")
        sink.bullet_list()
        if method.return_content_type is not None:
            sink.list_item()
            bold_text(sink, "Content-Type:")
            sink.non_breaking_space()
            sink.text(method.return_content_type)
            sink.end_list_item()
        sink.list_item()
        bold_text(sink, "Object-Type:")
        sink.non_breaking_space()
        show_type(sink, method.return_type)
        sink.end_list_item()
        sink.end_bullet_list()

        if method.example_response is not None or method.example_args is not None:
            document_examples(sink, method, self.config)

    @staticmethod
    def _document_argument(sink: Sink, argument: ResourceArgument) -> None:
        sink.defined_term()
        sink.text(argument.name)
        sink.text(" type ")
        show_type(sink, argument.type)
        sink.text(f" ({_LOCATION_LABELS[argument.location]})")
        sink.end_defined_term()
        if argument.doc is not None:
            sink.definition()
            sink.text(argument.doc)
            sink.end_definition()

    # ── Types ─────────────────────────────────────────────────────────────────

    def _document_transfer_classes(
        self, sink: Sink, transfer_classes: TransferClassMap, types: list[str]
    ) -> None:
        heading(sink, 1, "Transfer Classes")
        table_of_contents_header(sink)
        sink.bullet_list()
        for name in types:
            sink.list_item()
            sink.link("#" + type_anchor(name))
            sink.text(name)
            sink.end_link()
            sink.end_list_item()
        sink.end_bullet_list()

        for name in types:
            klass = transfer_classes.get(name)
            if klass is None:
                document_unresolved_type(sink, self.resolver, name)
            else:
                self._document_transfer_class(sink, name, klass)

    @staticmethod
    def _document_transfer_class(sink: Sink, name: str, klass: TransferClass) -> None:
        class_heading(sink, name)
        output_javadoc(sink, klass.javadoc)

        if klass.members:
            sink.paragraph()
            sink.monospaced()
            sink.text("{")
            sink.line_break()
            for member in klass.members:
                for _ in range(4):
                    sink.non_breaking_space()
                sink.text(f'"{member.name}" : ')
                show_type(sink, member.type)
                sink.line_break()
            sink.text("}")
            sink.end_monospaced()
            sink.end_paragraph()

        if klass.values:
            sink.definition_list()
            for value in klass.values:
                sink.defined_term()
                sink.text(f'"{value.name}"')
                sink.end_defined_term()
                sink.definition()
                output_javadoc(sink, value.doc)
                sink.end_definition()
            sink.end_definition_list()


def run_render(config: RenderConfig, resolver: TypeResolver | None = None) -> Path:
    """
    Render the configured IR documents to ``config.output_path``.

    The output file is written only after the whole document rendered, so a
    failed run leaves no file behind.

    Raises:
        DocumentIOError: An IR document cannot be loaded or the output cannot be written.
        MissingExampleArgumentError: An example path placeholder has no value.
        ExampleJsonError: A JSON example cannot be parsed.
    """
    buffer = io.StringIO()
    DocumentRenderer(config, resolver).render(HtmlSink(buffer, title=config.title))
    target = Path(config.output_path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(buffer.getvalue(), encoding="utf-8")
    except OSError as exc:
        raise DocumentIOError(str(target), str(exc)) from exc
    logger.info("document_written", path=str(target))
    return target
